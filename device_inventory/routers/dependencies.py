# device_inventory/routers/dependencies.py

from fastapi import Depends
from sqlalchemy.orm import Session

from device_inventory.database import get_db
from device_inventory.repositories import DeviceRepository, SQLAlchemyDeviceRepository


def get_device_repository(db: Session = Depends(get_db)) -> DeviceRepository:
    return SQLAlchemyDeviceRepository(db)
