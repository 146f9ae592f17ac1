# device_inventory/models/device.py

from device_inventory.database import Base
from sqlalchemy import Column, String, Integer, Numeric

class Device(Base):
    __tablename__ = "devices"
    # Los ids borrados no se reutilizan en SQLite
    __table_args__ = {"sqlite_autoincrement": True}

    id =             Column(Integer, primary_key=True, index=True, autoincrement=True)
    device_name =    Column(String(255), nullable=False, default="")
    device_type =    Column(String(255), nullable=False, default="")
    brand =          Column(String(255), nullable=False, default="")
    model =          Column(String(255), nullable=False, default="")
    os =             Column(String(255), nullable=False, default="")
    os_version =     Column(String(255), nullable=False, default="")
    purchase_date =  Column(String(10), nullable=False, default="")  # ISO-8601 (YYYY-MM-DD)
    warranty_end =   Column(String(10), nullable=False, default="")  # ISO-8601 (YYYY-MM-DD)
    status =         Column(String(255), nullable=False, default="")
    price =          Column(Numeric(12, 2), nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<Device id={self.id} name={self.device_name!r}>"
