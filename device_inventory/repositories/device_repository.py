# device_inventory/repositories/device_repository.py

from abc import ABC, abstractmethod
from typing import Any, Mapping

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from device_inventory.core import logger, ValidationError, NotFoundError, StorageError
from device_inventory.models import Device
from device_inventory.schemas import DeviceCreate, DeviceResponse, build_device_create
from .partial_update import coerce_field_map, apply_field_map


def validate_page(limit: int, offset: int):
    if limit < 1:
        raise ValidationError(f"limit debe ser mayor que 0 (recibido {limit})")
    if offset < 0:
        raise ValidationError(f"offset no puede ser negativo (recibido {offset})")


class DeviceRepository(ABC):
    """Interfaz de persistencia de dispositivos, independiente del almacenamiento."""

    @abstractmethod
    def create(self, device: DeviceCreate | Mapping[str, Any]) -> DeviceResponse:
        """Persiste un dispositivo nuevo y lo devuelve con su id asignado."""

    @abstractmethod
    def get_by_id(self, device_id: int) -> DeviceResponse:
        """Devuelve el dispositivo o lanza NotFoundError."""

    @abstractmethod
    def list(self, limit: int = 10, offset: int = 0) -> list[DeviceResponse]:
        """Página de dispositivos ordenada por id ascendente."""

    @abstractmethod
    def update(self, device_id: int, field_map: Mapping[str, Any]) -> DeviceResponse:
        """Actualización parcial: todo el mapa se aplica o nada."""

    @abstractmethod
    def delete(self, device_id: int) -> None:
        """Borrado definitivo; lanza NotFoundError si no existe."""

    @abstractmethod
    def count(self) -> int:
        """Total de dispositivos almacenados."""


class SQLAlchemyDeviceRepository(DeviceRepository):

    def __init__(self, db: Session):
        self.db = db

    def _get_row(self, device_id: int, for_update: bool = False) -> Device:
        stmt = select(Device).where(Device.id == device_id)
        if for_update:
            stmt = stmt.with_for_update()
        device = self.db.execute(stmt).scalar_one_or_none()
        if device is None:
            logger.info(f"No se encontro dispositivo con id {device_id}")
            raise NotFoundError(device_id)
        return device

    def create(self, device: DeviceCreate | Mapping[str, Any]) -> DeviceResponse:
        data = build_device_create(device)
        try:
            new_device = Device(**data.model_dump())
            self.db.add(new_device)
            self.db.commit()
            self.db.refresh(new_device)
            logger.info(f"Dispositivo creado exitosamente con id {new_device.id}")
            return DeviceResponse.model_validate(new_device)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"No se pudo agregar el dispositivo: {e}", exc_info=True)
            raise StorageError(f"No se pudo agregar el dispositivo: {e}") from e

    def get_by_id(self, device_id: int) -> DeviceResponse:
        try:
            device = self._get_row(device_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error consultando el dispositivo {device_id}: {e}", exc_info=True)
            raise StorageError(f"Error consultando el dispositivo {device_id}: {e}") from e
        return DeviceResponse.model_validate(device)

    def list(self, limit: int = 10, offset: int = 0) -> list[DeviceResponse]:
        validate_page(limit, offset)
        try:
            stmt = select(Device).order_by(Device.id.asc()).offset(offset).limit(limit)
            devices = self.db.execute(stmt).scalars().all()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error listando dispositivos: {e}", exc_info=True)
            raise StorageError(f"Error listando dispositivos: {e}") from e
        return [DeviceResponse.model_validate(device) for device in devices]

    def update(self, device_id: int, field_map: Mapping[str, Any]) -> DeviceResponse:
        # Se valida el mapa completo antes de tocar la base
        coerced = coerce_field_map(field_map)

        try:
            device = self._get_row(device_id, for_update=True)
            if not coerced:
                current = DeviceResponse.model_validate(device)
                self.db.rollback()
                return current

            apply_field_map(device, coerced)
            self.db.commit()
            self.db.refresh(device)
            logger.info(f"Dispositivo {device_id} actualizado: {', '.join(coerced)}")
            return DeviceResponse.model_validate(device)
        except NotFoundError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"No se pudo actualizar el dispositivo con id {device_id}: {e}", exc_info=True)
            raise StorageError(f"No se pudo actualizar el dispositivo con id {device_id}: {e}") from e

    def delete(self, device_id: int) -> None:
        try:
            device = self._get_row(device_id, for_update=True)
            self.db.delete(device)
            self.db.commit()
            logger.info(f"Se elimino al dispositivo con id {device_id}")
        except NotFoundError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"No se pudo eliminar el dispositivo con id {device_id}: {e}", exc_info=True)
            raise StorageError(f"No se pudo eliminar el dispositivo con id {device_id}: {e}") from e

    def count(self) -> int:
        try:
            return self.db.execute(select(func.count(Device.id))).scalar_one()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error contando dispositivos: {e}", exc_info=True)
            raise StorageError(f"Error contando dispositivos: {e}") from e
