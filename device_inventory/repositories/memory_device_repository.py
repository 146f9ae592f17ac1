# device_inventory/repositories/memory_device_repository.py

import threading
from itertools import count
from typing import Any, Mapping

from device_inventory.core import logger, NotFoundError
from device_inventory.schemas import DeviceCreate, DeviceResponse, build_device_create
from .device_repository import DeviceRepository, validate_page
from .partial_update import coerce_field_map


class InMemoryDeviceRepository(DeviceRepository):
    """
    Repositorio en memoria con la misma semántica que el de SQLAlchemy.

    Pensado para pruebas y desarrollo local. Un candado protege el diccionario
    para que operaciones concurrentes sobre ids distintos no se pisen.
    """

    def __init__(self):
        self._devices: dict[int, DeviceResponse] = {}
        self._ids = count(1)
        self._lock = threading.Lock()

    def create(self, device: DeviceCreate | Mapping[str, Any]) -> DeviceResponse:
        data = build_device_create(device)
        with self._lock:
            device_id = next(self._ids)
            record = DeviceResponse(id=device_id, **data.model_dump())
            self._devices[device_id] = record
        logger.info(f"Dispositivo creado en memoria con id {device_id}")
        return record.model_copy()

    def get_by_id(self, device_id: int) -> DeviceResponse:
        with self._lock:
            record = self._devices.get(device_id)
        if record is None:
            raise NotFoundError(device_id)
        return record.model_copy()

    def list(self, limit: int = 10, offset: int = 0) -> list[DeviceResponse]:
        validate_page(limit, offset)
        with self._lock:
            ids = sorted(self._devices)[offset:offset + limit]
            return [self._devices[device_id].model_copy() for device_id in ids]

    def update(self, device_id: int, field_map: Mapping[str, Any]) -> DeviceResponse:
        coerced = coerce_field_map(field_map)
        with self._lock:
            record = self._devices.get(device_id)
            if record is None:
                raise NotFoundError(device_id)
            # Se reemplaza el registro entero: los lectores nunca ven un estado a medias
            updated = record.model_copy(update=coerced)
            self._devices[device_id] = updated
        if coerced:
            logger.info(f"Dispositivo {device_id} actualizado en memoria: {', '.join(coerced)}")
        return updated.model_copy()

    def delete(self, device_id: int) -> None:
        with self._lock:
            if self._devices.pop(device_id, None) is None:
                raise NotFoundError(device_id)
        logger.info(f"Se elimino al dispositivo con id {device_id} (memoria)")

    def count(self) -> int:
        with self._lock:
            return len(self._devices)
