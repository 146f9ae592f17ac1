# device_inventory/services/device_service.py

from typing import Any, Mapping

from device_inventory.core import logger, settings, ValidationError
from device_inventory.repositories import DeviceRepository
from device_inventory.schemas import DeviceCreate, DeviceResponse


def resolve_offset(limit: int, offset: int | None = None, page: int | None = None) -> int:
    """
    Calcula el offset de la página pedida.

    `offset` explícito tiene prioridad; si no llega se usa `page` (1-based) y,
    sin ninguno de los dos, se empieza desde el principio.
    """
    if offset is not None:
        return offset
    if page is not None:
        if page < 1:
            raise ValidationError(f"page debe ser mayor o igual a 1 (recibido {page})")
        return (page - 1) * limit
    return 0


def create_device_service(repository: DeviceRepository, device_data: DeviceCreate) -> DeviceResponse:
    device = repository.create(device_data)
    logger.info(f"Dispositivo '{device.device_name}' registrado con id {device.id}")
    return device


def get_device_by_id_service(repository: DeviceRepository, device_id: int) -> DeviceResponse:
    return repository.get_by_id(device_id)


def list_devices_service(
    repository: DeviceRepository,
    limit: int | None = None,
    offset: int | None = None,
    page: int | None = None,
) -> tuple[list[DeviceResponse], int]:
    limit = settings.LIST_DEFAULT_LIMIT if limit is None else limit
    if limit > settings.LIST_MAX_LIMIT:
        raise ValidationError(f"limit no puede superar {settings.LIST_MAX_LIMIT} (recibido {limit})")
    offset = resolve_offset(limit, offset, page)
    devices = repository.list(limit=limit, offset=offset)
    return devices, repository.count()


def update_device_service(repository: DeviceRepository, device_id: int, field_map: Mapping[str, Any]) -> DeviceResponse:
    if not field_map:
        logger.info(f"No hay datos para actualizar para el dispositivo {device_id}")
    return repository.update(device_id, field_map)


def delete_device_service(repository: DeviceRepository, device_id: int) -> None:
    repository.delete(device_id)
