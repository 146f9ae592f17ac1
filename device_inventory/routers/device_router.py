# device_inventory/routers/device_router.py

from typing import Any, List
from fastapi import APIRouter, Body, Depends, Query, Response, status

from device_inventory.repositories import DeviceRepository
from device_inventory.schemas import DeviceResponse, DeviceCreate
from device_inventory.services import (
    create_device_service,
    get_device_by_id_service,
    list_devices_service,
    update_device_service,
    delete_device_service,
)
from .dependencies import get_device_repository

router = APIRouter(prefix="/device", tags=["Devices"])

@router.post("", response_model=DeviceResponse, status_code=status.HTTP_201_CREATED)
def create_device_route(device_data: DeviceCreate, repository: DeviceRepository = Depends(get_device_repository)):
    return create_device_service(repository, device_data)

@router.get("", response_model=List[DeviceResponse])
def list_devices_route(
    response: Response,
    limit: int | None = Query(default=None, ge=1, description="Tamaño de página (10 por defecto)"),
    offset: int | None = Query(default=None, ge=0),
    page: int | None = Query(default=None, ge=1, description="Página 1-based; se ignora si llega offset"),
    repository: DeviceRepository = Depends(get_device_repository),
):
    """
    Lista dispositivos ordenados por id. Una página vacía devuelve [] con 200.
    """
    devices, total = list_devices_service(repository, limit=limit, offset=offset, page=page)
    response.headers["X-Total-Count"] = str(total)
    return devices

@router.get("/{device_id}", response_model=DeviceResponse)
def get_device_by_id_route(device_id: int, repository: DeviceRepository = Depends(get_device_repository)):
    return get_device_by_id_service(repository, device_id)

@router.put("/{device_id}", response_model=DeviceResponse)
@router.patch("/{device_id}", response_model=DeviceResponse)
def update_device_route(
    device_id: int,
    field_map: dict[str, Any] = Body(..., examples=[{"price": 300, "status": "Inactive"}]),
    repository: DeviceRepository = Depends(get_device_repository),
):
    """
    Actualización parcial: solo cambian los campos enviados. Un campo
    desconocido o de tipo incorrecto rechaza la petición completa.
    """
    return update_device_service(repository, device_id, field_map)

@router.delete("/{device_id}")
def delete_device_route(device_id: int, repository: DeviceRepository = Depends(get_device_repository)):
    delete_device_service(repository, device_id)
    return {"message": "Dispositivo eliminado", "id": device_id}
