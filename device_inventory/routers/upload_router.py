# device_inventory/routers/upload_router.py

from fastapi import APIRouter, Depends, File, UploadFile

from device_inventory.core import logger, settings
from device_inventory.repositories import DeviceRepository
from device_inventory.schemas import ImportResult
from device_inventory.services import import_devices
from .dependencies import get_device_repository

router = APIRouter(tags=["Import"])

@router.post("/upload", response_model=ImportResult)
def upload_devices_route(
    file: UploadFile = File(..., description="CSV sin cabecera obligatoria, 10 columnas por fila"),
    repository: DeviceRepository = Depends(get_device_repository),
):
    """
    Carga masiva de dispositivos desde CSV.

    Responde 200 con el resumen aunque algunas filas fallen; el cliente decide
    qué hacer con `errors`.
    """
    logger.info(f"📥 Importación recibida: {file.filename}")
    # Se lee un byte de más para detectar archivos que exceden el límite
    content = file.file.read(settings.MAX_UPLOAD_BYTES + 1)
    return import_devices(repository, content)
