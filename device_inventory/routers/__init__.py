# device_inventory/routers/__init__.py

from fastapi import APIRouter

from . import device_router, upload_router
from .dependencies import get_device_repository

# Router de la API REST con el prefijo v1
api_router = APIRouter(prefix="/api/v1")

api_router.include_router(device_router.router)
api_router.include_router(upload_router.router)
