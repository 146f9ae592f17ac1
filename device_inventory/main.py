from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from device_inventory.core import logger, log_critical_error, send_discord_alert, ValidationError, NotFoundError, StorageError
from device_inventory.database import Database
from device_inventory.routers import api_router


api_description = """
API para la gestión del inventario de dispositivos.

* CRUD de dispositivos en `/api/v1/device`.
* Actualización parcial con un mapa de campos (`PUT`/`PATCH /api/v1/device/{id}`).
* Carga masiva desde CSV en `/api/v1/upload` (campo `file`), con errores por fila.
"""


@asynccontextmanager
async def lifespan(app: FastAPI):
    # --- Arranque ---
    logger.info("🚀 Iniciando API de inventario de dispositivos...")
    database = Database.from_settings()
    database.create_all()
    app.state.database = database
    send_discord_alert("API de inventario iniciada correctamente.", level="INFO")

    yield

    # --- Cierre ---
    logger.info("🛑 Deteniendo servicios...")
    database.close()


app = FastAPI(
    title="Device Inventory API",
    description=api_description,
    version="1.0.0",
    lifespan=lifespan
)


# --- Middleware CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Routers ---
app.include_router(api_router)


@app.get("/", tags=["Root"])
def read_root():
    return {"message": "Bienvenido a la API de inventario de dispositivos v1"}


@app.get("/health", tags=["Root"])
def health():
    return {"status": "ok"}


# --- Manejo de errores del dominio ---
@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Solicitud inválida.", "errors": jsonable_errors(exc)}
    )


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": exc.message, "errors": exc.errors}
    )


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": exc.message}
    )


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    log_critical_error(f"Error de almacenamiento en {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Error de almacenamiento."}
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Error 500 en {request.url.path}: {exc}")
    send_discord_alert(f"Error 500 en {request.url.path}: {exc}", level="CRITICAL")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Error interno del servidor."}
    )


def jsonable_errors(exc: RequestValidationError) -> list[str]:
    errors = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        errors.append(f"{location}: {error.get('msg')}")
    return errors
