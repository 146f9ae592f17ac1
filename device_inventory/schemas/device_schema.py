# device_inventory/schemas/device_schema.py

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Mapping

from pydantic import BaseModel, Field, ConfigDict, field_validator, field_serializer
from pydantic import ValidationError as PydanticValidationError

from device_inventory.core import ValidationError

# Orden fijo de las columnas en las cargas CSV
DEVICE_FIELD_ORDER = (
    "device_name",
    "device_type",
    "brand",
    "model",
    "os",
    "os_version",
    "purchase_date",
    "warranty_end",
    "status",
    "price",
)

MAX_TEXT_LENGTH = 255


def normalize_iso_date(value: Any) -> str:
    """Convierte una fecha (o cadena ISO-8601) a 'YYYY-MM-DD'. La cadena vacía se conserva."""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return ""
        return date.fromisoformat(value).isoformat()
    raise ValueError("la fecha debe ser una cadena ISO-8601 (YYYY-MM-DD)")


class BaseDevice(BaseModel):
    device_name: str = Field(default="", max_length=MAX_TEXT_LENGTH)
    device_type: str = Field(default="", max_length=MAX_TEXT_LENGTH)
    brand: str = Field(default="", max_length=MAX_TEXT_LENGTH)
    model: str = Field(default="", max_length=MAX_TEXT_LENGTH)
    os: str = Field(default="", max_length=MAX_TEXT_LENGTH)
    os_version: str = Field(default="", max_length=MAX_TEXT_LENGTH)
    purchase_date: str = Field(default="", description="Fecha ISO-8601 (YYYY-MM-DD)")
    warranty_end: str = Field(default="", description="Fecha ISO-8601 (YYYY-MM-DD)")
    status: str = Field(default="", max_length=MAX_TEXT_LENGTH, examples=["Active", "Inactive"])
    price: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)

    @field_validator("purchase_date", "warranty_end", mode="before")
    @classmethod
    def validate_iso_date(cls, value: Any) -> str:
        return normalize_iso_date(value)


class DeviceCreate(BaseDevice):
    model_config = ConfigDict(extra="forbid")


class DeviceResponse(BaseDevice):
    id: int
    model_config = ConfigDict(from_attributes=True)

    @field_serializer("price")
    def serialize_price(self, price: Decimal) -> float:
        return float(price)


def format_validation_errors(exc: PydanticValidationError) -> list[str]:
    errors = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        errors.append(f"{location}: {error['msg']}" if location else error["msg"])
    return errors


def build_device_create(data: DeviceCreate | Mapping[str, Any]) -> DeviceCreate:
    """Valida un dispositivo nuevo y traduce los errores de pydantic al dominio."""
    payload = data.model_dump() if isinstance(data, DeviceCreate) else dict(data)
    if "id" in payload:
        raise ValidationError("El id lo asigna el almacenamiento", errors=["id: campo no permitido"])
    try:
        return DeviceCreate.model_validate(payload)
    except PydanticValidationError as e:
        errors = format_validation_errors(e)
        raise ValidationError(f"Dispositivo inválido: {'; '.join(errors)}", errors=errors) from e
