# device_inventory/repositories/partial_update.py

"""
Motor de actualización parcial.

Recibe un mapa `campo -> valor` sin tipo (tal como llega del JSON) y lo
convierte en asignaciones tipadas sobre un dispositivo. Todo el mapa se valida
antes de tocar el registro: o se aplica completo o no se aplica nada.
"""

import math
from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Mapping

from device_inventory.core import ValidationError
from device_inventory.schemas import normalize_iso_date
from device_inventory.schemas.device_schema import MAX_TEXT_LENGTH


class FieldKind(str, Enum):
    STRING = "string"
    DECIMAL = "decimal"
    DATE = "date"


class ValueTag(str, Enum):
    """Etiqueta del valor crudo recibido en el mapa."""
    STRING = "string"
    INTEGER = "integer"
    DECIMAL = "decimal"
    DATE = "date"
    UNSUPPORTED = "unsupported"


DEVICE_FIELD_KINDS: dict[str, FieldKind] = {
    "device_name": FieldKind.STRING,
    "device_type": FieldKind.STRING,
    "brand": FieldKind.STRING,
    "model": FieldKind.STRING,
    "os": FieldKind.STRING,
    "os_version": FieldKind.STRING,
    "purchase_date": FieldKind.DATE,
    "warranty_end": FieldKind.DATE,
    "status": FieldKind.STRING,
    "price": FieldKind.DECIMAL,
}

IMMUTABLE_FIELDS = frozenset({"id"})

# Qué etiquetas acepta cada tipo de campo
ACCEPTED_TAGS: dict[FieldKind, frozenset[ValueTag]] = {
    FieldKind.STRING: frozenset({ValueTag.STRING}),
    FieldKind.DECIMAL: frozenset({ValueTag.INTEGER, ValueTag.DECIMAL}),
    FieldKind.DATE: frozenset({ValueTag.STRING, ValueTag.DATE}),
}


def tag_value(raw: Any) -> ValueTag:
    # bool es subclase de int: se descarta antes
    if raw is None or isinstance(raw, bool):
        return ValueTag.UNSUPPORTED
    if isinstance(raw, str):
        return ValueTag.STRING
    if isinstance(raw, int):
        return ValueTag.INTEGER
    if isinstance(raw, (float, Decimal)):
        return ValueTag.DECIMAL
    if isinstance(raw, date):
        return ValueTag.DATE
    return ValueTag.UNSUPPORTED


def _coerce_string(field: str, raw: str) -> str:
    if len(raw) > MAX_TEXT_LENGTH:
        raise ValueError(f"{field}: máximo {MAX_TEXT_LENGTH} caracteres")
    return raw


def _coerce_decimal(field: str, raw: int | float | Decimal) -> Decimal:
    if isinstance(raw, float):
        if not math.isfinite(raw):
            raise ValueError(f"{field}: el valor debe ser finito")
        value = Decimal(str(raw))
    else:
        try:
            value = Decimal(raw)
        except InvalidOperation as e:
            raise ValueError(f"{field}: valor decimal inválido") from e
    if not value.is_finite():
        raise ValueError(f"{field}: el valor debe ser finito")
    if value < 0:
        raise ValueError(f"{field}: no puede ser negativo")
    # Mismo límite que la columna Numeric(12, 2); los ceros finales no cuentan
    if value.normalize().as_tuple().exponent < -2:
        raise ValueError(f"{field}: máximo 2 decimales")
    if value >= Decimal("1e10"):
        raise ValueError(f"{field}: valor fuera de rango")
    return value


def _coerce_date(field: str, raw: str | date) -> str:
    try:
        return normalize_iso_date(raw)
    except ValueError as e:
        raise ValueError(f"{field}: fecha ISO-8601 inválida ({raw!r})") from e


COERCERS = {
    FieldKind.STRING: _coerce_string,
    FieldKind.DECIMAL: _coerce_decimal,
    FieldKind.DATE: _coerce_date,
}


def coerce_field_map(field_map: Mapping[str, Any]) -> dict[str, Any]:
    """
    Valida y convierte el mapa completo.

    Lanza ValidationError con todos los problemas encontrados si algún campo es
    desconocido, inmutable o trae un valor de tipo incorrecto.
    """
    errors: list[str] = []
    coerced: dict[str, Any] = {}

    unknown = [key for key in field_map if key not in DEVICE_FIELD_KINDS and key not in IMMUTABLE_FIELDS]
    if unknown:
        errors.append(f"campos desconocidos: {', '.join(sorted(map(str, unknown)))}")

    for key, raw in field_map.items():
        if key in IMMUTABLE_FIELDS:
            errors.append(f"{key}: el campo es inmutable")
            continue
        kind = DEVICE_FIELD_KINDS.get(key)
        if kind is None:
            continue

        tag = tag_value(raw)
        if tag not in ACCEPTED_TAGS[kind]:
            errors.append(f"{key}: se esperaba {kind.value}, se recibió {type(raw).__name__}")
            continue

        try:
            coerced[key] = COERCERS[kind](key, raw)
        except ValueError as e:
            errors.append(str(e))

    if errors:
        raise ValidationError(f"Actualización inválida: {'; '.join(errors)}", errors=errors)
    return coerced


def apply_field_map(target: Any, coerced: Mapping[str, Any]) -> None:
    """Aplica asignaciones ya validadas sobre un objeto con atributos."""
    for key, value in coerced.items():
        setattr(target, key, value)
