# device_inventory/services/import_service.py

import csv
import io
from decimal import Decimal, InvalidOperation
from typing import Iterator

from device_inventory.core import logger, settings, ValidationError
from device_inventory.repositories import DeviceRepository
from device_inventory.schemas import (
    DEVICE_FIELD_ORDER,
    ImportResult,
    ImportRowError,
    ImportState,
    build_device_create,
)

EXPECTED_FIELDS = len(DEVICE_FIELD_ORDER)


class RowError(Exception):
    """Fallo de una sola fila; nunca sale del pipeline."""


def decode_upload(content: bytes, max_bytes: int | None = None) -> str:
    max_bytes = settings.MAX_UPLOAD_BYTES if max_bytes is None else max_bytes
    if len(content) > max_bytes:
        raise ValidationError(f"El archivo excede el tamaño máximo de {max_bytes} bytes")
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ValidationError(f"El archivo no es texto UTF-8 válido: {e}") from e


def split_line(line: str) -> list[str]:
    """
    Separa una línea física en celdas.

    Un campo entre comillas no puede continuar en la línea siguiente: una
    comilla sin cerrar o un campo demasiado grande es un error de esa fila.
    """
    try:
        return next(csv.reader([line], strict=True))
    except csv.Error as e:
        raise RowError(f"línea CSV mal formada: {e}") from e


def is_header(line: str) -> bool:
    try:
        cells = split_line(line)
    except RowError:
        return False
    return [cell.strip().lower() for cell in cells] == list(DEVICE_FIELD_ORDER)


def iter_csv_rows(text: str) -> Iterator[tuple[int, str]]:
    """
    Genera (número de línea, línea) de forma perezosa.

    Las líneas en blanco se omiten, igual que una cabecera con los nombres de
    los campos en la primera línea con contenido.
    """
    first = True
    for row_number, line in enumerate(io.StringIO(text, newline=""), start=1):
        line = line.rstrip("\r\n")
        if not line.strip():
            continue
        if first:
            first = False
            if is_header(line):
                logger.debug("Cabecera CSV detectada, se omite")
                continue
        yield row_number, line


def parse_row(cells: list[str]) -> dict:
    if len(cells) != EXPECTED_FIELDS:
        raise RowError(f"se esperaban {EXPECTED_FIELDS} campos, se recibieron {len(cells)}")

    values = dict(zip(DEVICE_FIELD_ORDER, (cell.strip() for cell in cells)))
    try:
        values["price"] = Decimal(values["price"])
    except InvalidOperation as e:
        raise RowError(f"precio inválido: {values['price']!r}") from e
    if not values["price"].is_finite():
        raise RowError(f"precio inválido: {values['price']!r}")
    return values


def set_state(result: ImportResult, state: ImportState, row_number: int | None = None):
    result.state = state
    if row_number is None:
        logger.debug(f"Importación: {state.value}")
    else:
        logger.debug(f"Importación: {state.value} (fila {row_number})")


def import_devices(repository: DeviceRepository, content: bytes) -> ImportResult:
    """
    Importa dispositivos desde un CSV, fila por fila.

    Cada línea es independiente: un error se anota en el resultado y se sigue
    con la siguiente, sin deshacer las filas ya creadas. Un StorageError sí
    interrumpe la importación y se propaga.
    """
    result = ImportResult()
    set_state(result, ImportState.READING)
    text = decode_upload(content)

    for row_number, line in iter_csv_rows(text):
        set_state(result, ImportState.PARSING_ROW, row_number)
        result.total_rows += 1
        try:
            device = build_device_create(parse_row(split_line(line)))
            set_state(result, ImportState.PERSISTING, row_number)
            created = repository.create(device)
        except (RowError, ValidationError) as e:
            set_state(result, ImportState.ROW_FAILED, row_number)
            reason = e.message if isinstance(e, ValidationError) else str(e)
            logger.warning(f"Fila {row_number} rechazada: {reason}")
            result.errors.append(ImportRowError(row=row_number, reason=reason))
            result.failed += 1
            continue

        result.created += 1
        result.created_ids.append(created.id)

    set_state(result, ImportState.COMPLETED)
    logger.info(
        f"📊 Importación completada: {result.created} creados, "
        f"{result.failed} fallidos de {result.total_rows} filas"
    )
    return result
