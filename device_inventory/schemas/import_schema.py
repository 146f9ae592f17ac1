# device_inventory/schemas/import_schema.py

from enum import Enum
from pydantic import BaseModel, Field


class ImportState(str, Enum):
    READING = "reading"
    PARSING_ROW = "parsing_row"
    PERSISTING = "persisting"
    ROW_FAILED = "row_failed"
    COMPLETED = "completed"


# Error de una fila concreta (número de línea 1-based)
class ImportRowError(BaseModel):
    row: int
    reason: str


class ImportResult(BaseModel):
    total_rows: int = 0
    created: int = 0
    failed: int = 0
    created_ids: list[int] = Field(default_factory=list)
    errors: list[ImportRowError] = Field(default_factory=list)
    state: ImportState = ImportState.READING
