# Device Schemas
from .device_schema import (
    DEVICE_FIELD_ORDER,
    BaseDevice,
    DeviceCreate,
    DeviceResponse,
    build_device_create,
    format_validation_errors,
    normalize_iso_date,
)

# Import Schemas
from .import_schema import ImportState, ImportRowError, ImportResult
