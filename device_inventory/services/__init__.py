# device_inventory/services/__init__.py

# Device Service
from .device_service import (
    resolve_offset,
    create_device_service,
    get_device_by_id_service,
    list_devices_service,
    update_device_service,
    delete_device_service,
)

# Import Service
from .import_service import import_devices, iter_csv_rows, split_line, parse_row, decode_upload, RowError
