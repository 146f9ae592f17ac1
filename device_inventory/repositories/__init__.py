# device_inventory/repositories/__init__.py

from .device_repository import DeviceRepository, SQLAlchemyDeviceRepository
from .memory_device_repository import InMemoryDeviceRepository
from .partial_update import coerce_field_map, apply_field_map, FieldKind, ValueTag, DEVICE_FIELD_KINDS
