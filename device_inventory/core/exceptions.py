# device_inventory/core/exceptions.py


class DeviceInventoryError(Exception):
    """Error base del dominio de inventario."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DeviceInventoryError):
    """Entrada mal formada: campo desconocido, tipo incorrecto, fila CSV inválida."""

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors = errors or []


class NotFoundError(DeviceInventoryError):
    """No existe un dispositivo con el ID solicitado."""

    def __init__(self, device_id: int):
        super().__init__(f"No se encontró dispositivo con id {device_id}")
        self.device_id = device_id


class StorageError(DeviceInventoryError):
    """Fallo del almacenamiento (conexión, restricción, timeout)."""
