from .settings import settings
from .logger import logger, log_critical_error
from .discord_logger import send_discord_alert
from .exceptions import DeviceInventoryError, ValidationError, NotFoundError, StorageError
