# device_inventory/core/settings.py

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    URL_DATABASE_SQL: str = "sqlite:///./devices.db"
    DB_TIMEOUT_SECONDS: float = 10.0
    DB_POOL_SIZE: int = 8
    DB_MAX_OVERFLOW: int = 4
    LIST_DEFAULT_LIMIT: int = 10
    LIST_MAX_LIMIT: int = 100
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024
    LOG_DIR: str = "logs"
    LOG_LEVEL: str = "INFO"
    DISCORD_WEBHOOK_URL: str = ""


    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
