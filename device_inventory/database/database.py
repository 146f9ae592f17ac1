# device_inventory/database/database.py

from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker, Session, declarative_base
from sqlalchemy.pool import StaticPool

from device_inventory.core import settings, logger

Base = declarative_base()


def _engine_options(url: str, timeout: float, pool_size: int, max_overflow: int) -> dict:
    """Opciones del engine según el backend, siempre acotadas por `timeout`."""
    parsed = make_url(url)
    backend = parsed.get_backend_name()

    if backend == "sqlite":
        options = {
            "connect_args": {"check_same_thread": False, "timeout": timeout},
        }
        # Una base en memoria solo existe dentro de su conexión
        if parsed.database in (None, "", ":memory:"):
            options["poolclass"] = StaticPool
        return options

    connect_args = {}
    if backend == "postgresql":
        connect_args = {
            "connect_timeout": max(1, int(timeout)),
            "options": f"-c statement_timeout={int(timeout * 1000)}",
        }

    return {
        "pool_size": pool_size,
        "max_overflow": max_overflow,
        "pool_timeout": timeout,   # Tiempo de espera por una conexión libre
        "pool_recycle": 1800,      # Reutilizar conexiones
        "pool_pre_ping": True,     # Verifica que la conexión esté viva antes de usarla
        "pool_use_lifo": True,
        "connect_args": connect_args,
    }


class Database:
    """
    Manejador explícito de la conexión a la base de datos.

    Se crea una sola vez al arrancar el proceso, se pasa a quien lo necesite
    y se cierra al apagar. Nunca vive como global implícito.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        pool_size: int = 8,
        max_overflow: int = 4,
        echo: bool = False,
    ):
        self.url = url
        self.timeout = timeout
        self.engine: Engine = create_engine(
            url,
            echo=echo,
            **_engine_options(url, timeout, pool_size, max_overflow),
        )
        self.session_factory = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)

    @classmethod
    def from_settings(cls) -> "Database":
        return cls(
            settings.URL_DATABASE_SQL,
            timeout=settings.DB_TIMEOUT_SECONDS,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
        )

    def create_all(self):
        # Importa los modelos para registrarlos en el metadata
        from device_inventory import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info("Tablas verificadas/creadas en la base de datos.")

    def session(self) -> Session:
        return self.session_factory()

    def close(self):
        self.engine.dispose()
        logger.info("Conexiones a la base de datos cerradas.")


def get_db(request: Request) -> Iterator[Session]:
    database: Database = request.app.state.database
    db: Session = database.session()
    try:
        yield db
    finally:
        db.close()
