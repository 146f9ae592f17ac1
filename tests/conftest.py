import pytest
from fastapi.testclient import TestClient

from device_inventory.database import Database
from device_inventory.main import app
from device_inventory.repositories import InMemoryDeviceRepository, SQLAlchemyDeviceRepository
from device_inventory.routers import get_device_repository


@pytest.fixture
def database():
    """Base SQLite en memoria, compartida por todas las sesiones del test."""
    db = Database("sqlite://", timeout=5)
    db.create_all()
    yield db
    db.close()


@pytest.fixture
def memory_repository():
    return InMemoryDeviceRepository()


@pytest.fixture
def sql_repository(database):
    session = database.session()
    yield SQLAlchemyDeviceRepository(session)
    session.close()


@pytest.fixture(params=["memory", "sql"])
def repository(request):
    """Corre el mismo test contra ambos backends."""
    return request.getfixturevalue(f"{request.param}_repository")


@pytest.fixture
def client(repository):
    app.dependency_overrides[get_device_repository] = lambda: repository
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def sample_device():
    return {
        "device_name": "Device1",
        "device_type": "TypeA",
        "brand": "BrandX",
        "model": "ModelY",
        "os": "OSZ",
        "os_version": "1.0",
        "purchase_date": "2022-01-01",
        "warranty_end": "2024-01-01",
        "status": "Active",
        "price": 1000,
    }
