from decimal import Decimal

import pytest

from device_inventory.core import NotFoundError, StorageError, ValidationError
from device_inventory.database import Database
from device_inventory.repositories import SQLAlchemyDeviceRepository


def test_create_then_get_returns_equal_record(repository, sample_device):
    created = repository.create(sample_device)

    assert created.id == 1
    fetched = repository.get_by_id(created.id)
    assert fetched == created
    assert fetched.model_dump(exclude={"id"}) == {**sample_device, "price": Decimal("1000")}


def test_ids_are_assigned_in_sequence(repository):
    first = repository.create({"device_name": "Device1"})
    second = repository.create({"device_name": "Device2"})

    assert (first.id, second.id) == (1, 2)


def test_create_rejects_invalid_device(repository):
    with pytest.raises(ValidationError):
        repository.create({"device_name": "Device1", "price": -5})
    assert repository.count() == 0


def test_get_missing_device_raises_not_found(repository):
    with pytest.raises(NotFoundError) as exc_info:
        repository.get_by_id(999)
    assert exc_info.value.device_id == 999


def test_delete_then_get_raises_not_found(repository, sample_device):
    created = repository.create(sample_device)

    repository.delete(created.id)

    with pytest.raises(NotFoundError):
        repository.get_by_id(created.id)


def test_delete_missing_device_raises_not_found(repository):
    with pytest.raises(NotFoundError):
        repository.delete(42)


def test_update_changes_only_given_fields(repository, sample_device):
    created = repository.create(sample_device)

    updated = repository.update(created.id, {"device_name": "Updated Device", "price": 300})

    assert updated.device_name == "Updated Device"
    assert updated.price == Decimal("300")
    assert updated.model_dump(exclude={"device_name", "price"}) == created.model_dump(exclude={"device_name", "price"})
    assert repository.get_by_id(created.id) == updated


def test_update_with_unknown_key_changes_nothing(repository, sample_device):
    created = repository.create(sample_device)

    with pytest.raises(ValidationError):
        repository.update(created.id, {"device_name": "Changed", "color": "red"})

    assert repository.get_by_id(created.id) == created


def test_update_with_wrong_type_changes_nothing(repository, sample_device):
    created = repository.create(sample_device)

    with pytest.raises(ValidationError):
        repository.update(created.id, {"status": "Inactive", "price": "cheap"})

    assert repository.get_by_id(created.id) == created


def test_update_missing_device_raises_not_found(repository):
    with pytest.raises(NotFoundError):
        repository.update(7, {"price": 1})


def test_empty_update_returns_current_record(repository, sample_device):
    created = repository.create(sample_device)

    assert repository.update(created.id, {}) == created


def test_update_accepts_price_with_trailing_zeros(repository, sample_device):
    created = repository.create({**sample_device, "price": Decimal("300.000")})

    updated = repository.update(created.id, {"price": Decimal("300.000")})

    assert updated.price == Decimal("300")
    assert repository.get_by_id(created.id).price == created.price


def test_list_on_empty_store_returns_empty_sequence(repository):
    assert repository.list(limit=10, offset=0) == []


def test_list_is_ordered_by_id_and_paginated(repository):
    for i in range(1, 6):
        repository.create({"device_name": f"Device{i}"})

    page = repository.list(limit=2, offset=2)

    assert [device.id for device in page] == [3, 4]
    assert [device.device_name for device in repository.list(limit=10, offset=0)] == [
        "Device1", "Device2", "Device3", "Device4", "Device5",
    ]
    assert repository.list(limit=10, offset=10) == []
    assert repository.count() == 5


@pytest.mark.parametrize("limit, offset", [(0, 0), (-1, 0), (10, -1)])
def test_list_rejects_invalid_paging(repository, limit, offset):
    with pytest.raises(ValidationError):
        repository.list(limit=limit, offset=offset)


def test_create_get_update_delete_scenario(repository):
    created = repository.create({"device_name": "Device1", "price": 200})
    assert created.id == 1

    fetched = repository.get_by_id(1)
    assert (fetched.device_name, fetched.price, fetched.id) == ("Device1", Decimal("200"), 1)

    repository.update(1, {"price": 300})
    fetched = repository.get_by_id(1)
    assert fetched.price == Decimal("300")
    assert fetched.device_name == "Device1"

    repository.delete(1)
    with pytest.raises(NotFoundError):
        repository.get_by_id(1)


def test_deleted_ids_are_not_reused(repository):
    repository.create({"device_name": "Device1"})
    repository.delete(1)

    assert repository.create({"device_name": "Device2"}).id == 2


def test_sql_failures_surface_as_storage_errors():
    # Sin create_all: la tabla no existe
    database = Database("sqlite://")
    session = database.session()
    repository = SQLAlchemyDeviceRepository(session)
    try:
        with pytest.raises(StorageError):
            repository.create({"device_name": "Device1"})
        with pytest.raises(StorageError):
            repository.get_by_id(1)
        with pytest.raises(StorageError):
            repository.list()
    finally:
        session.close()
        database.close()


def test_memory_repository_tolerates_concurrent_writers(memory_repository):
    from concurrent.futures import ThreadPoolExecutor

    def create_many(worker):
        return [memory_repository.create({"device_name": f"W{worker}-{i}"}).id for i in range(25)]

    with ThreadPoolExecutor(max_workers=8) as pool:
        ids = [device_id for batch in pool.map(create_many, range(8)) for device_id in batch]

    assert len(set(ids)) == 200
    assert memory_repository.count() == 200

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(memory_repository.delete, ids[:100]))
        list(pool.map(lambda device_id: memory_repository.update(device_id, {"status": "Inactive"}), ids[100:]))

    remaining = memory_repository.list(limit=200, offset=0)
    assert len(remaining) == 100
    assert {device.status for device in remaining} == {"Inactive"}


def test_sql_repository_tolerates_concurrent_writers(tmp_path):
    from concurrent.futures import ThreadPoolExecutor

    database = Database(f"sqlite:///{tmp_path / 'devices.db'}", timeout=30)
    database.create_all()

    def with_repository(action):
        # Una sesión por hilo, como en una petición HTTP
        session = database.session()
        try:
            return action(SQLAlchemyDeviceRepository(session))
        finally:
            session.close()

    def create_many(worker):
        return with_repository(
            lambda repo: [repo.create({"device_name": f"W{worker}-{i}"}).id for i in range(10)]
        )

    try:
        with ThreadPoolExecutor(max_workers=4) as pool:
            ids = [device_id for batch in pool.map(create_many, range(4)) for device_id in batch]

        assert len(set(ids)) == 40

        deleted, kept = ids[:20], ids[20:]
        with ThreadPoolExecutor(max_workers=4) as pool:
            list(pool.map(lambda device_id: with_repository(lambda repo: repo.delete(device_id)), deleted))
            list(pool.map(
                lambda device_id: with_repository(
                    lambda repo: repo.update(device_id, {"status": "Inactive", "price": device_id})
                ),
                kept,
            ))

        remaining = with_repository(lambda repo: repo.list(limit=100, offset=0))
        assert with_repository(lambda repo: repo.count()) == 20
        assert [device.id for device in remaining] == sorted(kept)
        assert {device.status for device in remaining} == {"Inactive"}
        assert all(device.price == Decimal(device.id) for device in remaining)
    finally:
        database.close()
