from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
from sqlalchemy.exc import OperationalError

from src.application.errors import ConsistencyViolation, InfrastructureError
from src.domain.models.device_registration import DeviceRegistration
from src.domain.value_objects.platform import Platform
from src.infrastructure.db.base import Base
from src.infrastructure.db.session import (
    SQLAlchemyUnitOfWork,
    create_engine,
    create_session_factory,
)


@pytest.fixture()
async def session_factory(test_settings) -> AsyncIterator:
    engine = create_engine(test_settings.database_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield create_session_factory(engine)
    await engine.dispose()


def new_registration(activation_id: str | None, token: str = "T") -> DeviceRegistration:
    registration = DeviceRegistration.create(app_id=1, push_token=token)
    registration.platform = Platform.HUAWEI
    registration.activation_id = activation_id
    return registration


async def test_save_assigns_id_and_updates_in_place(session_factory):
    async with SQLAlchemyUnitOfWork(session_factory) as uow:
        saved = await uow.devices.save(new_registration("A"))
        await uow.commit()
    assert saved.id is not None

    async with SQLAlchemyUnitOfWork(session_factory) as uow:
        [found] = await uow.devices.find_by_activation("A")
        found.is_active = True
        found.user_id = "U1"
        updated = await uow.devices.save(found)
        await uow.commit()
    assert updated.id == saved.id

    async with SQLAlchemyUnitOfWork(session_factory) as uow:
        [found] = await uow.devices.find_by_activation_and_token("A", "T")
    assert found.user_id == "U1"
    assert found.is_active is True
    assert found.platform is Platform.HUAWEI


async def test_duplicate_activation_and_token_is_a_consistency_violation(session_factory):
    async with SQLAlchemyUnitOfWork(session_factory) as uow:
        await uow.devices.save(new_registration("A"))
        await uow.commit()
        with pytest.raises(ConsistencyViolation):
            await uow.devices.save(new_registration("A"))
        await uow.rollback()
        # rows without an activation never collide
        await uow.devices.save(new_registration(None))
        await uow.devices.save(new_registration(None))
        await uow.commit()
        rows = await uow.devices.find_by_app_and_token(1, "T")
    assert len(rows) == 3


async def test_delete_all_removes_only_given_rows(session_factory):
    async with SQLAlchemyUnitOfWork(session_factory) as uow:
        first = await uow.devices.save(new_registration("A"))
        second = await uow.devices.save(new_registration("B"))
        kept = await uow.devices.save(new_registration("C"))
        await uow.commit()

    async with SQLAlchemyUnitOfWork(session_factory) as uow:
        removed = await uow.devices.delete_all([first, second])
        await uow.commit()
        remaining = await uow.devices.find_by_app_and_token(1, "T")
    assert removed == 2
    assert [r.id for r in remaining] == [kept.id]


async def test_database_errors_become_infrastructure_errors(session_factory, monkeypatch):
    async def broken_execute(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("server closed the connection"))

    async with SQLAlchemyUnitOfWork(session_factory) as uow:
        saved = await uow.devices.save(new_registration("A"))
        await uow.commit()
        monkeypatch.setattr(uow.session, "execute", broken_execute)
        with pytest.raises(InfrastructureError):
            await uow.devices.find_by_activation("A")
        with pytest.raises(InfrastructureError):
            await uow.devices.delete_all([saved])
