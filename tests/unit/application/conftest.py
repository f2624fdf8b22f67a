from __future__ import annotations

from dataclasses import replace

import pytest

from src.application.errors import ConflictError, ConsistencyViolation
from src.domain.models.device_registration import DeviceRegistration
from src.domain.value_objects.platform import Platform


class InMemoryDeviceRegistrations:
    """Store fake with the uniqueness and commit/rollback behaviour of the real table."""

    def __init__(self) -> None:
        self.rows: dict[int, DeviceRegistration] = {}
        self.committed: dict[int, DeviceRegistration] = {}
        self.saved: list[DeviceRegistration] = []
        # activation ID -> error raised when a row bound to it is saved
        self.save_errors: dict[str, Exception] = {}
        self._next_id = 1

    def seed(
        self,
        *,
        app_id: int = 1,
        push_token: str = "T",
        activation_id: str | None = None,
        user_id: str | None = None,
        is_active: bool = False,
        platform: Platform = Platform.IOS,
    ) -> DeviceRegistration:
        # Bypasses the uniqueness check so tests can plant corrupt data.
        row = DeviceRegistration(
            id=self._next_id,
            app_id=app_id,
            push_token=push_token,
            platform=platform,
            activation_id=activation_id,
            user_id=user_id,
            is_active=is_active,
        )
        self._next_id += 1
        self.rows[row.id] = row
        self.committed[row.id] = replace(row)
        return replace(row)

    def state(self) -> list[tuple]:
        return [
            (r.id, r.app_id, r.push_token, r.platform, r.activation_id, r.user_id, r.is_active)
            for r in sorted(self.committed.values(), key=lambda r: r.id)
        ]

    def get(self, registration_id: int) -> DeviceRegistration | None:
        return self.committed.get(registration_id)

    def _select(self, predicate) -> list[DeviceRegistration]:
        return [
            replace(r) for r in sorted(self.rows.values(), key=lambda r: r.id) if predicate(r)
        ]

    async def find_by_activation_and_token(self, activation_id, push_token):
        return self._select(
            lambda r: r.activation_id == activation_id and r.push_token == push_token
        )

    async def find_by_activation(self, activation_id):
        return self._select(lambda r: r.activation_id == activation_id)

    async def find_by_app_and_token(self, app_id, push_token):
        return self._select(lambda r: r.app_id == app_id and r.push_token == push_token)

    async def save(self, registration: DeviceRegistration) -> DeviceRegistration:
        if registration.activation_id in self.save_errors:
            raise self.save_errors[registration.activation_id]
        for other in self.rows.values():
            if (
                other.id != registration.id
                and registration.activation_id is not None
                and other.activation_id == registration.activation_id
                and other.push_token == registration.push_token
            ):
                raise ConsistencyViolation("Duplicate activation ID and push token")
        if registration.id is None:
            stored = replace(registration, id=self._next_id)
            self._next_id += 1
        elif registration.id in self.rows:
            stored = replace(registration)
        else:
            raise ConflictError("Device registration was removed concurrently")
        self.rows[stored.id] = stored
        self.saved.append(replace(stored))
        return replace(stored)

    async def delete(self, registration: DeviceRegistration) -> None:
        self.rows.pop(registration.id, None)

    async def delete_all(self, registrations) -> int:
        removed = 0
        for registration in registrations:
            if self.rows.pop(registration.id, None) is not None:
                removed += 1
        return removed

    def commit(self) -> None:
        self.committed = {k: replace(v) for k, v in self.rows.items()}

    def rollback(self) -> None:
        self.rows = {k: replace(v) for k, v in self.committed.items()}


class FakeUnitOfWork:
    def __init__(self, devices: InMemoryDeviceRegistrations) -> None:
        self.devices = devices
        self.commits = 0
        self.rollbacks = 0

    async def __aenter__(self) -> FakeUnitOfWork:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if exc:
            await self.rollback()

    async def commit(self) -> None:
        self.devices.commit()
        self.commits += 1

    async def rollback(self) -> None:
        self.devices.rollback()
        self.rollbacks += 1


@pytest.fixture()
def devices() -> InMemoryDeviceRegistrations:
    return InMemoryDeviceRegistrations()


@pytest.fixture()
def uow(devices: InMemoryDeviceRegistrations) -> FakeUnitOfWork:
    return FakeUnitOfWork(devices)
