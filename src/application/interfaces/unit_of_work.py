from __future__ import annotations

from typing import Protocol

from src.application.interfaces.repositories.device_registrations import (
    DeviceRegistrationsRepository,
)


class UnitOfWork(Protocol):
    devices: DeviceRegistrationsRepository

    async def __aenter__(self) -> UnitOfWork: ...

    async def __aexit__(self, exc_type, exc, tb) -> None: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...
