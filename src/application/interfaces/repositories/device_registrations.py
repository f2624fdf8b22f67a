from __future__ import annotations

from typing import Iterable, Protocol

from src.domain.models.device_registration import DeviceRegistration


class DeviceRegistrationsRepository(Protocol):
    async def find_by_activation_and_token(
        self, activation_id: str, push_token: str
    ) -> list[DeviceRegistration]: ...
    async def find_by_activation(self, activation_id: str) -> list[DeviceRegistration]: ...
    async def find_by_app_and_token(
        self, app_id: int, push_token: str
    ) -> list[DeviceRegistration]: ...
    async def save(self, registration: DeviceRegistration) -> DeviceRegistration: ...
    async def delete(self, registration: DeviceRegistration) -> None: ...
    async def delete_all(self, registrations: Iterable[DeviceRegistration]) -> int: ...
