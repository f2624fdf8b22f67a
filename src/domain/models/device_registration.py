from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from src.domain.value_objects.activation_status import ActivationStatusInfo
from src.domain.value_objects.platform import Platform


@dataclass(slots=True)
class DeviceRegistration:
    app_id: int
    push_token: str
    id: int | None = None
    platform: Platform | None = None
    activation_id: str | None = None
    user_id: str | None = None
    is_active: bool = False
    timestamp_last_registered: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    @classmethod
    def create(cls, *, app_id: int, push_token: str) -> DeviceRegistration:
        # id stays unset until the store assigns one
        return cls(app_id=app_id, push_token=push_token)

    def touch(self, platform: Platform) -> None:
        self.platform = platform
        self.timestamp_last_registered = datetime.now(timezone.utc)

    def bind(self, activation: ActivationStatusInfo) -> None:
        self.activation_id = activation.activation_id
        self.user_id = activation.user_id
        self.is_active = activation.status.is_active()
