from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ActivationStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    REMOVED = "REMOVED"
    UNKNOWN = "UNKNOWN"

    def is_active(self) -> bool:
        return self is ActivationStatus.ACTIVE

    def can_bind(self) -> bool:
        return self is not ActivationStatus.REMOVED


@dataclass(frozen=True, slots=True)
class ActivationStatusInfo:
    activation_id: str
    status: ActivationStatus
    user_id: str | None = None
