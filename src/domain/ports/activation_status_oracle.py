from __future__ import annotations

from abc import ABC, abstractmethod

from src.domain.value_objects.activation_status import ActivationStatusInfo


class ActivationStatusOracle(ABC):
    @abstractmethod
    async def get_status(self, activation_id: str) -> ActivationStatusInfo | None:
        """Return the current status of an activation, or None when it does not exist."""
