"""Lookup and activation binding shared by the device registration use cases.

Registrations are matched from the most to the least specific key:

1. activation ID and push token,
2. activation ID alone (the platform rotated the push token),
3. application ID and push token (the token was re-bound to another activation).

The first lookup that finds anything wins. The first two are backed by
uniqueness expectations in the store, so more than one row there means the
table is corrupt. The last one may legitimately return several rows when one
device token is associated with multiple activations.
"""

from __future__ import annotations

import logging

from src.application.errors import ConsistencyViolation
from src.application.interfaces.repositories.device_registrations import (
    DeviceRegistrationsRepository,
)
from src.domain.models.device_registration import DeviceRegistration
from src.domain.ports.activation_status_oracle import ActivationStatusOracle

logger = logging.getLogger(__name__)


async def lookup_registrations(
    devices: DeviceRegistrationsRepository,
    *,
    app_id: int,
    activation_id: str,
    push_token: str,
) -> list[DeviceRegistration]:
    found = await devices.find_by_activation_and_token(activation_id, push_token)
    if found:
        if len(found) != 1:
            raise ConsistencyViolation(
                "Multiple device registrations found during lookup by activation ID and push "
                "token. Delete the duplicate rows and make sure the database indexes have been "
                "applied on the push_device_registration table.",
                details={"activation_id": activation_id, "count": len(found)},
            )
        return found
    found = await devices.find_by_activation(activation_id)
    if found:
        if len(found) != 1:
            raise ConsistencyViolation(
                "Multiple device registrations found during lookup by activation ID. Delete the "
                "duplicate rows and make sure the database indexes have been applied on the "
                "push_device_registration table.",
                details={"activation_id": activation_id, "count": len(found)},
            )
        return found
    return await devices.find_by_app_and_token(app_id, push_token)


async def bind_activation(
    oracle: ActivationStatusOracle,
    registration: DeviceRegistration,
    activation_id: str,
) -> bool:
    """Bind the registration to the activation unless it is missing or removed.

    A missing or removed activation leaves the current binding untouched; it is
    neither applied nor cleared. Returns whether the binding was applied.
    """
    activation = await oracle.get_status(activation_id)
    if activation is None or not activation.status.can_bind():
        logger.info(
            "Activation %s not bound to registration %s (status: %s)",
            activation_id,
            registration.id,
            activation.status.value if activation else "not found",
        )
        return False
    registration.bind(activation)
    return True
