from __future__ import annotations

import logging

from src.application.interfaces.unit_of_work import UnitOfWork
from src.application.use_cases.devices.validators import require_text
from src.domain.ports.activation_status_oracle import ActivationStatusOracle

logger = logging.getLogger(__name__)


async def execute(
    uow: UnitOfWork,
    oracle: ActivationStatusOracle,
    activation_id: str | None,
) -> int:
    """Refresh the active flag of every registration bound to the activation.

    Only ``is_active`` changes; user and activation binding are left as they are.
    An activation unknown to the oracle is treated as inactive.
    """
    activation_id = require_text(activation_id, "Activation ID")
    registrations = await uow.devices.find_by_activation(activation_id)
    if not registrations:
        return 0
    if len(registrations) > 1:
        logger.warning(
            "Activation %s is bound to %d registrations", activation_id, len(registrations)
        )
    activation = await oracle.get_status(activation_id)
    is_active = activation is not None and activation.status.is_active()
    for registration in registrations:
        registration.is_active = is_active
        await uow.devices.save(registration)
    await uow.commit()
    return len(registrations)
