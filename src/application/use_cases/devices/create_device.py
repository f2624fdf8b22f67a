from __future__ import annotations

from dataclasses import dataclass

from src.application.errors import AmbiguousRegistration
from src.application.interfaces.unit_of_work import UnitOfWork
from src.application.use_cases.devices.reconciliation import (
    bind_activation,
    lookup_registrations,
)
from src.application.use_cases.devices.validators import (
    parse_platform,
    require_app_id,
    require_text,
)
from src.domain.models.device_registration import DeviceRegistration
from src.domain.ports.activation_status_oracle import ActivationStatusOracle


@dataclass(slots=True)
class CreateDeviceInput:
    app_id: int | None
    token: str | None
    platform: str | None
    activation_id: str | None


async def execute(
    uow: UnitOfWork,
    oracle: ActivationStatusOracle,
    payload: CreateDeviceInput,
) -> DeviceRegistration:
    app_id = require_app_id(payload.app_id)
    push_token = require_text(payload.token, "Push token")
    platform = parse_platform(payload.platform)
    activation_id = require_text(payload.activation_id, "Activation ID")

    devices = await lookup_registrations(
        uow.devices, app_id=app_id, activation_id=activation_id, push_token=push_token
    )
    if not devices:
        registration = DeviceRegistration.create(app_id=app_id, push_token=push_token)
    elif len(devices) == 1:
        # Same activation and token, a rotated token for the activation, or the
        # token carried over to a new activation. The row is updated in place.
        registration = devices[0]
    else:
        raise AmbiguousRegistration(
            "Multiple device registrations found for push token. Use the "
            "/push/device/create/multi endpoint for this scenario.",
            details={"app_id": app_id, "count": len(devices)},
        )
    # Only changes anything when the row was found by activation alone (rotated token).
    registration.push_token = push_token
    registration.touch(platform)
    await bind_activation(oracle, registration, activation_id)
    saved = await uow.devices.save(registration)
    await uow.commit()
    return saved
