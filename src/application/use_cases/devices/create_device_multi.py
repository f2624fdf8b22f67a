"""Register one device token for several associated activations.

Activations are processed one by one in the order given. Each one is committed
on its own, so a failure for one activation does not undo the others; the
caller receives an aggregate error listing the activations that failed and may
simply retry.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError

from src.application.errors import AppError, FeatureDisabled, RegistrationFailed
from src.application.interfaces.unit_of_work import UnitOfWork
from src.application.use_cases.devices.reconciliation import (
    bind_activation,
    lookup_registrations,
)
from src.application.use_cases.devices.validators import (
    parse_platform,
    require_activation_ids,
    require_app_id,
    require_text,
)
from src.domain.models.device_registration import DeviceRegistration
from src.domain.ports.activation_status_oracle import ActivationStatusOracle
from src.domain.value_objects.platform import Platform

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CreateDeviceMultiInput:
    app_id: int | None
    token: str | None
    platform: str | None
    activation_ids: list[str] | None


@dataclass(slots=True)
class RegistrationOutcome:
    activation_id: str
    registration_id: int | None = None
    error: Exception | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


async def execute(
    uow: UnitOfWork,
    oracle: ActivationStatusOracle,
    payload: CreateDeviceMultiInput,
    *,
    enabled: bool,
) -> list[RegistrationOutcome]:
    # The feature switch wins over payload validation.
    if not enabled:
        raise FeatureDisabled(
            "Registration of multiple associated activations per device is not enabled."
        )
    app_id = require_app_id(payload.app_id)
    push_token = require_text(payload.token, "Push token")
    platform = parse_platform(payload.platform)
    activation_ids = require_activation_ids(payload.activation_ids)

    # Rows written earlier in this request; never handed to another activation.
    claimed: set[int] = set()
    outcomes: list[RegistrationOutcome] = []
    for activation_id in activation_ids:
        outcome = await _register_activation(
            uow,
            oracle,
            app_id=app_id,
            push_token=push_token,
            platform=platform,
            activation_id=activation_id,
            claimed=claimed,
        )
        outcomes.append(outcome)

    failed = [o.activation_id for o in outcomes if not o.succeeded]
    if failed:
        raise RegistrationFailed(
            "Device registration failed",
            details={"failed_activation_ids": failed},
        )
    return outcomes


async def _register_activation(
    uow: UnitOfWork,
    oracle: ActivationStatusOracle,
    *,
    app_id: int,
    push_token: str,
    platform: Platform,
    activation_id: str,
    claimed: set[int],
) -> RegistrationOutcome:
    # Commit failures surface as raw SQLAlchemy errors, not through the repository.
    try:
        registration = await _select_registration(
            uow,
            app_id=app_id,
            push_token=push_token,
            activation_id=activation_id,
            claimed=claimed,
        )
        registration.app_id = app_id
        registration.push_token = push_token
        registration.touch(platform)
        await bind_activation(oracle, registration, activation_id)
        saved = await uow.devices.save(registration)
        await uow.commit()
    except (AppError, SQLAlchemyError) as exc:
        await uow.rollback()
        logger.error(
            "Device registration failed for activation %s: %s",
            activation_id,
            exc,
            exc_info=True,
        )
        return RegistrationOutcome(activation_id=activation_id, error=exc)
    claimed.add(saved.id)
    return RegistrationOutcome(activation_id=activation_id, registration_id=saved.id)


async def _select_registration(
    uow: UnitOfWork,
    *,
    app_id: int,
    push_token: str,
    activation_id: str,
    claimed: set[int],
) -> DeviceRegistration:
    devices = await lookup_registrations(
        uow.devices, app_id=app_id, activation_id=activation_id, push_token=push_token
    )
    if not devices:
        return DeviceRegistration.create(app_id=app_id, push_token=push_token)
    if len(devices) == 1:
        if devices[0].id in claimed:
            return DeviceRegistration.create(app_id=app_id, push_token=push_token)
        return devices[0]
    # Several rows share the token and none is keyed by this activation, so there
    # is no way to tell which old row belongs to it. Drop them and start clean,
    # keeping the rows this request has already written.
    stale = [d for d in devices if d.id not in claimed]
    if stale:
        removed = await uow.devices.delete_all(stale)
        logger.info(
            "Removed %d ambiguous registrations for app %s before binding activation %s",
            removed,
            app_id,
            activation_id,
        )
    return DeviceRegistration.create(app_id=app_id, push_token=push_token)
