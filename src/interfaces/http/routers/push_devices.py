from __future__ import annotations

from fastapi import APIRouter, Depends

from src.application.use_cases.devices import (
    create_device,
    create_device_multi,
    delete_device,
    update_device_status,
)
from src.config.settings import Settings
from src.domain.ports.activation_status_oracle import ActivationStatusOracle
from src.infrastructure.db.session import SQLAlchemyUnitOfWork
from src.interfaces.http.deps import get_activation_oracle, get_app_settings, get_uow
from src.interfaces.http.schemas.push_devices import (
    CreateDeviceForActivationsRequest,
    CreateDeviceRequest,
    DeleteDeviceRequest,
    ObjectRequest,
    StatusResponse,
    UpdateDeviceStatusRequest,
)

router = APIRouter(prefix="/push/device", tags=["push-devices"])


@router.post("/create", response_model=StatusResponse)
async def create_device_registration(
    payload: ObjectRequest[CreateDeviceRequest],
    uow: SQLAlchemyUnitOfWork = Depends(get_uow),
    oracle: ActivationStatusOracle = Depends(get_activation_oracle),
) -> StatusResponse:
    """Create or refresh the registration of a push token for one activation.

    The caller is trusted to have authenticated the device before binding its
    token to the activation.
    """
    data = payload.request_object
    await create_device.execute(
        uow,
        oracle,
        create_device.CreateDeviceInput(
            app_id=data.app_id,
            token=data.token,
            platform=data.platform,
            activation_id=data.activation_id,
        ),
    )
    return StatusResponse()


@router.post("/create/multi", response_model=StatusResponse)
async def create_device_registration_multi(
    payload: ObjectRequest[CreateDeviceForActivationsRequest],
    uow: SQLAlchemyUnitOfWork = Depends(get_uow),
    oracle: ActivationStatusOracle = Depends(get_activation_oracle),
    settings: Settings = Depends(get_app_settings),
) -> StatusResponse:
    """Register a push token for several associated activations at once."""
    data = payload.request_object
    await create_device_multi.execute(
        uow,
        oracle,
        create_device_multi.CreateDeviceMultiInput(
            app_id=data.app_id,
            token=data.token,
            platform=data.platform,
            activation_ids=data.activation_ids,
        ),
        enabled=settings.multi_activation_registration_enabled,
    )
    return StatusResponse()


@router.post("/status/update", response_model=StatusResponse)
async def update_device_registration_status(
    payload: UpdateDeviceStatusRequest,
    uow: SQLAlchemyUnitOfWork = Depends(get_uow),
    oracle: ActivationStatusOracle = Depends(get_activation_oracle),
) -> StatusResponse:
    await update_device_status.execute(uow, oracle, payload.activation_id)
    return StatusResponse()


@router.post("/delete", response_model=StatusResponse)
async def delete_device_registration(
    payload: ObjectRequest[DeleteDeviceRequest],
    uow: SQLAlchemyUnitOfWork = Depends(get_uow),
) -> StatusResponse:
    data = payload.request_object
    await delete_device.execute(uow, data.app_id, data.token)
    return StatusResponse()
