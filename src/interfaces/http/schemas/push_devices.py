from __future__ import annotations

from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class WireModel(BaseModel):
    """Accepts the camelCase field names used on the wire as well as snake_case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ObjectRequest(WireModel, Generic[T]):
    request_object: T


# Fields are optional here; the use cases own validation so that the
# multi-activation switch is checked before the payload.
class CreateDeviceRequest(WireModel):
    app_id: int | None = None
    token: str | None = None
    platform: str | None = None
    activation_id: str | None = None


class CreateDeviceForActivationsRequest(WireModel):
    app_id: int | None = None
    token: str | None = None
    platform: str | None = None
    activation_ids: list[str] | None = None


class UpdateDeviceStatusRequest(WireModel):
    activation_id: str | None = None


class DeleteDeviceRequest(WireModel):
    app_id: int | None = None
    token: str | None = None


class StatusResponse(BaseModel):
    status: Literal["OK"] = "OK"
