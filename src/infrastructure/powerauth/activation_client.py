from __future__ import annotations

import logging
from typing import Any

import httpx

from src.application.errors import InfrastructureError
from src.domain.ports.activation_status_oracle import ActivationStatusOracle
from src.domain.value_objects.activation_status import ActivationStatus, ActivationStatusInfo

logger = logging.getLogger(__name__)

_STATUS_MAP = {
    "ACTIVE": ActivationStatus.ACTIVE,
    "CREATED": ActivationStatus.INACTIVE,
    "PENDING_COMMIT": ActivationStatus.INACTIVE,
    "BLOCKED": ActivationStatus.INACTIVE,
    "REMOVED": ActivationStatus.REMOVED,
}

NOT_FOUND_CODE = "ERR_ACTIVATION_NOT_FOUND"


class PowerAuthActivationClient(ActivationStatusOracle):
    """Activation status lookups against the PowerAuth server REST API."""

    def __init__(
        self,
        base_url: str,
        *,
        credentials: tuple[str, str] | None = None,
        verify_ssl: bool = True,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.endpoint = f"{self.base_url}/v3/activation/status"
        self.credentials = credentials
        self.verify_ssl = verify_ssl
        self.timeout = timeout
        self._transport = transport

    async def get_status(self, activation_id: str) -> ActivationStatusInfo | None:
        payload = {"requestObject": {"activationId": activation_id}}
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                verify=self.verify_ssl,
                auth=self.credentials,
                transport=self._transport,
            ) as client:
                resp = await client.post(self.endpoint, json=payload)
        except httpx.HTTPError as exc:
            logger.error("PowerAuth request failed for activation %s: %s", activation_id, exc)
            raise InfrastructureError("Activation service is unreachable") from exc

        if resp.status_code == 404:
            return None
        body = self._json(resp)
        response_object = body.get("responseObject") or {}
        if resp.status_code >= 400 or body.get("status") == "ERROR":
            if response_object.get("code") == NOT_FOUND_CODE:
                return None
            logger.error("PowerAuth error %s: %s", resp.status_code, resp.text)
            raise InfrastructureError(
                "Activation status lookup failed",
                details={"activation_id": activation_id, "status_code": resp.status_code},
            )
        raw_status = str(response_object.get("activationStatus") or "").upper()
        status = _STATUS_MAP.get(raw_status, ActivationStatus.UNKNOWN)
        logger.debug("Activation %s has status %s", activation_id, raw_status)
        return ActivationStatusInfo(
            activation_id=activation_id,
            status=status,
            user_id=response_object.get("userId"),
        )

    @staticmethod
    def _json(resp: httpx.Response) -> dict[str, Any]:
        try:
            body = resp.json()
        except ValueError as exc:
            raise InfrastructureError("Activation service returned a malformed response") from exc
        if not isinstance(body, dict):
            raise InfrastructureError("Activation service returned a malformed response")
        return body
