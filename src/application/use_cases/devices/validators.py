from __future__ import annotations

from src.application.errors import ValidationError
from src.domain.value_objects.platform import Platform


def require_app_id(app_id: int | None) -> int:
    if app_id is None:
        raise ValidationError("Application ID must not be null")
    return app_id


def require_text(value: str | None, field_label: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{field_label} must not be null or empty")
    return value


def parse_platform(value: str | None) -> Platform:
    raw = require_text(value, "Platform")
    try:
        return Platform(raw.strip().lower())
    except ValueError as exc:
        allowed = ", ".join(p.value for p in Platform)
        raise ValidationError(
            f"Unsupported platform '{raw}'",
            details={"allowed": allowed},
        ) from exc


def require_activation_ids(activation_ids: list[str] | None) -> list[str]:
    if not activation_ids:
        raise ValidationError("Activation IDs must not be null or empty")
    seen: set[str] = set()
    for activation_id in activation_ids:
        require_text(activation_id, "Activation ID")
        if activation_id in seen:
            raise ValidationError(
                "Activation IDs must be unique", details={"activation_id": activation_id}
            )
        seen.add(activation_id)
    return list(activation_ids)
