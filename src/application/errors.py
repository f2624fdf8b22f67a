from __future__ import annotations

from typing import Any, Mapping


class AppError(Exception):
    code = "app_error"
    status_code = 400

    def __init__(self, message: str, *, details: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(AppError):
    code = "validation_error"
    status_code = 422


class FeatureDisabled(AppError):
    code = "feature_disabled"
    status_code = 400


class ConflictError(AppError):
    code = "conflict"
    status_code = 409


class AmbiguousRegistration(ConflictError):
    """Several registrations share the push token; only the multi path can resolve them."""

    code = "ambiguous_registration"


class ConsistencyViolation(AppError):
    """The store returned rows its uniqueness constraints should never allow."""

    code = "consistency_violation"
    status_code = 500


class RegistrationFailed(AppError):
    code = "registration_failed"
    status_code = 500


class InfrastructureError(AppError):
    code = "infrastructure_error"
    status_code = 500
