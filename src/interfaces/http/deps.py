from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Request

from src.config.settings import Settings, get_settings
from src.domain.ports.activation_status_oracle import ActivationStatusOracle
from src.infrastructure.db.session import SQLAlchemyUnitOfWork


async def get_uow(request: Request) -> AsyncIterator[SQLAlchemyUnitOfWork]:
    session_factory = getattr(request.app.state, "session_factory", None)
    if session_factory is None:
        raise RuntimeError("Session factory not configured")
    uow = SQLAlchemyUnitOfWork(session_factory)
    async with uow:
        yield uow


def get_app_settings(request: Request) -> Settings:
    return getattr(request.app.state, "settings", None) or get_settings()


def get_activation_oracle(request: Request) -> ActivationStatusOracle:
    oracle = getattr(request.app.state, "activation_oracle", None)
    if oracle is None:
        raise RuntimeError("Activation status client not configured")
    return oracle
