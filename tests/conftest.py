from __future__ import annotations

import os
import sys
from collections.abc import AsyncIterator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///default.db")

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(PROJECT_ROOT))

# ruff: noqa: E402
from src.application.errors import InfrastructureError
from src.config.settings import Settings
from src.domain.ports.activation_status_oracle import ActivationStatusOracle
from src.domain.value_objects.activation_status import ActivationStatus, ActivationStatusInfo
from src.infrastructure.db.base import Base
from src.infrastructure.db.orm import device_registration  # noqa: F401
from src.interfaces.http.main import create_app


class StubActivationOracle(ActivationStatusOracle):
    def __init__(self) -> None:
        self.activations: dict[str, ActivationStatusInfo] = {}
        self.unreachable: set[str] = set()
        self.calls: list[str] = []

    def set(
        self,
        activation_id: str,
        status: ActivationStatus = ActivationStatus.ACTIVE,
        user_id: str | None = None,
    ) -> None:
        self.activations[activation_id] = ActivationStatusInfo(
            activation_id=activation_id, status=status, user_id=user_id
        )

    async def get_status(self, activation_id: str) -> ActivationStatusInfo | None:
        self.calls.append(activation_id)
        if activation_id in self.unreachable:
            raise InfrastructureError("Activation service is unreachable")
        return self.activations.get(activation_id)


@pytest.fixture()
def oracle() -> StubActivationOracle:
    return StubActivationOracle()


@pytest.fixture()
def test_settings(tmp_path) -> Settings:
    db_path = tmp_path / "test.db"
    return Settings.model_validate(
        {
            "database_url": f"sqlite+aiosqlite:///{db_path}",
            "log_level": "INFO",
            "environment": "test",
            "multi_activation_registration_enabled": True,
        }
    )


@pytest.fixture()
def app(test_settings: Settings, oracle: StubActivationOracle):
    return create_app(settings=test_settings, activation_oracle=oracle)


@pytest.fixture()
async def client(app) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        engine = app.state.engine
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
        yield client
        await engine.dispose()
