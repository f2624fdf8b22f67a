from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI

from src.config.settings import Settings, get_settings
from src.domain.ports.activation_status_oracle import ActivationStatusOracle
from src.infrastructure.db.session import create_engine, create_session_factory
from src.infrastructure.powerauth.activation_client import PowerAuthActivationClient
from src.interfaces.http.deps import get_app_settings
from src.interfaces.http.routers import push_devices
from src.interfaces.middleware.error_handler import register_error_handlers


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        yield
    finally:
        engine = getattr(app.state, "engine", None)
        if engine is not None:
            await engine.dispose()


def _configure_logging(level_name: str) -> None:
    level = getattr(logging, level_name.upper(), logging.INFO)
    root = logging.getLogger()
    # Avoid adding duplicate handlers on reload
    if not any(isinstance(h, logging.StreamHandler) for h in root.handlers):
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        )
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(level)
    # Align common libraries
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access", "sqlalchemy.engine", "httpx"):
        logging.getLogger(name).setLevel(level)


def create_app(
    *,
    settings: Settings | None = None,
    activation_oracle: ActivationStatusOracle | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    _configure_logging(settings.log_level)
    app = FastAPI(
        title="Push Registration Server",
        version="0.1.0",
        description="Registration of mobile push tokens for user activations",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = create_engine(settings.database_url)
    app.state.session_factory = create_session_factory(app.state.engine)
    app.state.activation_oracle = activation_oracle or PowerAuthActivationClient(
        settings.powerauth_service_url,
        credentials=settings.get_powerauth_credentials(),
        verify_ssl=not settings.powerauth_accept_invalid_ssl_certificate,
        timeout=settings.powerauth_timeout_seconds,
    )
    register_error_handlers(app)

    app.include_router(push_devices.router)

    @app.get("/health", tags=["health"])
    async def health(_: Settings = Depends(get_app_settings)) -> dict[str, str]:  # noqa: ANN001
        return {"status": "ok"}

    return app


app = create_app()
