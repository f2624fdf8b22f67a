from __future__ import annotations

from src.application.interfaces.unit_of_work import UnitOfWork
from src.application.use_cases.devices.validators import require_app_id, require_text


async def execute(uow: UnitOfWork, app_id: int | None, token: str | None) -> int:
    app_id = require_app_id(app_id)
    push_token = require_text(token, "Push token")
    registrations = await uow.devices.find_by_app_and_token(app_id, push_token)
    if not registrations:
        return 0
    removed = await uow.devices.delete_all(registrations)
    await uow.commit()
    return removed
