from __future__ import annotations

from typing import Iterable

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.application.errors import ConflictError, ConsistencyViolation, InfrastructureError
from src.application.interfaces.repositories.device_registrations import (
    DeviceRegistrationsRepository,
)
from src.domain.models.device_registration import DeviceRegistration
from src.domain.value_objects.platform import Platform
from src.infrastructure.db.orm.device_registration import DeviceRegistrationORM


class DeviceRegistrationsSQLAlchemyRepository(DeviceRegistrationsRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _to_domain(self, orm: DeviceRegistrationORM) -> DeviceRegistration:
        return DeviceRegistration(
            id=orm.id,
            app_id=orm.app_id,
            push_token=orm.push_token,
            platform=Platform(orm.platform),
            activation_id=orm.activation_id,
            user_id=orm.user_id,
            is_active=orm.is_active,
            timestamp_last_registered=orm.timestamp_last_registered,
        )

    def _apply(self, orm: DeviceRegistrationORM, registration: DeviceRegistration) -> None:
        orm.app_id = registration.app_id
        orm.push_token = registration.push_token
        orm.platform = registration.platform.value if registration.platform else None
        orm.activation_id = registration.activation_id
        orm.user_id = registration.user_id
        orm.is_active = registration.is_active
        orm.timestamp_last_registered = registration.timestamp_last_registered

    async def _find(self, *criteria) -> list[DeviceRegistration]:
        stmt = select(DeviceRegistrationORM).where(*criteria).order_by(DeviceRegistrationORM.id)
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            raise InfrastructureError("Device registration lookup failed") from exc
        return [self._to_domain(r) for r in result.scalars().all()]

    async def find_by_activation_and_token(
        self, activation_id: str, push_token: str
    ) -> list[DeviceRegistration]:
        return await self._find(
            DeviceRegistrationORM.activation_id == activation_id,
            DeviceRegistrationORM.push_token == push_token,
        )

    async def find_by_activation(self, activation_id: str) -> list[DeviceRegistration]:
        return await self._find(DeviceRegistrationORM.activation_id == activation_id)

    async def find_by_app_and_token(
        self, app_id: int, push_token: str
    ) -> list[DeviceRegistration]:
        return await self._find(
            DeviceRegistrationORM.app_id == app_id,
            DeviceRegistrationORM.push_token == push_token,
        )

    async def save(self, registration: DeviceRegistration) -> DeviceRegistration:
        if registration.id is None:
            orm = DeviceRegistrationORM()
            self.session.add(orm)
        else:
            try:
                orm = await self.session.get(DeviceRegistrationORM, registration.id)
            except SQLAlchemyError as exc:
                raise InfrastructureError("Device registration lookup failed") from exc
            if orm is None:
                raise ConflictError(
                    "Device registration was removed concurrently",
                    details={"registration_id": registration.id},
                )
        self._apply(orm, registration)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise ConsistencyViolation(
                "Device registration violates the uniqueness of activation ID and push token",
                details={"activation_id": registration.activation_id},
            ) from exc
        except SQLAlchemyError as exc:
            raise InfrastructureError(
                "Device registration could not be saved",
                details={"registration_id": registration.id},
            ) from exc
        return self._to_domain(orm)

    async def delete(self, registration: DeviceRegistration) -> None:
        await self.delete_all([registration])

    async def delete_all(self, registrations: Iterable[DeviceRegistration]) -> int:
        ids = [r.id for r in registrations if r.id is not None]
        if not ids:
            return 0
        stmt = delete(DeviceRegistrationORM).where(DeviceRegistrationORM.id.in_(ids))
        try:
            res = await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            raise InfrastructureError("Device registrations could not be deleted") from exc
        return res.rowcount or 0
