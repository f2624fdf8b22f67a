from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, Boolean, DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.db.base import Base


class DeviceRegistrationORM(Base):
    __tablename__ = "push_device_registration"
    __table_args__ = (
        Index(
            "uq_push_device_registration_activation_token",
            "activation_id",
            "push_token",
            unique=True,
        ),
        Index("ix_push_device_registration_activation", "activation_id"),
        Index("ix_push_device_registration_app_token", "app_id", "push_token"),
    )

    # SQLite only autoincrements INTEGER primary keys
    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )
    activation_id: Mapped[str | None] = mapped_column(String(37), nullable=True)
    user_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    app_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    platform: Mapped[str] = mapped_column(String(30), nullable=False)  # ios | android | huawei
    push_token: Mapped[str] = mapped_column(String(255), nullable=False)
    timestamp_last_registered: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
