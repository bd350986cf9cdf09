from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from a1saude.db.base_class import Base, TimestampMixin, utcnow


class OfflineCache(Base):
    __tablename__ = "OfflineCache"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    data: Mapped[str] = mapped_column(Text, default="{}")
    tags: Mapped[str] = mapped_column(Text, default="[]", comment="Lista de tags em texto JSON")
    created_at: Mapped[datetime] = mapped_column("createdAt", DateTime(timezone=True), default=utcnow)
    expires_at: Mapped[datetime] = mapped_column("expiresAt", DateTime(timezone=True), index=True)


class OfflineOperation(Base, TimestampMixin):
    __tablename__ = "OfflineOperation"
    __table_args__ = (
        CheckConstraint("status in ('pending','completed','failed')", name="ck_offline_operation_status"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    type: Mapped[str] = mapped_column(String(100))
    entity: Mapped[str] = mapped_column(String(100))
    entity_id: Mapped[str | None] = mapped_column("entityId", String(255), nullable=True)
    data: Mapped[str] = mapped_column(Text, default="{}")
    status: Mapped[str] = mapped_column(String(20), default="pending", index=True, comment="pending, completed, failed")
    error: Mapped[str | None] = mapped_column(Text, nullable=True)
