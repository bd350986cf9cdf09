import enum
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from a1saude.db.base_class import Base, TimestampMixin


class SyncStatus(str, enum.Enum):
    PENDING = "pending"
    SYNCED = "synced"
    FAILED = "failed"


class SyncEvent(Base, TimestampMixin):
    __tablename__ = "SyncEvent"
    __table_args__ = (
        CheckConstraint("status in ('pending','synced','failed')", name="ck_sync_event_status"),
        CheckConstraint('"retryCount" >= 0', name="ck_sync_event_retry_count"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    type: Mapped[str] = mapped_column(String(100), index=True, comment="Tipo da mutação, ex.: create, update")
    entity: Mapped[str] = mapped_column(String(100), index=True, comment="Entidade afetada, ex.: patient")
    entity_id: Mapped[str] = mapped_column("entityId", String(255))
    data: Mapped[str] = mapped_column(Text, default="{}", comment="Payload em texto JSON")
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)
    status: Mapped[str] = mapped_column(String(20), default=SyncStatus.PENDING.value, index=True)
    retry_count: Mapped[int] = mapped_column("retryCount", Integer, default=0)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "entity": self.entity,
            "entityId": self.entity_id,
            "data": self.data,
            "timestamp": self.timestamp,
            "status": self.status,
            "retryCount": self.retry_count,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
