from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SyncEventCreate(BaseModel):
    """
    Corpo de POST /sync/events.
    Campos obrigatórios são validados no serviço, para devolver 400 com a lista de campos.
    """
    model_config = ConfigDict(populate_by_name=True)

    type: Any = None
    entity: Any = None
    entity_id: Any = Field(default=None, alias="entityId")
    data: Any = None


class SyncEventRecorded(BaseModel):
    message: str
    eventId: str


class SyncEventOut(BaseModel):
    id: str
    type: str
    entity: str
    entityId: str
    data: str
    timestamp: datetime
    status: str
    retryCount: int
    createdAt: datetime
    updatedAt: datetime


class SyncEventCounts(BaseModel):
    total: int = 0
    pending: int = 0
    synced: int = 0
    failed: int = 0


class OfflineCacheCounts(BaseModel):
    total: int = 0
    expired: int = 0


class OfflineOperationCounts(BaseModel):
    total: int = 0
    pending: int = 0
    completed: int = 0
    failed: int = 0


class SyncStats(BaseModel):
    syncEvents: SyncEventCounts
    offlineCache: OfflineCacheCounts
    offlineOperations: OfflineOperationCounts


class Pagination(BaseModel):
    total: int
    limit: int
    offset: int


class PendingEventsPage(BaseModel):
    events: list[SyncEventOut]
    pagination: Pagination


class SyncTriggerAck(BaseModel):
    message: str
