import asyncio
import json
import logging
import random
import string
import time
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from a1saude.core.config import settings
from a1saude.core.errors import PersistenceError, ValidationError
from a1saude.core.observability import log_step
from a1saude.db.base_class import utcnow
from a1saude.models.offline import OfflineCache, OfflineOperation
from a1saude.models.sync_event import SyncEvent, SyncStatus
from a1saude.schemas.sync import (
    OfflineCacheCounts,
    OfflineOperationCounts,
    SyncEventCounts,
    SyncStats,
)

logger = logging.getLogger(__name__)

_BASE36 = string.digits + string.ascii_lowercase

TRIGGER_ACK = "Sincronização acionada com sucesso"


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    out = []
    while value:
        value, rem = divmod(value, 36)
        out.append(_BASE36[rem])
    return "".join(reversed(out))


def new_event_id() -> str:
    """Random base-36 fragment followed by the base-36 millisecond clock."""
    return _to_base36(random.getrandbits(56)) + _to_base36(int(time.time() * 1000))


def _count(model, *criteria):
    return select(func.count()).select_from(model).where(*criteria).correlate(None).scalar_subquery()


class SyncEventService:
    """Registro de eventos de sincronização e contadores agregados."""

    PROCESS_NAME = "SyncEventLog"

    def __init__(self, session: AsyncSession, trigger_delay: float | None = None):
        self.session = session
        self.trigger_delay = settings.SYNC_TRIGGER_DELAY_SECONDS if trigger_delay is None else trigger_delay

    @staticmethod
    def _validate(type: Any, entity: Any, entity_id: Any, data: Any) -> str:
        errors: dict[str, str] = {}
        for name, value in (("type", type), ("entity", entity), ("entityId", entity_id)):
            if value is None or (isinstance(value, str) and not value.strip()):
                errors[name] = "obrigatório"
            elif not isinstance(value, str):
                errors[name] = "deve ser texto"
        try:
            data_text = json.dumps({} if data is None else data, ensure_ascii=False)
        except (TypeError, ValueError):
            errors["data"] = "deve ser serializável em JSON"
            data_text = ""
        if errors:
            raise ValidationError(errors, operation="record_event")
        return data_text

    @log_step("sync.record_event")
    async def record_event(self, type: str, entity: str, entity_id: str, data: Any = None) -> str:
        """
        Grava um evento `pending` e devolve o id gerado.

        Raises:
            ValidationError: type/entity/entityId ausente ou vazio, data não serializável.
            PersistenceError: falha ao inserir; nada é repetido.
        """
        data_text = self._validate(type, entity, entity_id, data)
        event_id = new_event_id()
        now = utcnow()

        event = SyncEvent(
            id=event_id,
            type=type,
            entity=entity,
            entity_id=entity_id,
            data=data_text,
            timestamp=now,
            status=SyncStatus.PENDING.value,
            retry_count=0,
            created_at=now,
            updated_at=now,
        )
        try:
            self.session.add(event)
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise PersistenceError("record_event", exc) from exc

        logger.info(
            "Evento registrado: %s.%s#%s", type, entity, entity_id,
            extra={"extra": {"event_id": event_id, "entity": entity}},
        )
        return event_id

    @log_step("sync.get_stats")
    async def get_stats(self) -> SyncStats:
        """
        Contadores de SyncEvent, OfflineCache e OfflineOperation.

        Todos os contadores saem de um único SELECT (subconsultas escalares),
        portanto refletem o mesmo instante do banco.
        """
        now = utcnow()
        stmt = select(
            _count(SyncEvent).label("events_total"),
            _count(SyncEvent, SyncEvent.status == SyncStatus.PENDING.value).label("events_pending"),
            _count(SyncEvent, SyncEvent.status == SyncStatus.SYNCED.value).label("events_synced"),
            _count(SyncEvent, SyncEvent.status == SyncStatus.FAILED.value).label("events_failed"),
            _count(OfflineCache).label("cache_total"),
            _count(OfflineCache, OfflineCache.expires_at < now).label("cache_expired"),
            _count(OfflineOperation).label("ops_total"),
            _count(OfflineOperation, OfflineOperation.status == "pending").label("ops_pending"),
            _count(OfflineOperation, OfflineOperation.status == "completed").label("ops_completed"),
            _count(OfflineOperation, OfflineOperation.status == "failed").label("ops_failed"),
        )
        try:
            row = (await self.session.execute(stmt)).one()
        except SQLAlchemyError as exc:
            raise PersistenceError("get_stats", exc) from exc

        return SyncStats(
            syncEvents=SyncEventCounts(
                total=row.events_total,
                pending=row.events_pending,
                synced=row.events_synced,
                failed=row.events_failed,
            ),
            offlineCache=OfflineCacheCounts(total=row.cache_total, expired=row.cache_expired),
            offlineOperations=OfflineOperationCounts(
                total=row.ops_total,
                pending=row.ops_pending,
                completed=row.ops_completed,
                failed=row.ops_failed,
            ),
        )

    @log_step("sync.list_pending")
    async def list_pending_events(self, limit: int = 50, offset: int = 0) -> tuple[list[SyncEvent], int]:
        """Página de eventos `pending`, mais antigos primeiro, e o total pendente."""
        limit = max(1, min(int(limit), settings.PENDING_PAGE_MAX))
        offset = max(0, int(offset))
        pending = SyncEvent.status == SyncStatus.PENDING.value

        try:
            result = await self.session.execute(
                select(SyncEvent).where(pending).order_by(SyncEvent.timestamp, SyncEvent.id).limit(limit).offset(offset)
            )
            events = list(result.scalars().all())
            total = (await self.session.execute(select(func.count()).select_from(SyncEvent).where(pending))).scalar_one()
        except SQLAlchemyError as exc:
            raise PersistenceError("list_pending_events", exc) from exc
        return events, total

    async def trigger_sync(self) -> str:
        """
        Aciona a sincronização manual.

        Apenas confirma o pedido e agenda um log de conclusão após
        `trigger_delay` segundos. Não altera status de nenhum evento.
        """
        logger.info("[Sync] Sincronização manual acionada")
        loop = asyncio.get_running_loop()
        loop.call_later(self.trigger_delay, logger.info, "[Sync] Sincronização concluída")
        return TRIGGER_ACK
