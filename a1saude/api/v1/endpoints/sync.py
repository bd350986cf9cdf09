from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from a1saude.db.session import get_db_session
from a1saude.schemas.sync import (
    PendingEventsPage,
    SyncEventCreate,
    SyncEventOut,
    SyncEventRecorded,
    SyncStats,
    SyncTriggerAck,
)
from a1saude.services.sync_event_service import SyncEventService

router = APIRouter(prefix="/sync")


@router.post("/events", response_model=SyncEventRecorded, summary="Registrar evento de sincronização")
async def record_sync_event(payload: SyncEventCreate, db: AsyncSession = Depends(get_db_session)):
    service = SyncEventService(session=db)
    event_id = await service.record_event(payload.type, payload.entity, payload.entity_id, payload.data)
    return {"message": "Evento de sincronização registrado com sucesso", "eventId": event_id}


@router.get("/stats", response_model=SyncStats, summary="Estatísticas de sincronização")
async def sync_stats(db: AsyncSession = Depends(get_db_session)):
    return await SyncEventService(session=db).get_stats()


@router.get("/pending", response_model=PendingEventsPage, summary="Eventos pendentes")
async def pending_events(
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    db: AsyncSession = Depends(get_db_session),
):
    events, total = await SyncEventService(session=db).list_pending_events(limit=limit, offset=offset)
    return {
        "events": [SyncEventOut(**e.to_dict()) for e in events],
        "pagination": {"total": total, "limit": limit, "offset": offset},
    }


@router.post("/trigger", response_model=SyncTriggerAck, summary="Acionar sincronização manual")
async def trigger_sync(request: Request, db: AsyncSession = Depends(get_db_session)):
    """
    Confirma o pedido imediatamente; a conclusão é apenas registrada em log
    após o atraso configurado. Nenhum evento muda de status.
    """
    delay = request.app.state.settings.SYNC_TRIGGER_DELAY_SECONDS
    message = await SyncEventService(session=db, trigger_delay=delay).trigger_sync()
    return {"message": message}
