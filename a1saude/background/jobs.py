from apscheduler.schedulers.asyncio import AsyncIOScheduler

from a1saude.core.config import Settings
from a1saude.core.logging import set_job_name
from a1saude.db.session import Database
from a1saude.services.offline_cache_service import OfflineCacheService


async def purge_expired_cache_job(db: Database) -> int:
    """
    Job do APScheduler que limpa o cache offline expirado.
    """
    set_job_name("purge_expired_cache_job")
    async with db.session_factory() as session:
        service = OfflineCacheService(session=session)
        return await service.purge_expired()


def build_scheduler(db: Database, settings: Settings) -> AsyncIOScheduler:
    scheduler = AsyncIOScheduler(timezone=settings.TIMEZONE)
    scheduler.add_job(
        purge_expired_cache_job,
        'interval',
        seconds=settings.CACHE_PURGE_INTERVAL_SECONDS,
        args=[db],
        id='purge_expired_cache',
        coalesce=True,
        max_instances=1,
    )
    return scheduler
