from datetime import timedelta

from sqlalchemy import select

from a1saude.background.jobs import build_scheduler, purge_expired_cache_job
from a1saude.core.config import Settings
from a1saude.db.base_class import utcnow
from a1saude.models.offline import OfflineCache
from a1saude.services.offline_cache_service import OfflineCacheService


async def _seed_cache(session):
    now = utcnow()
    session.add_all([
        OfflineCache(key="old-1", data="{}", tags="[]", expires_at=now - timedelta(minutes=5)),
        OfflineCache(key="old-2", data="{}", tags="[]", expires_at=now - timedelta(days=1)),
        OfflineCache(key="fresh", data="{}", tags="[]", expires_at=now + timedelta(minutes=5)),
    ])
    await session.commit()


async def test_purge_expired_removes_only_expired(session):
    await _seed_cache(session)

    removed = await OfflineCacheService(session=session).purge_expired()

    assert removed == 2
    keys = (await session.execute(select(OfflineCache.key))).scalars().all()
    assert keys == ["fresh"]


async def test_purge_job_uses_injected_database(db, session):
    await _seed_cache(session)

    removed = await purge_expired_cache_job(db)

    assert removed == 2


def test_build_scheduler_registers_purge_job(tmp_path):
    settings = Settings(DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'x.db'}", CACHE_PURGE_INTERVAL_SECONDS=60)

    scheduler = build_scheduler(db=None, settings=settings)

    job = scheduler.get_job("purge_expired_cache")
    assert job is not None
    assert job.trigger.interval.total_seconds() == 60
