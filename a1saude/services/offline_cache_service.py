import logging

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from a1saude.core.errors import PersistenceError
from a1saude.db.base_class import utcnow
from a1saude.models.offline import OfflineCache

logger = logging.getLogger(__name__)


class OfflineCacheService:
    PROCESS_NAME = "OfflineCache"

    def __init__(self, session: AsyncSession):
        self.session = session

    async def purge_expired(self) -> int:
        """Remove entradas do cache offline cujo expiresAt já passou."""
        stmt = delete(OfflineCache).where(OfflineCache.expires_at < utcnow())
        try:
            result = await self.session.execute(stmt)
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise PersistenceError("purge_expired_cache", exc) from exc

        removed = result.rowcount or 0
        if removed:
            logger.info("Cache offline: %d entradas expiradas removidas", removed, extra={"extra": {"removed": removed}})
        return removed
