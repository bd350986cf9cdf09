from collections.abc import AsyncIterator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from a1saude.db.base_class import Base


class Database:
    """Owns the async engine and session factory for the lifetime of the app (or a test)."""

    def __init__(self, url: str, *, echo: bool = False):
        self.url = url
        engine_kwargs = {"echo": echo}
        if not url.startswith("sqlite"):
            engine_kwargs["pool_pre_ping"] = True
        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            self.engine,
            expire_on_commit=False,
            class_=AsyncSession,
        )

    async def create_all(self) -> None:
        # Importa os modelos para registrá-los no metadata
        from a1saude.models import offline, sync_event  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


async def get_db_session(request: Request) -> AsyncIterator[AsyncSession]:
    """FastAPI dependency: sessão vinculada ao Database do app."""
    db: Database = request.app.state.db
    async with db.session_factory() as session:
        yield session
