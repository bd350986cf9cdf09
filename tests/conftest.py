import pytest
import pytest_asyncio

from a1saude.core.config import Settings
from a1saude.db.session import Database


@pytest_asyncio.fixture
async def db(tmp_path):
    """Banco SQLite isolado por teste."""
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'sync.db'}")
    await database.create_all()
    yield database
    await database.dispose()


@pytest_asyncio.fixture
async def session(db):
    async with db.session_factory() as s:
        yield s


@pytest.fixture
def app_settings(tmp_path):
    return Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'api.db'}",
        ENABLE_SCHEDULER=False,
        CREATE_TABLES_ON_STARTUP=True,
        SYNC_TRIGGER_DELAY_SECONDS=0.01,
    )
