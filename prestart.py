import logging
import time

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError

from a1saude.core.config import settings

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

MAX_TRIES = 60
WAIT_SECONDS = 1


def check_db_connection() -> bool:
    """Aguarda o banco responder antes de aplicar as migrações."""
    engine = create_engine(settings.sync_database_url)
    try:
        for _ in range(MAX_TRIES):
            try:
                with engine.connect() as conn:
                    conn.execute(text("SELECT 1"))
                logger.info("Database connection successful.")
                return True
            except OperationalError:
                logger.info("Database not ready yet, waiting %s second(s)...", WAIT_SECONDS)
                time.sleep(WAIT_SECONDS)
    finally:
        engine.dispose()
    logger.error("Could not connect to the database after %d attempts.", MAX_TRIES)
    return False


def run_migrations() -> None:
    """Aplica as migrações Alembic até head."""
    logger.info("Running database migrations...")
    alembic_cfg = Config("alembic.ini")
    alembic_cfg.set_main_option("script_location", "migrations")
    command.upgrade(alembic_cfg, "head")
    logger.info("Migrations applied successfully.")


if __name__ == "__main__":
    if not check_db_connection():
        raise SystemExit(1)
    run_migrations()
