import logging
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from a1saude.api.v1.endpoints import reports, sync
from a1saude.background.jobs import build_scheduler
from a1saude.core.config import Settings, get_settings
from a1saude.core.errors import A1SaudeError
from a1saude.core.logging import configure_logging, set_request_id, set_run_id
from a1saude.db.session import Database

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, db: Database | None = None) -> FastAPI:
    """
    Monta a aplicação. `db` pode ser injetado (testes); caso contrário é
    criado a partir de DATABASE_URL e descartado no shutdown.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database = db or Database(settings.database_url, echo=settings.DEBUG)
        app.state.db = database
        if settings.CREATE_TABLES_ON_STARTUP:
            await database.create_all()

        scheduler = None
        if settings.ENABLE_SCHEDULER:
            logger.info("Starting scheduler...")
            scheduler = build_scheduler(database, settings)
            scheduler.start()

        yield

        if scheduler is not None:
            logger.info("Shutting down scheduler...")
            scheduler.shutdown()
        if db is None:
            await database.dispose()

    app = FastAPI(title=settings.PROJECT_NAME, version="1.0.0", lifespan=lifespan)
    app.state.settings = settings

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):
        request_id = set_request_id(request.headers.get("X-Request-ID") or str(uuid.uuid4()))
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    @app.exception_handler(A1SaudeError)
    async def a1saude_error_handler(request: Request, exc: A1SaudeError):
        level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
        cause = getattr(exc, "cause", None)
        logger.log(
            level, "%s em %s: %s", exc.code, exc.operation, exc.message,
            extra={"extra": {
                "path": request.url.path,
                "error": exc.code,
                "operation": exc.operation,
                "cause_type": type(cause).__name__ if cause is not None else None,
            }},
        )
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.get("/", tags=["Health Check"])
    def read_root():
        return {"status": "ok", "project_name": settings.PROJECT_NAME}

    @app.get("/health", tags=["Health Check"])
    async def health(request: Request):
        """Verifica a conexão com o banco."""
        now = datetime.now(timezone.utc).isoformat()
        try:
            async with request.app.state.db.session_factory() as session:
                await session.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.error("Health check failed: %s", e)
            return JSONResponse(
                status_code=503,
                content={"status": "unhealthy", "timestamp": now, "error": str(e)},
            )
        return {
            "status": "healthy",
            "timestamp": now,
            "services": {"database": "connected", "sync": "enabled"},
        }

    app.include_router(sync.router, prefix="/api/v1", tags=["Sync"])
    app.include_router(reports.router, prefix="/api/v1", tags=["Reports"])
    return app


configure_logging()
set_run_id()

app = create_app()
