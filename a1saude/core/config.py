from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Configurações da aplicação
    PROJECT_NAME: str = "A1 Saúde Sync Hub"
    DEBUG: bool = False

    # Banco de dados; sqlite+aiosqlite por padrão, postgresql+asyncpg em produção
    DATABASE_URL: str = Field(default="sqlite+aiosqlite:///./a1saude.db")
    CREATE_TABLES_ON_STARTUP: bool = True

    # Sincronização
    SYNC_TRIGGER_DELAY_SECONDS: float = Field(default=2.0, ge=0)
    PENDING_PAGE_MAX: int = Field(default=500, ge=1)

    # Agendador
    ENABLE_SCHEDULER: bool = True
    CACHE_PURGE_INTERVAL_SECONDS: int = Field(default=300, ge=1)
    TIMEZONE: str = "America/Sao_Paulo"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    @property
    def database_url(self) -> str:
        """URL assíncrono de conexão com o banco."""
        return self.DATABASE_URL

    @property
    def sync_database_url(self) -> str:
        """URL síncrono para Alembic e prestart."""
        return (
            self.DATABASE_URL
            .replace("+asyncpg", "+psycopg2")
            .replace("+aiosqlite", "")
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
