import json
import logging
import os
import sys
import time
import uuid
from contextvars import ContextVar
from typing import Any, Dict

# Identificadores que acompanham cada linha de log
run_id_var: ContextVar[str | None] = ContextVar("run_id", default=None)
request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)
job_name_var: ContextVar[str | None] = ContextVar("job_name", default=None)

# Dados pessoais (cpf) entram na lista padrão
REDACT_KEYS = frozenset(
    k.strip().lower()
    for k in os.getenv("LOG_REDACT_KEYS", "password,authorization,apikey,token,cpf").split(",")
    if k.strip()
)
LOG_BODY_MAX = int(os.getenv("LOG_BODY_MAX", "2000"))


def _redact(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: "***" if str(k).lower() in REDACT_KEYS else _redact(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_redact(v) for v in value]
    if isinstance(value, str) and len(value) > LOG_BODY_MAX:
        return f"{value[:LOG_BODY_MAX]}...(+{len(value) - LOG_BODY_MAX} chars)"
    return value


class JsonFormatter(logging.Formatter):
    """Uma linha JSON por registro, com o contexto de execução e o `extra` mascarado."""

    def format(self, record: logging.LogRecord) -> str:
        line: Dict[str, Any] = {
            "ts": round(time.time() * 1000),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "run_id": run_id_var.get(),
            "request_id": request_id_var.get(),
            "job_name": job_name_var.get(),
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            line.update(_redact(extra))
        if record.exc_info:
            line["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(line, ensure_ascii=False, default=str)


def configure_logging() -> None:
    """LOG_LEVEL e LOG_FORMAT (json|text) vêm do ambiente."""
    handler = logging.StreamHandler(sys.stdout)
    if os.getenv("LOG_FORMAT", "json").lower() == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO))


def set_run_id(value: str | None = None) -> str:
    run_id = value or uuid.uuid4().hex
    run_id_var.set(run_id)
    return run_id


def set_request_id(value: str) -> str:
    request_id_var.set(value)
    return value


def set_job_name(name: str) -> None:
    job_name_var.set(name)
