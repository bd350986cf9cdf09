import functools
import inspect
import logging
import time
from typing import Any, Callable

from .errors import A1SaudeError
from .logging import _redact

logger = logging.getLogger("steps")


def _elapsed_ms(t0: float) -> int:
    return round((time.perf_counter() - t0) * 1000)


def _enter(step: str, kwargs: dict[str, Any]) -> float:
    logger.debug("ENTER %s", step, extra={"extra": {"step": step, "args": _redact(kwargs)}})
    return time.perf_counter()


def _exit(step: str, t0: float, result: Any) -> None:
    logger.info(
        "EXIT %s", step,
        extra={"extra": {"step": step, "elapsed_ms": _elapsed_ms(t0), "result_preview": str(result)[:200]}},
    )


def _fail(step: str, t0: float, exc: Exception) -> None:
    extra = {"extra": {"step": step, "elapsed_ms": _elapsed_ms(t0), "error_type": type(exc).__name__}}
    if isinstance(exc, A1SaudeError) and exc.status_code < 500:
        # Erro de entrada do cliente: sem traceback
        logger.warning("REJECTED %s: %s", step, exc, extra=extra)
        return
    logger.error("ERROR %s: %s", step, exc, extra=extra, exc_info=True)


def log_step(step: str):
    """
    Registra entrada, saída, duração e exceções de uma etapa.
    Exemplo: @log_step("sync.record_event")
    """
    def decorator(fn: Callable):
        if inspect.iscoroutinefunction(fn):
            @functools.wraps(fn)
            async def awrapped(*args, **kwargs):
                t0 = _enter(step, kwargs)
                try:
                    result = await fn(*args, **kwargs)
                except Exception as e:
                    _fail(step, t0, e)
                    raise
                _exit(step, t0, result)
                return result
            return awrapped

        @functools.wraps(fn)
        def wrapped(*args, **kwargs):
            t0 = _enter(step, kwargs)
            try:
                result = fn(*args, **kwargs)
            except Exception as e:
                _fail(step, t0, e)
                raise
            _exit(step, t0, result)
            return result
        return wrapped

    return decorator
