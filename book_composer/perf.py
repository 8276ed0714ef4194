# book_composer/perf.py
"""
Timing for screen actions, books API calls and HTTP requests.

Everything logs elapsed seconds with three decimals so one grep over the
log lines up a request with the screen action and API call inside it.
"""
import functools
import logging
import time
from contextlib import asynccontextmanager
from typing import Callable, Optional

from fastapi import Request

logger = logging.getLogger(__name__)


class Stopwatch:
    def __init__(self) -> None:
        self.started: float = time.perf_counter()

    @property
    def elapsed(self) -> str:
        return f"{time.perf_counter() - self.started:.3f}"


@asynccontextmanager
async def async_perf_log(operation: str, logger: logging.Logger = logger):
    watch = Stopwatch()
    logger.info(f"Starting: {operation}")
    try:
        yield watch
    except Exception as e:
        logger.error(f"Failed: {operation} after {watch.elapsed}s - {e}")
        raise
    logger.info(f"Completed: {operation} in {watch.elapsed}s")


def timed_action(name: Optional[str] = None) -> Callable:
    """Times a route handler under a screen-action name (the function name by default)."""

    def decorator(func: Callable) -> Callable:
        operation = f"Screen action: {name or func.__name__}"

        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            async with async_perf_log(operation):
                return await func(*args, **kwargs)

        return wrapper

    return decorator


async def request_timing_middleware(request: Request, call_next):
    """Logs one line per request and reports the time in X-Process-Time"""
    watch = Stopwatch()
    route = f"{request.method} {request.url.path}"
    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(f"{route} raised {e!r} after {watch.elapsed}s")
        raise

    logger.info(f"{route} -> {response.status_code} in {watch.elapsed}s")
    response.headers["X-Process-Time"] = watch.elapsed
    return response
