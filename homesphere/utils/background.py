import logging
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)


async def run_best_effort(func: Callable[..., Awaitable[Any]], *args, **kwargs) -> None:
    """
    Run a side effect whose failure must not affect the response.

    Used with ``BackgroundTasks``: the primary write has already committed,
    so a failed email is only logged.
    """
    try:
        await func(*args, **kwargs)
    except Exception as e:
        logger.warning(f"Best-effort task {getattr(func, '__name__', func)} failed: {e}")
