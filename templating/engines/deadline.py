"""
Optional wall-clock deadline for engine execution.

Uses SIGALRM (via setitimer) so it only applies on Unix and in the main
thread; elsewhere the call runs unbounded.
"""

import logging
import signal
import threading
from collections.abc import Callable
from typing import Any, TypeVar

from templating.core.config import settings
from templating.engines.errors import RenderTimeoutError

_log = logging.getLogger(__name__)

T = TypeVar("T")


def resolve_timeout(timeout: float | None) -> float | None:
    """Explicit *timeout* wins; otherwise RENDER_TIMEOUT. Non-positive means unbounded."""
    value = timeout if timeout is not None else settings.RENDER_TIMEOUT
    if value is None or value <= 0:
        return None
    return value


def _can_use_signal() -> bool:
    return (
        hasattr(signal, "SIGALRM")
        and hasattr(signal, "setitimer")
        and threading.current_thread() is threading.main_thread()
    )


class _DeadlineExceeded(BaseException):
    """Raised from the SIGALRM handler; not an Exception so engine code cannot swallow it."""


# After the first expiry the alarm keeps firing at this interval until fn returns.
_REARM_INTERVAL = 0.05


def run_with_deadline(
    fn: Callable[..., T],
    *args: Any,
    timeout: float | None = None,
    engine: str | None = None,
) -> T:
    """
    Call fn(*args); raise RenderTimeoutError if it runs longer than *timeout* seconds.

    The deadline counts as expired even if fn catches the interrupt and returns.
    """
    seconds = resolve_timeout(timeout)
    if seconds is None:
        return fn(*args)
    if not _can_use_signal():
        _log.debug("Deadline of %ss not enforced for %s (no SIGALRM in this thread)", seconds, engine)
        return fn(*args)

    expired = False

    def _handler(signum: int, frame: Any) -> None:
        nonlocal expired
        expired = True
        raise _DeadlineExceeded()

    old = signal.signal(signal.SIGALRM, _handler)
    try:
        signal.setitimer(signal.ITIMER_REAL, seconds, _REARM_INTERVAL)
        out = fn(*args)
        signal.setitimer(signal.ITIMER_REAL, 0)
    except _DeadlineExceeded:
        pass
    finally:
        signal.setitimer(signal.ITIMER_REAL, 0)
        signal.signal(signal.SIGALRM, old)

    if expired:
        raise RenderTimeoutError(
            f"{engine or 'render'} execution timed out after {seconds}s", engine=engine
        )
    return out
