import logging
import threading
import time
from typing import Any, Callable, Optional


class TimerHandle:
    """A pending callback. Cancelling is idempotent and a cancelled timer never fires."""

    __slots__ = ('label', 'cancelled', 'fired')

    def __init__(self, label: str = ''):
        self.label = label
        self.cancelled = False
        self.fired = False

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> None:
        self.cancelled = True


class SocketIOScheduler:
    """Runs delayed callbacks on Socket.IO background tasks.

    Every callback runs while holding ``lock`` (the hub lock), so timer
    callbacks never interleave with inbound event handlers.
    """

    def __init__(self, socketio, lock: Optional[threading.RLock] = None,
                 logger: Optional[logging.Logger] = None):
        self.socketio = socketio
        self.lock = lock or threading.RLock()
        self.logger = logger or logging.getLogger(__name__)

    def now(self) -> float:
        return time.monotonic()

    def call_later(self, delay_sec: float, callback: Callable[..., Any], *args: Any,
                   label: str = '') -> TimerHandle:
        handle = TimerHandle(label or getattr(callback, '__name__', 'timer'))

        def _worker():
            self.socketio.sleep(max(0.0, delay_sec))
            with self.lock:
                if handle.cancelled:
                    self.logger.debug(f"[timer-abort] {handle.label} cancelled")
                    return
                handle.fired = True
                run_guarded(callback, args, handle.label, self.logger)

        self.socketio.start_background_task(_worker)
        return handle


def run_guarded(callback: Callable[..., Any], args: tuple, label: str,
                logger: logging.Logger) -> None:
    """Run a timer callback; an exception is logged and stays scoped to that callback."""
    try:
        callback(*args)
    except Exception:
        logger.exception(f"[timer-error] {label} raised")
