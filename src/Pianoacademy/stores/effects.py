import logging
import threading
from collections import deque
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3


@dataclass
class SideEffect:
    name: str
    fn: object
    args: tuple = ()
    kwargs: dict = field(default_factory=dict)
    attempts: int = 0
    last_error: str = None


class SideEffectQueue:
    """Fire-and-forget follow-ups of a store mutation (notifications, activity log).

    A failing task is retried up to ``max_attempts`` times, then logged and
    parked in ``failed``. Nothing here ever raises into the caller.
    """

    def __init__(self, max_attempts=DEFAULT_MAX_ATTEMPTS, auto_drain=True):
        self.max_attempts = max_attempts
        self.auto_drain = auto_drain
        self.failed = []
        self._pending = deque()
        self._lock = threading.Lock()
        self._draining = False

    def submit(self, name, fn, *args, **kwargs):
        with self._lock:
            self._pending.append(SideEffect(name, fn, args, kwargs))
        if self.auto_drain:
            self.drain()

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._pending)

    def _next(self):
        with self._lock:
            return self._pending.popleft() if self._pending else None

    def drain(self) -> int:
        """Run queued tasks; returns how many succeeded."""
        with self._lock:
            # a task submitting another task lands in the running drain
            if self._draining:
                return 0
            self._draining = True
        done = 0
        try:
            task = self._next()
            while task is not None:
                if self._run(task):
                    done += 1
                task = self._next()
        finally:
            with self._lock:
                self._draining = False
        return done

    def _run(self, task) -> bool:
        while task.attempts < self.max_attempts:
            task.attempts += 1
            try:
                task.fn(*task.args, **task.kwargs)
                return True
            except Exception as e:
                task.last_error = str(e)
                logger.warning("Side effect %s failed (attempt %d/%d): %s",
                               task.name, task.attempts, self.max_attempts, e)
        logger.error("Side effect %s dropped after %d attempts", task.name, task.attempts)
        with self._lock:
            self.failed.append(task)
        return False
