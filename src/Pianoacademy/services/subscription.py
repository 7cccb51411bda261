import logging
import threading

logger = logging.getLogger(__name__)


class Subscription:
    """Handle for a live listener. The owner must ``close()`` it.

    Usable as a context manager; closing twice is a no-op.
    """

    def __init__(self, name, unsubscribe=None):
        self.name = name
        self._unsubscribe = unsubscribe
        self._lock = threading.Lock()
        self._closed = unsubscribe is None

    @classmethod
    def closed_handle(cls, name):
        return cls(name, None)

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self):
        with self._lock:
            if self._closed:
                return
            self._closed = True
            unsubscribe, self._unsubscribe = self._unsubscribe, None
        try:
            unsubscribe()
            logger.debug("Subscription %s closed", self.name)
        except Exception as e:
            logger.warning("Failed to close subscription %s: %s", self.name, e)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def __del__(self):
        if not getattr(self, "_closed", True):
            logger.warning("Subscription %s was garbage-collected while open", self.name)

    def __repr__(self):
        state = "closed" if self._closed else "open"
        return f"<Subscription {self.name} {state}>"
