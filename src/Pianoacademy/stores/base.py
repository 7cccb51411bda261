"""
Observable in-memory stores sitting on top of the repositories.

A store keeps the last fetched collections plus ``loading``, ``error`` and
``last_fetched`` (epoch seconds). Listeners get the store after every
state change.
"""
import time
import logging
from datetime import date

logger = logging.getLogger(__name__)

THREE_MINUTES = 3 * 60
FIVE_MINUTES = 5 * 60


class Store:
    name = "Store"
    ttl = None

    def __init__(self, clock=None):
        self._clock = clock or time.time
        self._listeners = []
        self.loading = False
        self.error = None
        self.last_fetched = None
        self._reset_state()

    def _reset_state(self):
        pass

    # --- observable ---

    def subscribe(self, listener):
        """Register ``listener(store)``; returns the unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def _notify(self):
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as e:
                logger.error("%s listener failed: %s", self.name, e)

    def _set(self, **changes):
        for key, value in changes.items():
            setattr(self, key, value)
        self._notify()

    # --- cache ---

    def now(self) -> float:
        return self._clock()

    def today(self) -> date:
        return date.fromtimestamp(self._clock())

    def is_fresh(self) -> bool:
        if self.ttl is None or self.last_fetched is None:
            return False
        return self._clock() - self.last_fetched < self.ttl

    # --- actions ---

    def _run_action(self, fallback, fn, *args, **kwargs):
        """idle -> loading -> idle; on failure ``error`` is set and the exception re-raised."""
        self._set(loading=True, error=None)
        try:
            result = fn(*args, **kwargs)
        except Exception as e:
            logger.error("%s: %s", fallback, e)
            self._set(loading=False, error=str(e) or fallback)
            raise
        self._set(loading=False)
        return result

    def clear_error(self):
        self._set(error=None)

    def reset(self):
        self._reset_state()
        self._set(loading=False, error=None, last_fetched=None)


class EffectsMixin:
    """Notification / activity side effects for stores that have them."""

    effects = None
    notifications = None
    activities = None
    current_user = None

    def _user_id(self):
        return self.current_user() if self.current_user else None

    def _notify_user(self, notification):
        user_id = self._user_id()
        if not user_id or self.notifications is None or self.effects is None:
            return
        self.effects.submit(notification["type"], self.notifications.add_notification, notification, user_id)

    def _log_activity(self, activity):
        if not self._user_id() or self.activities is None or self.effects is None:
            return
        self.effects.submit(f"activity:{activity['type']}", self.activities.create, activity)


class RealtimeMixin:
    """Live snapshot binding; ``reset`` closes the open listener."""

    _subscription = None

    def _on_snapshot(self, items):
        raise NotImplementedError

    def bind_realtime(self, source=None):
        """Replace the store's collection on every snapshot of ``source`` (the repository by default)."""
        source = source or self.repository
        self.close_realtime()
        self._subscription = source.subscribe(self._on_snapshot)
        return self._subscription

    def close_realtime(self):
        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None

    def reset(self):
        self.close_realtime()
        super().reset()
