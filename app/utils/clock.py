"""Clock abstraction for order numbers and delivery timestamps."""
from datetime import datetime, timezone


class SystemClock:
    """Wall-clock time in UTC."""

    def now(self):
        return datetime.now(timezone.utc)


class FixedClock:
    """Clock frozen at a given instant; ``advance`` moves it forward."""

    def __init__(self, instant):
        self._instant = instant

    def now(self):
        return self._instant

    def advance(self, delta):
        self._instant = self._instant + delta
        return self._instant


_default_clock = SystemClock()


def get_clock():
    """Return the clock registered on the current app, or the system clock."""
    from flask import current_app, has_app_context

    if has_app_context():
        return current_app.extensions.get('clock', _default_clock)
    return _default_clock
