"""Wall-clock access in the format the database expects."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone

_FORMAT = "%Y-%m-%d %H:%M:%S"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Timer:
    """Reports the current UTC time as text."""

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or _utc_now

    def now(self) -> str:
        """Return the current time in UTC as ``YYYY-MM-DD HH:MM:SS``.

        A naive datetime from the clock is taken to be UTC already.
        """
        moment = self._clock()
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        return moment.astimezone(timezone.utc).strftime(_FORMAT)