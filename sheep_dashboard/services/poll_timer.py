import time
from typing import Callable, Optional


class PollTimer:
    """
    Repeating, cancellable timer owned by a single view.

    Nothing runs in the background: the owner calls `run_pending` from its
    own loop, so ticks never overlap and the next deadline is set only after
    the previous tick has returned.
    """

    def __init__(self, interval: float = 2.0, clock: Callable[[], float] = time.monotonic):
        if interval <= 0:
            raise ValueError("poll interval must be positive")
        self.interval = interval
        self._clock = clock
        self._deadline: Optional[float] = None

    @property
    def armed(self) -> bool:
        return self._deadline is not None

    def arm(self):
        self._deadline = self._clock() + self.interval

    def disarm(self):
        self._deadline = None

    def remaining(self) -> Optional[float]:
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - self._clock())

    def due(self) -> bool:
        return self._deadline is not None and self._clock() >= self._deadline

    def run_pending(self, callback: Callable[[], None]) -> bool:
        if not self.due():
            return False

        callback()

        # The callback may have disarmed us (final status, error, teardown)
        if self.armed:
            self.arm()
        return True
