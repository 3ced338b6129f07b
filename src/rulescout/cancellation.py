"""
Cooperative cancellation for discovery.

The trial runner checks the token between trials; the corpus loader checks it
between files. Cancelling from another thread or a signal handler is safe.
"""

import threading
import time
from typing import Optional

from rulescout.exceptions import ConfigError, DiscoveryCancelled


class CancellationToken:
    """
    A cancellation flag with an optional deadline.

    Args:
        timeout: Seconds from construction after which the token reports
            itself cancelled. None means no deadline.
    """

    def __init__(self, timeout: Optional[float] = None):
        if timeout is not None and (isinstance(timeout, bool) or not isinstance(timeout, (int, float))):
            raise ConfigError(f"timeout must be a number of seconds, got {timeout!r}")
        if timeout is not None and timeout <= 0:
            raise ConfigError(f"timeout must be positive, got {timeout}")
        self._event = threading.Event()
        self._deadline = time.monotonic() + timeout if timeout is not None else None
        self._timed_out = False

    def cancel(self) -> None:
        """Request cancellation."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        if self._deadline is not None and time.monotonic() >= self._deadline:
            self._timed_out = True
            self._event.set()
            return True
        return False

    @property
    def reason(self) -> str:
        return "timed out" if self._timed_out else "cancelled"

    def raise_if_cancelled(self, completed_trials: int = 0) -> None:
        """
        Raises:
            DiscoveryCancelled: If cancellation was requested or the deadline passed.
        """
        if self.cancelled:
            raise DiscoveryCancelled(self.reason, completed_trials)
