"""Polling of remote objects until they reach a target state."""

import time
from typing import Any, Callable, Iterable, Optional, Tuple

from neutron_deploy.utils.errors import ProvisioningError, WaitTimeoutError, is_not_found
from neutron_deploy.utils.logging import get_logger

logger = get_logger(__name__)

# Refresh functions return the polled object and its state name
RefreshFunc = Callable[[], Tuple[Any, str]]

STATE_ACTIVE = 'ACTIVE'
STATE_DELETED = 'DELETED'


class StateWaiter:
    """Polls a refresh function with exponential backoff."""

    def __init__(
        self,
        refresh: RefreshFunc,
        target: Iterable[str],
        pending: Iterable[str] = (),
        timeout: float = 600.0,
        delay: float = 0.0,
        min_interval: float = 1.0,
        max_interval: float = 10.0,
        exponential_base: float = 2.0,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize waiter.

        Args:
            refresh: Callable returning ``(obj, state)``
            target: States that end the wait successfully
            pending: States that keep the wait going; any other state fails
            timeout: Seconds before giving up
            delay: Seconds to wait before the first refresh
            min_interval: First poll interval in seconds
            max_interval: Maximum poll interval in seconds
            exponential_base: Growth factor between polls
            sleep: Sleep function
            clock: Monotonic clock function
        """
        self.refresh = refresh
        self.target = set(target)
        self.pending = set(pending)
        self.timeout = timeout
        self.delay = delay
        self.min_interval = min_interval
        self.max_interval = max_interval
        self.exponential_base = exponential_base
        self._sleep = sleep
        self._clock = clock

    def get_interval(self, attempt: int) -> float:
        """Interval before the next poll (0-indexed attempt)."""
        return min(self.min_interval * (self.exponential_base ** attempt), self.max_interval)

    def wait(self) -> Any:
        """Poll until a target state is reached.

        Returns:
            The object returned by the last refresh

        Raises:
            WaitTimeoutError: If the timeout elapses first
            ProvisioningError: If an unexpected state is reported
        """
        deadline = self._clock() + self.timeout
        if self.delay:
            self._sleep(self.delay)

        attempt = 0
        last_state: Optional[str] = None
        while True:
            obj, state = self.refresh()
            last_state = state

            if state in self.target:
                if attempt > 0:
                    logger.debug(f"Reached state {state} after {attempt} polls")
                return obj

            if self.pending and state not in self.pending:
                raise ProvisioningError(
                    f"Unexpected state '{state}', wanted target {sorted(self.target)}"
                )

            interval = self.get_interval(attempt)
            if self._clock() + interval > deadline:
                raise WaitTimeoutError(
                    f"Timeout while waiting to become {sorted(self.target)} "
                    f"(last state: '{last_state}', timeout: {self.timeout:.0f}s)"
                )

            logger.debug(f"State is {state}, polling again in {interval:.1f}s")
            self._sleep(interval)
            attempt += 1


def existence_refresh(get: Callable[[], Any]) -> RefreshFunc:
    """Build a refresh function reporting ACTIVE or DELETED.

    The object counts as DELETED when ``get`` raises a not-found error;
    any other error propagates.
    """
    def refresh() -> Tuple[Any, str]:
        try:
            obj = get()
        except Exception as e:
            if is_not_found(e):
                return None, STATE_DELETED
            raise
        return obj, STATE_ACTIVE

    return refresh
