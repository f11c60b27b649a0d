import threading
import time
from typing import Any, Callable, Optional

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_any,
    stop_when_event_set,
    wait_fixed,
)

from sdksmoke.core.config import PollerConfig
from sdksmoke.core.interfaces.logging import LoggingPort
from sdksmoke.core.settings import logger as default_logger


class TenacityReadinessPoller:
    """Tenacity-based readiness poller implementing ReadinessPollerPort.

    Retries the probe on any exception with a fixed delay until a wall-clock
    deadline passes, then re-raises the probe's last exception unchanged.
    The probe always runs at least once, even with a zero timeout.

    The wait between attempts is a timed wait on an event, so `cancel()`
    (e.g. from a SIGTERM handler) ends the poll after the current attempt.
    Cancellation is permanent for this instance. Passing ``cancel_event`` lets
    the poller share one shutdown flag with the rest of the program.

    ``clock`` and ``sleep`` can be replaced to drive the poller from a fake
    clock in tests.
    """

    def __init__(
        self,
        timeout: float = 5.0,
        delay: float = 0.25,
        logger: Optional[LoggingPort] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Optional[Callable[[float], Any]] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        if timeout < 0:
            raise ValueError(f"timeout must not be negative, got {timeout}")
        if delay <= 0:
            raise ValueError(f"delay must be positive, got {delay}")
        self.timeout = timeout
        self.delay = delay
        self._logger = logger or default_logger
        self._clock = clock
        self._cancelled = cancel_event or threading.Event()
        self._sleep = sleep or self._cancelled.wait

    @classmethod
    def from_config(
        cls,
        config: PollerConfig,
        logger: Optional[LoggingPort] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> "TenacityReadinessPoller":
        return cls(
            timeout=config.timeout,
            delay=config.delay,
            logger=logger,
            cancel_event=cancel_event,
        )

    def cancel(self) -> None:
        self._cancelled.set()

    def wait_until_ready(
        self,
        probe: Callable[[], Any],
        timeout: Optional[float] = None,
        description: str = "resource",
    ) -> None:
        timeout = self.timeout if timeout is None else timeout
        if timeout < 0:
            raise ValueError(f"timeout must not be negative, got {timeout}")

        start = self._clock()

        def deadline_passed(retry_state: RetryCallState) -> bool:
            return self._clock() - start >= timeout

        def log_retry(retry_state: RetryCallState) -> None:
            exc = retry_state.outcome.exception() if retry_state.outcome else None
            self._logger.warning(
                "Retrying %s (waiting for readiness) attempt=%d error=%s",
                description,
                retry_state.attempt_number,
                exc,
            )

        retrying = Retrying(
            stop=stop_any(deadline_passed, stop_when_event_set(self._cancelled)),
            wait=wait_fixed(self.delay),
            retry=retry_if_exception_type(Exception),
            sleep=self._sleep,
            before_sleep=log_retry,
            reraise=True,
        )
        retrying(probe)
        elapsed = self._clock() - start
        self._logger.debug("%s ready after %.3fs", description, elapsed)
