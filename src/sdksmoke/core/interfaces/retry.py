from typing import Any, Callable, Optional, Protocol


class ReadinessPollerPort(Protocol):
    """Abstract wait-for-readiness interface.

    Implementations call a probe until it stops raising or a deadline passes.
    The contract keeps the core decoupled from a specific library (tenacity/backoff).
    """

    def wait_until_ready(
        self,
        probe: Callable[[], Any],
        timeout: Optional[float] = None,
        description: str = "resource",
    ) -> None:  # pragma: no cover - protocol
        """Invoke ``probe`` until it succeeds or ``timeout`` seconds elapse.

        Args:
            probe: Zero-argument callable; raising means "not ready yet".
            timeout: Total time budget in seconds. Falls back to the implementation default.
            description: What is being waited for, used in log messages.
        Returns:
            None. The probe's return value is discarded.
        Raises:
            The exact exception raised by the last probe attempt once the deadline passes.
        """
        ...

    def cancel(self) -> None:  # pragma: no cover - protocol
        """Abort an in-progress wait after the current attempt."""
        ...
