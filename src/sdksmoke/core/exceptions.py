from typing import Optional


class SmokeError(Exception):
    """Base exception for smoke test failures."""


class ClusterConnectionError(SmokeError):
    """Raised when a session with the cluster cannot be established.

    Attributes:
        connection: Connection string that was used
        diagnostic: Technical diagnostic information for debugging
    """
    def __init__(self, connection: str, diagnostic: Optional[str] = None):
        self.connection = connection
        self.diagnostic = diagnostic
        message = f"Could not connect to cluster at {connection}"
        if diagnostic:
            message = f"{message}: {diagnostic}"
        super().__init__(message)


class SmokeStepError(SmokeError):
    """Raised when one step of the smoke test fails.

    The underlying exception is chained as ``__cause__`` and kept in ``cause``
    unchanged, so a readiness timeout still shows the probe's last error.

    Attributes:
        step: Name of the failed step (e.g. "fts")
        cause: Exception raised by the step
    """
    def __init__(self, step: str, cause: BaseException):
        self.step = step
        self.cause = cause
        super().__init__(f"Step '{step}' failed: {type(cause).__name__}: {cause}")


class SmokeAborted(SmokeError):
    """Raised when a shutdown was requested before or during a step.

    Attributes:
        step: Name of the step that was skipped or interrupted
    """
    def __init__(self, step: str):
        self.step = step
        super().__init__(f"Smoke test aborted by shutdown request at step '{step}'")
