# main.py
import signal
import sys
import threading
from typing import Optional, Sequence

from pydantic import ValidationError

from sdksmoke.adapters.couchbase_cluster_adapter import CouchbaseClusterAdapter
from sdksmoke.adapters.retry_tenacity import TenacityReadinessPoller
from sdksmoke.core.config import PollerConfig, SmokeRunConfig
from sdksmoke.core.exceptions import ClusterConnectionError, SmokeAborted, SmokeStepError
from sdksmoke.core.logging_config import configure_logging
from sdksmoke.core.managers.smoke_runner import SmokeTestRunner
from sdksmoke.core.settings import SmokeSettings, logger

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_TERMINATED = 128 + signal.SIGTERM


# main lives at the outermost layer (not in core)
# Parses settings, instantiates the concrete adapters,
# wires dependencies together and runs the smoke test


def load_settings(argv: Optional[Sequence[str]] = None) -> SmokeSettings:
    """Build settings from CLI flags (``argv`` or ``sys.argv``) and environment."""
    cli_args = True if argv is None else list(argv)
    return SmokeSettings(_cli_parse_args=cli_args)


def main(argv: Optional[Sequence[str]] = None) -> int:
    try:
        settings = load_settings(argv)
    except ValidationError as exc:
        configure_logging()
        logger.error("Invalid arguments: %s", exc)
        return EXIT_USAGE

    # Central logging configuration before any adapter emits
    configure_logging(settings.log_level)
    logger.set_level(settings.log_level)
    settings.print_settings(logger)

    # one flag stops the step loop and cuts short a readiness wait
    shutdown = threading.Event()
    poller = TenacityReadinessPoller.from_config(
        PollerConfig.from_app_settings(settings), logger=logger, cancel_event=shutdown
    )

    def handle_sigterm(signum, frame):
        logger.warning("Received signal %s, stopping after the current step", signum)
        shutdown.set()

    previous_handler = signal.signal(signal.SIGTERM, handle_sigterm)
    try:
        with CouchbaseClusterAdapter.from_settings(settings, logger=logger) as cluster:
            runner = SmokeTestRunner(
                cluster,
                poller,
                config=SmokeRunConfig.from_app_settings(settings),
                logger=logger,
                shutdown=shutdown,
            )
            runner.run()
    except ClusterConnectionError:
        logger.exception("Cluster connection failed")
        return EXIT_FAILURE
    except SmokeAborted as exc:
        logger.error("Smoke test aborted at step %s", exc.step)
        return EXIT_TERMINATED
    except SmokeStepError as exc:
        logger.exception("Smoke test failed at step %s", exc.step)
        return EXIT_FAILURE
    finally:
        signal.signal(signal.SIGTERM, previous_handler)

    if shutdown.is_set():
        logger.error("Smoke test terminated by signal after the last step")
        return EXIT_TERMINATED
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
