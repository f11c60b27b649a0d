"""SmokeTestRunner: exercises each cluster subsystem once, in a fixed order.

Steps:
1. Upsert a document.
2. Sub-document mutate one of its fields.
3. Run a N1QL query.
4. Run an analytics query.
5. Create a full-text index and wait until a search against it succeeds.
6. Publish a view design document and query the view.

A status line is printed to stdout after each step, independent of the log
level. The first failing step stops the run with SmokeStepError chained to
the original exception. A shutdown request stops the run between steps, or
interrupts the search readiness wait, with SmokeAborted.
"""

from __future__ import annotations

import threading
from typing import Callable, List, Optional, Tuple

from rich import print

from sdksmoke.core.config import SmokeRunConfig
from sdksmoke.core.exceptions import SmokeAborted, SmokeStepError
from sdksmoke.core.interfaces.cluster import ClusterPort
from sdksmoke.core.interfaces.logging import LoggingPort
from sdksmoke.core.interfaces.retry import ReadinessPollerPort
from sdksmoke.core.logging_config import run_id_var
from sdksmoke.core.models.resources import SmokeResourceNames
from sdksmoke.core.settings import logger as default_logger


class SmokeTestRunner:
    """Runs the smoke steps against an already connected ClusterPort.

    Attributes:
        config: Immutable workload definition (document, statements, timeouts)
        names: Resource names for this run (search index, design doc, view)

    ``shutdown`` is checked before every step; share it with the poller's
    cancel event so a single signal stops both.
    """

    def __init__(
        self,
        cluster: ClusterPort,
        poller: ReadinessPollerPort,
        config: Optional[SmokeRunConfig] = None,
        names: Optional[SmokeResourceNames] = None,
        logger: Optional[LoggingPort] = None,
        shutdown: Optional[threading.Event] = None,
    ) -> None:
        self._cluster = cluster
        self._poller = poller
        self.config = config or SmokeRunConfig()
        self.names = names or SmokeResourceNames.generate()
        self._logger = logger or default_logger
        self._shutdown = shutdown or threading.Event()

    def steps(self) -> List[Tuple[str, str, Callable[[], None]]]:
        """(step name, status line, action) in execution order."""
        return [
            ("upsert", "upsert done", self._upsert),
            ("subdoc", "subdoc mutate done", self._subdoc_mutate),
            ("n1ql", "n1ql query done", self._n1ql_query),
            ("analytics", "analytics query done", self._analytics_query),
            ("fts", "fts done", self._full_text_search),
            ("views", "views done", self._views),
        ]

    def run(self) -> List[str]:
        """Execute all steps, return the names of the completed ones."""
        token = run_id_var.set(self.names.run_id)
        completed: List[str] = []
        try:
            self._logger.debug(
                "[smoke:start] index=%s design_doc=%s view=%s",
                self.names.search_index,
                self.names.design_doc,
                self.names.view,
            )
            for step, status_line, action in self.steps():
                if self._shutdown.is_set():
                    raise SmokeAborted(step)
                try:
                    action()
                except Exception as exc:
                    # a cancelled readiness wait is not a readiness failure
                    if self._shutdown.is_set():
                        raise SmokeAborted(step) from exc
                    raise SmokeStepError(step, exc) from exc
                print(status_line)
                self._logger.debug("[smoke:step] %s", status_line)
                completed.append(step)
            return completed
        finally:
            run_id_var.reset(token)

    # --- steps ---

    def _upsert(self) -> None:
        self._cluster.upsert(self.config.document_key, dict(self.config.document))

    def _subdoc_mutate(self) -> None:
        self._cluster.mutate_in(
            self.config.document_key, self.config.subdoc_path, self.config.subdoc_value
        )

    def _n1ql_query(self) -> None:
        rows = self._cluster.query(self.config.n1ql_statement)
        self._logger.debug("[smoke:n1ql] rows=%d", rows)

    def _analytics_query(self) -> None:
        rows = self._cluster.analytics_query(self.config.analytics_statement)
        self._logger.debug("[smoke:analytics] rows=%d", rows)

    def _full_text_search(self) -> None:
        index_name = self.names.search_index
        self._cluster.upsert_search_index(index_name)

        def probe() -> None:
            self._cluster.search_query(index_name, self.config.search_query_string)

        # A fresh index answers with errors until the server has built it
        self._poller.wait_until_ready(
            probe,
            timeout=self.config.fts_timeout,
            description=f"FTS index {index_name}",
        )

    def _views(self) -> None:
        self._cluster.upsert_design_document(
            self.names.design_doc, self.names.view, self.config.view_map_function
        )
        rows = self._cluster.view_query(self.names.design_doc, self.names.view)
        self._logger.debug("[smoke:views] rows=%d", rows)
