# sdksmoke/adapters/couchbase_cluster_adapter.py
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, Optional

import couchbase.search as search
import couchbase.subdocument as SD
from couchbase.auth import PasswordAuthenticator
from couchbase.cluster import Cluster
from couchbase.exceptions import CouchbaseException
from couchbase.management.search import SearchIndex
from couchbase.management.views import DesignDocument, DesignDocumentNamespace, View
from couchbase.options import ClusterOptions

from sdksmoke.core.exceptions import ClusterConnectionError
from sdksmoke.core.interfaces.cluster import ClusterPort
from sdksmoke.core.interfaces.logging import LoggingPort
from sdksmoke.core.settings import CONNECTION_SCHEMES, logger as default_logger


def secure_connection_string(connection: str) -> str:
    """Switch a plain couchbase:// connection string to couchbases://."""
    plain, secure = CONNECTION_SCHEMES
    if connection.startswith(plain):
        return secure + connection[len(plain):]
    return connection


class CouchbaseClusterAdapter(ClusterPort):
    """ClusterPort on top of the Couchbase Python SDK.

    Connection failures are translated into ClusterConnectionError. Failures
    of individual operations propagate as the SDK's own exceptions so that
    readiness polling sees exactly what the server answered.
    """

    def __init__(
        self,
        connection: str,
        username: str,
        password: str,
        bucket_name: str,
        ca_file: Optional[Path] = None,
        wait_until_ready_timeout: float = 5.0,
        logger: Optional[LoggingPort] = None,
    ):
        self._ca_file = ca_file
        self._connection = (
            secure_connection_string(connection) if ca_file else connection
        )
        self._username = username
        self._password = password
        self._bucket_name = bucket_name
        self._wait_until_ready_timeout = wait_until_ready_timeout
        self._logger = logger or default_logger
        self._cluster: Optional[Cluster] = None
        self._bucket = None
        self._collection = None

    @classmethod
    def from_settings(
        cls, settings, logger: Optional[LoggingPort] = None
    ) -> "CouchbaseClusterAdapter":
        return cls(
            connection=settings.connection,
            username=settings.username,
            password=settings.password.get_secret_value(),
            bucket_name=settings.bucket,
            ca_file=settings.cafile,
            wait_until_ready_timeout=settings.wait_until_ready_timeout,
            logger=logger,
        )

    def connect(self) -> None:
        if self._ca_file is not None:
            auth = PasswordAuthenticator(
                self._username, self._password, cert_path=str(self._ca_file)
            )
        else:
            auth = PasswordAuthenticator(self._username, self._password)

        self._logger.debug(
            "Connecting to %s bucket=%s tls=%s",
            self._connection,
            self._bucket_name,
            self._ca_file is not None,
        )
        try:
            self._cluster = Cluster(self._connection, ClusterOptions(auth))
            self._cluster.wait_until_ready(
                timedelta(seconds=self._wait_until_ready_timeout)
            )
            self._bucket = self._cluster.bucket(self._bucket_name)
            self._collection = self._bucket.default_collection()
        except CouchbaseException as exc:
            self.close()
            raise ClusterConnectionError(self._connection, diagnostic=str(exc)) from exc

    def close(self) -> None:
        if self._cluster is None:
            return
        cluster, self._cluster = self._cluster, None
        self._bucket = None
        self._collection = None
        cluster.close()
        self._logger.debug("Closed cluster connection %s", self._connection)

    def _require_connected(self):
        if self._cluster is None:
            raise RuntimeError("Cluster not connected. Use 'with' context manager.")
        return self._cluster

    def upsert(self, key: str, document: Dict[str, Any]) -> None:
        self._require_connected()
        self._collection.upsert(key, document)

    def mutate_in(self, key: str, path: str, value: Any) -> None:
        self._require_connected()
        self._collection.mutate_in(key, [SD.upsert(path, value)])

    def query(self, statement: str) -> int:
        cluster = self._require_connected()
        # results stream lazily; errors only surface while iterating
        return sum(1 for _ in cluster.query(statement).rows())

    def analytics_query(self, statement: str) -> int:
        cluster = self._require_connected()
        return sum(1 for _ in cluster.analytics_query(statement).rows())

    def upsert_search_index(self, index_name: str) -> None:
        cluster = self._require_connected()
        cluster.search_indexes().upsert_index(
            SearchIndex(name=index_name, source_name=self._bucket_name)
        )

    def search_query(self, index_name: str, query_string: str) -> int:
        cluster = self._require_connected()
        result = cluster.search_query(index_name, search.QueryStringQuery(query_string))
        return sum(1 for _ in result.rows())

    def upsert_design_document(
        self, design_doc: str, view_name: str, map_function: str
    ) -> None:
        self._require_connected()
        ddoc = DesignDocument(design_doc, {view_name: View(map=map_function)})
        self._bucket.view_indexes().upsert_design_document(
            ddoc, DesignDocumentNamespace.PRODUCTION
        )

    def view_query(self, design_doc: str, view_name: str) -> int:
        self._require_connected()
        return sum(1 for _ in self._bucket.view_query(design_doc, view_name).rows())
