# sdksmoke/core/interfaces/cluster.py
from abc import ABC, abstractmethod
from typing import Any, Dict


class ClusterPort(ABC):
    """Operations the smoke test needs from a database cluster session."""

    def __enter__(self) -> "ClusterPort":
        """Context manager entry: opens the session"""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit: closes the session"""
        self.close()
        return False

    @abstractmethod
    def connect(self) -> None:
        """Open the session, wait for readiness and open the bucket's default collection"""
        pass

    @abstractmethod
    def close(self) -> None:
        """Close the session. Calling it twice is a no-op"""
        pass

    @abstractmethod
    def upsert(self, key: str, document: Dict[str, Any]) -> None:
        pass

    @abstractmethod
    def mutate_in(self, key: str, path: str, value: Any) -> None:
        """Upsert a single field of an existing document"""
        pass

    @abstractmethod
    def query(self, statement: str) -> int:
        """Run a N1QL statement to completion and return the number of rows"""
        pass

    @abstractmethod
    def analytics_query(self, statement: str) -> int:
        """Run an analytics statement to completion and return the number of rows"""
        pass

    @abstractmethod
    def upsert_search_index(self, index_name: str) -> None:
        """Create or replace a full-text index sourced from the session's bucket.

        The index becomes queryable asynchronously; callers should poll
        `search_query` until it stops failing.
        """
        pass

    @abstractmethod
    def search_query(self, index_name: str, query_string: str) -> int:
        """Run a query-string search and return the number of hits"""
        pass

    @abstractmethod
    def upsert_design_document(
        self, design_doc: str, view_name: str, map_function: str
    ) -> None:
        """Publish a production design document holding a single view"""
        pass

    @abstractmethod
    def view_query(self, design_doc: str, view_name: str) -> int:
        """Query a view and return the number of rows"""
        pass
