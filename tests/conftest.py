"""Shared test doubles: an in-memory ClusterPort and a manual clock."""

import os
from typing import Any, Dict, List, Optional

import pytest

from sdksmoke.core.interfaces.cluster import ClusterPort


class SearchNotReady(Exception):
    """Stand-in for the server rejecting a query against an unbuilt index."""


class FakeClock:
    """Monotonic clock that only moves when told to (or when slept on)."""

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeCluster(ClusterPort):
    """Records every call; search fails ``search_failures`` times before answering.

    ``fail_on`` maps an operation name to the exception it should raise.
    """

    def __init__(
        self,
        search_failures: int = 0,
        fail_on: Optional[Dict[str, Exception]] = None,
    ):
        self.calls: List[tuple] = []
        self.search_failures = search_failures
        self.search_errors: List[Exception] = []
        self.fail_on = fail_on or {}
        self.documents: Dict[str, Dict[str, Any]] = {}
        self.connected = False

    def _record(self, name: str, *args):
        self.calls.append((name, *args))
        if name in self.fail_on:
            raise self.fail_on[name]

    @property
    def call_names(self) -> List[str]:
        return [c[0] for c in self.calls]

    def connect(self) -> None:
        self._record("connect")
        self.connected = True

    def close(self) -> None:
        self._record("close")
        self.connected = False

    def upsert(self, key, document):
        self._record("upsert", key, document)
        self.documents[key] = dict(document)

    def mutate_in(self, key, path, value):
        self._record("mutate_in", key, path, value)
        self.documents[key][path] = value

    def query(self, statement):
        self._record("query", statement)
        return 1

    def analytics_query(self, statement):
        self._record("analytics_query", statement)
        return 1

    def upsert_search_index(self, index_name):
        self._record("upsert_search_index", index_name)

    def search_query(self, index_name, query_string):
        self._record("search_query", index_name, query_string)
        if len(self.search_errors) < self.search_failures:
            err = SearchNotReady(f"index {index_name} not ready (attempt {len(self.search_errors) + 1})")
            self.search_errors.append(err)
            raise err
        return 0

    def upsert_design_document(self, design_doc, view_name, map_function):
        self._record("upsert_design_document", design_doc, view_name, map_function)

    def view_query(self, design_doc, view_name):
        self._record("view_query", design_doc, view_name)
        return 1


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def fake_cluster():
    return FakeCluster()


@pytest.fixture(autouse=True)
def clean_smoke_env(monkeypatch):
    """Keep SMOKE_* variables from the developer's shell out of the tests."""
    for key in list(os.environ):
        if key.upper().startswith("SMOKE_"):
            monkeypatch.delenv(key, raising=False)
