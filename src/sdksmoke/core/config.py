"""Configuration models for core domain components.

This module provides Pydantic-based configuration classes that consolidate
settings for the readiness poller and the smoke runner, enabling
dependency injection and testability.
"""

from typing import Any, Dict
from pydantic import BaseModel, Field


class PollerConfig(BaseModel):
    """Configuration for readiness polling.

    Attributes:
        timeout: Total seconds to keep probing (0 = exactly one attempt)
        delay: Fixed seconds to wait between a failed attempt and the next one
    """

    timeout: float = Field(
        default=5.0,
        ge=0,
        description="Total time budget in seconds for one readiness wait"
    )

    delay: float = Field(
        default=0.25,
        gt=0,
        description="Fixed pause in seconds between consecutive probe attempts"
    )

    model_config = {
        "frozen": True,
        "extra": "forbid",
    }

    @classmethod
    def from_app_settings(cls, settings) -> "PollerConfig":
        """Factory method to construct config from a SmokeSettings instance."""
        return cls(
            timeout=settings.fts_timeout,
            delay=settings.retry_delay,
        )


def _default_document() -> Dict[str, Any]:
    return {"author": "mike", "title": "My Blog Post 1"}


class SmokeRunConfig(BaseModel):
    """The fixed workload issued against the cluster.

    Defaults reproduce the canonical smoke run; tests override single fields.
    """

    document_key: str = "test-key"
    document: Dict[str, Any] = Field(default_factory=_default_document)
    subdoc_path: str = "author"
    subdoc_value: Any = "steve"
    n1ql_statement: str = "SELECT *"
    analytics_statement: str = 'select "hello" as greeting'
    search_query_string: str = "test"
    view_map_function: str = "function(doc,meta) { emit(meta.id, doc) }"
    fts_timeout: float = Field(
        default=5.0,
        ge=0,
        description="Seconds to wait for the search index to answer queries"
    )

    model_config = {
        "frozen": True,
        "extra": "forbid",
    }

    @classmethod
    def from_app_settings(cls, settings) -> "SmokeRunConfig":
        """Factory method to construct config from a SmokeSettings instance.

        Only the timeout is configurable from the outside; the workload
        itself keeps its defaults.
        """
        return cls(fts_timeout=settings.fts_timeout)
