# Logging adapter for application-wide logging
from sdksmoke.adapters.logging_adapter import LoggingAdapter

from typing import Optional

from pydantic import Field, FilePath, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from rich import print

from sdksmoke.core.interfaces.logging import LoggingPort

CONNECTION_SCHEMES = ("couchbase://", "couchbases://")


# using pydantic_settings to merge CLI flags, environment variables and .env
# and do automatic type casting in a central place
class SmokeSettings(BaseSettings):
    """Immutable run configuration, built once by the composition root.

    Every field can be given as a CLI flag (``--connection``) or as an
    environment variable with the ``SMOKE_`` prefix (``SMOKE_CONNECTION``).
    CLI flags win.
    """

    model_config = SettingsConfigDict(
        env_prefix="SMOKE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
        cli_prog_name="sdksmoke",
    )

    connection: str = Field(description="Connection string for Couchbase cluster")
    username: str = Field(description="Username for Couchbase cluster")
    password: SecretStr = Field(description="Password for Couchbase cluster")
    bucket: str = Field(description="Bucket on which to run")
    cafile: Optional[FilePath] = Field(
        default=None, description="CA File Path; enables TLS when given"
    )

    log_level: str = "INFO"
    fts_timeout: float = Field(
        default=5.0,
        ge=0,
        description="Seconds to wait for a new search index to become queryable",
    )
    retry_delay: float = Field(
        default=0.25,
        gt=0,
        description="Seconds between readiness probe attempts",
    )
    wait_until_ready_timeout: float = Field(
        default=5.0,
        gt=0,
        description="Seconds to wait for the cluster to report ready after connecting",
    )

    @field_validator("connection", mode="before")
    def ensure_scheme(cls, value: str) -> str:
        """Default to the plain couchbase:// scheme when none is given."""
        value = str(value).strip()
        if not value:
            raise ValueError("connection string must not be empty")
        if "://" not in value:
            value = CONNECTION_SCHEMES[0] + value
        return value

    def print_settings(self, logger: LoggingPort):
        """Prints the settings for debugging purposes"""
        logger.info("Smoke test settings:")
        print(self)


logger = LoggingAdapter("sdksmoke")
