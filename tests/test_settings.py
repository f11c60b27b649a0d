"""Tests for CLI/environment settings parsing and derived configs."""

import pytest
from pydantic import ValidationError

from sdksmoke.core.config import PollerConfig, SmokeRunConfig
from sdksmoke.core.settings import SmokeSettings

REQUIRED_ARGS = [
    "--connection", "couchbase://10.0.0.1",
    "--username", "Administrator",
    "--password", "s3cret",
    "--bucket", "default",
]


def parse(args):
    return SmokeSettings(_cli_parse_args=list(args))


class TestCliParsing:

    def test_required_flags(self):
        settings = parse(REQUIRED_ARGS)

        assert settings.connection == "couchbase://10.0.0.1"
        assert settings.username == "Administrator"
        assert settings.password.get_secret_value() == "s3cret"
        assert settings.bucket == "default"
        assert settings.cafile is None

    def test_defaults(self):
        settings = parse(REQUIRED_ARGS)

        assert settings.fts_timeout == 5.0
        assert settings.retry_delay == 0.25
        assert settings.wait_until_ready_timeout == 5.0
        assert settings.log_level == "INFO"

    def test_missing_required_flag_is_rejected(self):
        with pytest.raises(ValidationError) as excinfo:
            parse(REQUIRED_ARGS[:6])

        assert "bucket" in str(excinfo.value)

    def test_cafile_must_exist(self, tmp_path):
        with pytest.raises(ValidationError):
            parse(REQUIRED_ARGS + ["--cafile", str(tmp_path / "missing.pem")])

    def test_cafile_accepted_when_present(self, tmp_path):
        ca = tmp_path / "ca.pem"
        ca.write_text("-----BEGIN CERTIFICATE-----\n")

        settings = parse(REQUIRED_ARGS + ["--cafile", str(ca)])

        assert settings.cafile == ca

    def test_bare_host_gets_default_scheme(self):
        args = list(REQUIRED_ARGS)
        args[1] = "cb.example.com"

        assert parse(args).connection == "couchbase://cb.example.com"

    def test_negative_fts_timeout_rejected(self):
        with pytest.raises(ValidationError):
            parse(REQUIRED_ARGS + ["--fts_timeout", "-1"])

    def test_password_is_masked(self):
        settings = parse(REQUIRED_ARGS)

        assert "s3cret" not in repr(settings)

    def test_settings_are_immutable(self):
        settings = parse(REQUIRED_ARGS)

        with pytest.raises(ValidationError):
            settings.bucket = "other"


class TestEnvironment:

    def test_values_from_environment(self, monkeypatch):
        monkeypatch.setenv("SMOKE_CONNECTION", "couchbases://env-host")
        monkeypatch.setenv("SMOKE_USERNAME", "env-user")
        monkeypatch.setenv("SMOKE_PASSWORD", "env-pass")
        monkeypatch.setenv("SMOKE_BUCKET", "env-bucket")
        monkeypatch.setenv("SMOKE_FTS_TIMEOUT", "12.5")

        settings = parse([])

        assert settings.connection == "couchbases://env-host"
        assert settings.bucket == "env-bucket"
        assert settings.fts_timeout == 12.5

    def test_cli_overrides_environment(self, monkeypatch):
        monkeypatch.setenv("SMOKE_BUCKET", "env-bucket")

        settings = parse(REQUIRED_ARGS)

        assert settings.bucket == "default"


class TestDerivedConfigs:

    def test_poller_config_from_settings(self):
        settings = parse(REQUIRED_ARGS + ["--fts_timeout", "7", "--retry_delay", "0.5"])

        config = PollerConfig.from_app_settings(settings)

        assert config.timeout == 7.0
        assert config.delay == 0.5

    def test_run_config_from_settings(self):
        settings = parse(REQUIRED_ARGS + ["--fts_timeout", "3"])

        config = SmokeRunConfig.from_app_settings(settings)

        assert config.fts_timeout == 3.0
        assert config.document_key == "test-key"

    def test_run_config_rejects_unknown_fields(self):
        with pytest.raises(ValidationError):
            SmokeRunConfig(unknown=True)
