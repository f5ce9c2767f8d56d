"""Tests for settings loading."""
from sqs_reader.utils.config import Settings


def test_defaults(monkeypatch):
    for name in ("AWS_REGION", "SQS_ENDPOINT_URL", "SQS_VISIBILITY_TIMEOUT", "LOG_FORMAT"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.aws_region == "us-east-1"
    assert settings.sqs_visibility_timeout == 60
    assert settings.default_count == 1
    assert settings.log_format == "json"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("SQS_ENDPOINT_URL", "http://localhost:4566")
    monkeypatch.setenv("SQS_VISIBILITY_TIMEOUT", "120")

    settings = Settings(_env_file=None)

    assert settings.sqs_endpoint_url == "http://localhost:4566"
    assert settings.sqs_visibility_timeout == 120
