"""Tests for the error hierarchy."""

import pytest

from chutes_model_registry.errors import (
    ConfigurationError,
    FetchErrorKind,
    InvalidConfigError,
    ModelFetchError,
    ModelRegistryError,
)


def test_hierarchy() -> None:
    """Every package error derives from ModelRegistryError."""
    assert issubclass(ConfigurationError, ModelRegistryError)
    assert issubclass(InvalidConfigError, ConfigurationError)
    assert issubclass(ModelFetchError, ModelRegistryError)


def test_invalid_config_error_fields() -> None:
    """InvalidConfigError keeps the field and path."""
    error = InvalidConfigError("refresh_interval must be a number", field="refresh_interval", path="/tmp/c.yml")
    assert error.field == "refresh_interval"
    assert error.path == "/tmp/c.yml"
    assert str(error) == "refresh_interval must be a number"


def test_fetch_error_attributes() -> None:
    """ModelFetchError carries kind, status, URL and cause."""
    cause = OSError("boom")
    error = ModelFetchError(
        "Server error: 502 Bad Gateway",
        FetchErrorKind.SERVER,
        status_code=502,
        url="https://llm.chutes.ai/v1/models",
        cause=cause,
    )
    assert error.kind is FetchErrorKind.SERVER
    assert error.status_code == 502
    assert error.url == "https://llm.chutes.ai/v1/models"
    assert error.cause is cause
    assert str(error) == "Server error: 502 Bad Gateway"


@pytest.mark.parametrize(
    "kind,retryable",
    [
        (FetchErrorKind.AUTH, False),
        (FetchErrorKind.RATE_LIMIT, True),
        (FetchErrorKind.SERVER, True),
        (FetchErrorKind.NETWORK, True),
        (FetchErrorKind.INVALID_RESPONSE, False),
        (FetchErrorKind.HTTP, False),
    ],
)
def test_retryable(kind: FetchErrorKind, retryable: bool) -> None:
    """Only rate limits, server and network failures are retryable."""
    assert ModelFetchError("x", kind).retryable is retryable


def test_kind_values_are_strings() -> None:
    """Kinds serialize as stable strings."""
    assert FetchErrorKind.AUTH.value == "auth_error"
    assert FetchErrorKind("rate_limit") is FetchErrorKind.RATE_LIMIT
