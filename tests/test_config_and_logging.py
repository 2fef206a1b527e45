"""Tests for client configuration loading and log masking."""

from __future__ import annotations

import json
import logging

import pytest
import structlog
from pydantic import ValidationError

from vardexpay.core.config import DEFAULT_API_URL, ClientConfig, load_config
from vardexpay.core.logger import _mask_sensitive, configure_logging, get_logger, setup_logging
from vardexpay.exchange.exceptions import (
    ErrorCode,
    FillFields,
    UnknownError,
    error_for_code,
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in (
        "VARDEXPAY_API_URL",
        "VARDEXPAY_SITE_URL",
        "VARDEXPAY_TIMEOUT",
        "VARDEXPAY_STRICT_AUTH",
        "VARDEXPAY_LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr("vardexpay.core.config.load_dotenv", lambda: None)


def test_defaults_point_at_public_hosts():
    cfg = load_config()
    assert cfg.api_url == DEFAULT_API_URL
    assert cfg.site_url == "https://vardexpay.com/api"
    assert cfg.strict_auth is False


def test_env_overrides_yaml(tmp_path, monkeypatch):
    path = tmp_path / "vardexpay.yaml"
    path.write_text("vardexpay:\n  timeout_seconds: 5\n  api_url: https://yaml.example/\n")
    monkeypatch.setenv("VARDEXPAY_API_URL", "https://env.example/")
    monkeypatch.setenv("VARDEXPAY_STRICT_AUTH", "yes")

    cfg = load_config(str(path))

    assert cfg.api_url == "https://env.example"
    assert cfg.timeout_seconds == 5
    assert cfg.strict_auth is True


def test_bad_env_value_falls_back(monkeypatch):
    monkeypatch.setenv("VARDEXPAY_TIMEOUT", "soon")
    assert load_config().timeout_seconds == 20.0


def test_overrides_win_over_env(monkeypatch):
    monkeypatch.setenv("VARDEXPAY_TIMEOUT", "3")
    assert load_config(overrides={"timeout_seconds": 7}).timeout_seconds == 7


def test_invalid_values_are_rejected():
    with pytest.raises(ValidationError):
        ClientConfig(timeout_seconds=0)
    with pytest.raises(ValidationError):
        ClientConfig(api_url="ftp://api.vardexpay.com")


def test_sensitive_fields_are_masked():
    out = _mask_sensitive(
        None,
        None,
        {
            "event": "login",
            "password": "hunter22",
            "session": "tok-1234567890",
            "email": "a@b.c",
            "headers": {"session": "tok-1234567890", "accept": "*/*"},
        },
    )
    assert out["password"] == "****"
    assert out["session"] == "tok-****7890"
    assert out["email"] == "a@b.c"
    assert out["headers"] == {"session": "tok-****7890", "accept": "*/*"}


def test_error_for_code_maps_known_and_unknown_codes():
    assert error_for_code("fill-fields") is FillFields
    assert error_for_code(ErrorCode.UNKNOWN_ERROR) is UnknownError
    assert error_for_code("nope") is UnknownError


def test_log_level_is_normalized_and_validated(monkeypatch):
    assert ClientConfig(log_level="debug").log_level == "DEBUG"
    with pytest.raises(ValidationError):
        ClientConfig(log_level="nonsense-level")
    monkeypatch.setenv("VARDEXPAY_LOG_LEVEL", "nonsense-level")
    with pytest.raises(ValidationError):
        load_config()


@pytest.fixture
def _restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for h in root.handlers[:]:
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    root.setLevel(level)
    structlog.reset_defaults()


def test_setup_logging_masks_session_in_json_output(capsys, _restore_logging):
    setup_logging(log_level="INFO", json_output=True)

    get_logger("vardexpay_logging_check").info("session stored", session="tok-1234567890")

    line = capsys.readouterr().out.strip().splitlines()[-1]
    record = json.loads(line)
    assert record["event"] == "session stored"
    assert record["session"] == "tok-****7890"
    assert "tok-1234567890" not in line


def test_configure_logging_uses_config_level(monkeypatch, _restore_logging):
    monkeypatch.setenv("VARDEXPAY_LOG_LEVEL", "warning")

    configure_logging(load_config())

    assert logging.getLogger().level == logging.WARNING
