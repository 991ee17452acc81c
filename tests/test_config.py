"""Tests for environment settings and logging setup."""

import logging

import pytest

from thunderborg_mcp.config import Settings, parse_int, resolve_log_level


def test_defaults():
    settings = Settings.from_env({})
    assert settings.bus == 1
    assert settings.address == 0x15
    assert settings.max_attempts == 3
    assert settings.log_level == "INFO"


def test_from_env():
    settings = Settings.from_env({
        "THUNDERBORG_I2C_BUS": "0",
        "THUNDERBORG_ADDRESS": "0x16",
        "THUNDERBORG_ATTEMPTS": "5",
        "THUNDERBORG_LOG": "debug",
    })
    assert settings.bus == 0
    assert settings.address == 0x16
    assert settings.max_attempts == 5
    assert settings.log_level == "debug"


def test_decimal_address():
    assert Settings.from_env({"THUNDERBORG_ADDRESS": "21"}).address == 0x15


def test_rejects_zero_attempts():
    with pytest.raises(ValueError):
        Settings.from_env({"THUNDERBORG_ATTEMPTS": "0"})


def test_rejects_malformed_values():
    with pytest.raises(ValueError):
        Settings.from_env({"THUNDERBORG_I2C_BUS": "one"})
    with pytest.raises(ValueError):
        Settings(address=0x80)


def test_parse_int():
    assert parse_int("0x15") == 21
    assert parse_int("21") == 21


def test_resolve_log_level():
    assert resolve_log_level("debug") == logging.DEBUG
    assert resolve_log_level(" Error ") == logging.ERROR
    assert resolve_log_level("nonsense") == logging.INFO
