import logging

from piscineo import config


def test_int_env_reads_numeric_value(monkeypatch):
    monkeypatch.setenv("EMAIL_SERVER_PORT", "2525")
    assert config._int_env("EMAIL_SERVER_PORT", 587) == 2525


def test_int_env_defaults_when_unset(monkeypatch):
    monkeypatch.delenv("EMAIL_SERVER_PORT", raising=False)
    assert config._int_env("EMAIL_SERVER_PORT", 587) == 587


def test_int_env_falls_back_on_invalid_value(monkeypatch, caplog):
    monkeypatch.setenv("EMAIL_SERVER_PORT", "smtp")
    with caplog.at_level(logging.WARNING):
        assert config._int_env("EMAIL_SERVER_PORT", 587) == 587
    assert "EMAIL_SERVER_PORT" in caplog.text
