"""Tests for the command-line entry point."""

from unittest.mock import MagicMock

from listbot import cli
from listbot.config import Config


def test_show_config_exits_without_running(monkeypatch, capsys):
    build = MagicMock()
    monkeypatch.setattr(cli, "build_application", build)
    monkeypatch.setattr(Config, "BOT_NAME", "buttons")

    assert cli.main(["--show-config", "--bot-name", "listy"]) == 0

    assert "@listy" in capsys.readouterr().out
    build.assert_not_called()


def test_missing_token_fails_fast(monkeypatch):
    build = MagicMock()
    monkeypatch.setattr(cli, "build_application", build)
    monkeypatch.setattr(Config, "TELEGRAM_BOT_TOKEN", None)

    assert cli.main([]) == 1
    build.assert_not_called()


def test_runs_polling_with_configured_values(monkeypatch):
    application = MagicMock()
    build = MagicMock(return_value=application)
    monkeypatch.setattr(cli, "build_application", build)
    monkeypatch.setattr(Config, "TELEGRAM_BOT_TOKEN", None)
    monkeypatch.setattr(Config, "CATALOG", ("Milk", "Eggs"))

    assert cli.main(["--token", "123:abc"]) == 0

    build.assert_called_once()
    args, kwargs = build.call_args
    assert args == ("123:abc",)
    assert kwargs["catalog"] == ("Milk", "Eggs")
    application.run_polling.assert_called_once_with()
