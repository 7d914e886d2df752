"""Tests for colored console logging and its environment switches."""

from listbot.logging_utils import (
    LOG_TAG_ERROR,
    Color,
    colored,
    log_debug,
    log_error,
)


def test_colored_wraps_text(monkeypatch):
    monkeypatch.delenv("LISTBOT_NO_COLOR", raising=False)

    assert colored("hi", Color.RED) == f"{Color.RED.value}hi{Color.RESET.value}"
    assert colored("hi", Color.RED, bold=True).startswith(Color.BOLD.value + Color.RED.value)


def test_no_color_returns_plain_text(monkeypatch):
    monkeypatch.setenv("LISTBOT_NO_COLOR", "1")

    assert colored("hi", Color.GREEN) == "hi"


def test_error_lines_carry_tag(monkeypatch, capsys):
    monkeypatch.setenv("LISTBOT_NO_COLOR", "1")

    log_error("dropped")

    assert capsys.readouterr().out == f"{LOG_TAG_ERROR} dropped\n"


def test_debug_is_silent_unless_enabled(monkeypatch, capsys):
    monkeypatch.setenv("LISTBOT_NO_COLOR", "1")
    monkeypatch.delenv("LISTBOT_DEBUG", raising=False)
    log_debug("hidden")
    assert capsys.readouterr().out == ""

    monkeypatch.setenv("LISTBOT_DEBUG", "true")
    log_debug("shown")
    assert "shown" in capsys.readouterr().out
