"""Tests for text command parsing."""

import pytest

from listbot.commands import HelpCommand, NewListCommand, describe_commands, parse_command
from listbot.errors import CommandNotFoundError


@pytest.mark.parametrize(
    "text, expected",
    [
        ("/help", HelpCommand()),
        ("/help@buttons", HelpCommand()),
        ("/new", NewListCommand(name="")),
        ("/new Groceries", NewListCommand(name="Groceries")),
        ("/new@buttons Weekend plans", NewListCommand(name="Weekend plans")),
        ("/new   padded  ", NewListCommand(name="padded")),
    ],
)
def test_known_commands(text, expected):
    assert parse_command(text, "buttons") == expected


@pytest.mark.parametrize(
    "text",
    ["hello", "", "/", "/start", "/help now", "/new@otherbot Groceries", "/NEW x"],
)
def test_unknown_commands_are_rejected(text):
    with pytest.raises(CommandNotFoundError):
        parse_command(text, "buttons")


def test_descriptions_list_every_command():
    assert describe_commands() == (
        "These commands are supported:\n"
        "/help - display this text.\n"
        "/new - create a new list with a name."
    )
