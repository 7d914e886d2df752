"""Text command parsing.

Recognised commands:

    /help            list the supported commands
    /new [name]      create a new list (name may be empty)

Commands may be addressed to the bot explicitly (``/new@buttons Groceries``).
Anything else is rejected with CommandNotFoundError, which the transport turns
into a "Command not found!" reply.
"""

from dataclasses import dataclass
from typing import List, Tuple, Union

from .errors import CommandNotFoundError


@dataclass(frozen=True)
class HelpCommand:
    pass


@dataclass(frozen=True)
class NewListCommand:
    name: str = ""


Command = Union[HelpCommand, NewListCommand]

COMMAND_DESCRIPTIONS: List[Tuple[str, str]] = [
    ("help", "display this text."),
    ("new", "create a new list with a name."),
]


def describe_commands() -> str:
    lines = ["These commands are supported:"]
    lines.extend(f"/{name} - {description}" for name, description in COMMAND_DESCRIPTIONS)
    return "\n".join(lines)


def parse_command(text: str, bot_name: str) -> Command:
    """Parse ``text`` into a Command.

    Args:
        text: Raw message text
        bot_name: Bot username accepted after ``@`` in the command word

    Raises:
        CommandNotFoundError: If the text is not a known command
    """
    if not text.startswith("/"):
        raise CommandNotFoundError(text=text, reason="not a command")

    parts = text[1:].split(None, 1)
    head = parts[0] if parts else ""
    argument = parts[1] if len(parts) > 1 else ""
    name, _, mention = head.partition("@")
    if mention and mention != bot_name:
        raise CommandNotFoundError(text=text, reason=f"addressed to @{mention}")

    argument = argument.strip()
    if name == "help":
        if argument:
            raise CommandNotFoundError(text=text, reason="/help takes no arguments")
        return HelpCommand()
    if name == "new":
        return NewListCommand(name=argument)
    raise CommandNotFoundError(text=text, reason=f"unknown command /{name}")
