"""
Exception hierarchy for listbot.

Every failure the button-grid state machine can run into has its own type so the
dispatcher can map it onto a FailureReason without string matching. Exceptions keep
their context (token, action, message key, underlying error) as attributes for
diagnostics and tests.
"""

from typing import Any, Optional


class ListBotError(Exception):
    """Base class for all listbot errors."""


class MalformedTokenError(ListBotError):
    """Raised when a callback token is shorter than the action prefix."""

    def __init__(self, *, token: str, prefix_length: int) -> None:
        self.token = token
        self.prefix_length = prefix_length
        super().__init__(
            f"Malformed callback token {token!r}: expected at least "
            f"{prefix_length} characters"
        )


class InvalidActionError(ListBotError):
    """Raised when a token's first character is not a known action character."""

    def __init__(self, *, token: str, action_char: str) -> None:
        self.token = token
        self.action_char = action_char
        super().__init__(f"Invalid edit mode {action_char!r} in token {token!r}")


class UnimplementedActionError(ListBotError):
    """Raised for actions that are reserved but have no defined behavior yet."""

    def __init__(self, *, action: Any, identifier: str) -> None:
        self.action = action
        self.identifier = identifier
        super().__init__(
            f"Action {getattr(action, 'name', action)} is not implemented "
            f"(target item {identifier!r})"
        )


class TransportError(ListBotError):
    """Raised when the messaging transport fails to send or edit a message."""

    def __init__(
        self,
        *,
        operation: str,
        message_key: Optional[Any] = None,
        underlying: Optional[Exception] = None,
    ) -> None:
        self.operation = operation
        self.message_key = message_key
        self.underlying = underlying
        target = f" for message {message_key}" if message_key is not None else ""
        reason = f": {underlying}" if underlying is not None else ""
        super().__init__(f"Transport {operation} failed{target}{reason}")


class CommandNotFoundError(ListBotError):
    """Raised when inbound text is not a recognised bot command."""

    def __init__(self, *, text: str, reason: str) -> None:
        self.text = text
        self.reason = reason
        super().__init__(f"Command not found in {text!r}: {reason}")


class ConfigurationError(ListBotError):
    """Raised at startup when required configuration is missing or invalid."""

    def __init__(self, *, problems: list[str]) -> None:
        self.problems = problems
        message_lines = ["listbot configuration is invalid:"]
        message_lines.extend(f"  - {problem}" for problem in problems)
        message_lines.extend(
            [
                "\nRemediation tips:",
                "  - Set TELEGRAM_BOT_TOKEN in the environment or a .env file",
                "  - Keep LISTBOT_CATALOG entries short enough for Telegram callback data",
            ]
        )
        super().__init__("\n".join(message_lines))
