"""
Bot settings: Telegram credentials, command username, and the seed catalog.

Values come from the process environment, with a local .env file filling in
anything unset. Only the bot token is required; cli.main() refuses to start
polling until validate() passes.
"""

import os

from dotenv import load_dotenv

from .errors import ConfigurationError
from .lists import DEFAULT_CATALOG, DEFAULT_LIST_NAME
from .tokens import ButtonAction, encode_token

# Environment variables already set win over .env entries.
load_dotenv()

# Telegram rejects callback_data longer than this many bytes.
MAX_CALLBACK_DATA_BYTES = 64


def _parse_catalog(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return DEFAULT_CATALOG
    return tuple(item.strip() for item in raw.split(",") if item.strip())


class Config:
    """Settings read once at import; cli.main() may override token and bot name."""

    # Telegram
    TELEGRAM_BOT_TOKEN: str | None = os.getenv("TELEGRAM_BOT_TOKEN")
    # Username accepted in "/command@name" forms
    BOT_NAME: str = os.getenv("LISTBOT_BOT_NAME", "buttons")

    # Lists
    DEFAULT_LIST_NAME: str = os.getenv("LISTBOT_DEFAULT_LIST_NAME", DEFAULT_LIST_NAME)
    # Comma-separated item identifiers seeding every new list
    CATALOG: tuple[str, ...] = _parse_catalog(os.getenv("LISTBOT_CATALOG"))

    @classmethod
    def validate(cls) -> None:
        """Check the settings the bot cannot start without.

        Raises:
            ConfigurationError: Listing every problem found (missing token, empty
                default name, catalog items too long for Telegram callback data)
        """
        problems = []

        if not cls.TELEGRAM_BOT_TOKEN:
            problems.append("TELEGRAM_BOT_TOKEN is required")

        if not cls.DEFAULT_LIST_NAME:
            problems.append("LISTBOT_DEFAULT_LIST_NAME must not be empty")

        # Every token variant must fit, the longest action char sets the bound.
        for item in cls.CATALOG:
            size = max(len(encode_token(action, item).encode("utf-8")) for action in ButtonAction)
            if size > MAX_CALLBACK_DATA_BYTES:
                problems.append(
                    f"Catalog item {item!r} encodes to {size} bytes of callback data "
                    f"(limit {MAX_CALLBACK_DATA_BYTES})"
                )

        if problems:
            raise ConfigurationError(problems=problems)

    @classmethod
    def display(cls) -> str:
        """Multi-line summary for startup logs; reports whether the token is set, never its value."""
        lines = [
            "listbot Configuration:",
            f"  Bot name: @{cls.BOT_NAME}",
            f"  Token: {'set' if cls.TELEGRAM_BOT_TOKEN else 'missing'}",
            f"  Default list name: {cls.DEFAULT_LIST_NAME}",
            f"  Catalog: {len(cls.CATALOG)} items",
        ]
        return "\n".join(lines)
