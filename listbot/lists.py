"""Creating new lists: title rendering and the default item catalog."""

from typing import Sequence

from telegram.helpers import escape_markdown

from .builder import build_grid
from .logging_utils import log_info
from .schemas import Grid
from .surface import MessageSender

DEFAULT_LIST_NAME = "List"

# Seed items for every new list, in display order.
DEFAULT_CATALOG: tuple[str, ...] = (
    "BuzzWordBecaouseINeedSomethingLonger",
    "Rex",
    "Bo",
    "Hamm",
    "Slink",
    "Potato",
    "Woody",
    "Sarge",
    "Etch",
    "Lenny",
    "Squeeze",
    "Wheezy",
    "Jessie",
    "Stretch",
    "Buster",
    "Bullseye",
)


def render_title(display_name: str) -> str:
    """Bold MarkdownV2 title, e.g. ``*List*``."""

    return f"*{escape_markdown(display_name, version=2)}*"


async def create_list(
    display_name: str,
    sender: MessageSender,
    catalog: Sequence[str] = DEFAULT_CATALOG,
    default_name: str = DEFAULT_LIST_NAME,
) -> Grid:
    """Post a new list message seeded from ``catalog`` and return its grid.

    An empty display name falls back to ``default_name``.

    Raises:
        TransportError: If the sender fails
    """

    name = display_name or default_name
    grid = build_grid(catalog)
    await sender.send_list(render_title(name), grid)
    log_info(f"[Lists] Created list {name!r} with {len(grid.rows)} items")
    return grid
