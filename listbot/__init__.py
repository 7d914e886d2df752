"""
listbot - Telegram lists rendered as inline button grids.

Each list is a message whose inline keyboard holds one row per item
(edit button, delete button). The keyboard itself is the list's state:
button presses are decoded, applied to the keyboard read back from the
message, and written back as a full replacement.

Transport is injected. The core runs against any ControlSurface /
MessageSender pair; listbot.telegram_transport provides the Telegram one.
"""

__version__ = "0.1.0"

# Token protocol
from .tokens import ButtonAction, encode_token, decode_token, ACTION_CHARS, SEPARATOR

# Grid model and transformations
from .schemas import Grid, GridRow, GridButton
from .builder import build_grid, build_row
from .mutator import apply_action, delete_rows

# Dispatch
from .dispatcher import (
    CallbackDispatcher,
    CallbackEvent,
    DispatchOutcome,
    DispatchState,
    FailureReason,
)
from .locks import KeyedLock

# Transport interfaces
from .surface import (
    ControlSurface,
    MessageSender,
    InMemorySurface,
    InMemorySurfaceStore,
    InMemorySender,
)
from .lists import create_list, render_title, DEFAULT_CATALOG, DEFAULT_LIST_NAME

# Errors
from .errors import (
    ListBotError,
    InvalidActionError,
    MalformedTokenError,
    UnimplementedActionError,
    TransportError,
    CommandNotFoundError,
    ConfigurationError,
)

__all__ = [
    # Tokens
    "ButtonAction",
    "encode_token",
    "decode_token",
    "ACTION_CHARS",
    "SEPARATOR",
    # Grid
    "Grid",
    "GridRow",
    "GridButton",
    "build_grid",
    "build_row",
    "apply_action",
    "delete_rows",
    # Dispatch
    "CallbackDispatcher",
    "CallbackEvent",
    "DispatchOutcome",
    "DispatchState",
    "FailureReason",
    "KeyedLock",
    # Transport
    "ControlSurface",
    "MessageSender",
    "InMemorySurface",
    "InMemorySurfaceStore",
    "InMemorySender",
    "create_list",
    "render_title",
    "DEFAULT_CATALOG",
    "DEFAULT_LIST_NAME",
    # Errors
    "ListBotError",
    "InvalidActionError",
    "MalformedTokenError",
    "UnimplementedActionError",
    "TransportError",
    "CommandNotFoundError",
    "ConfigurationError",
]
