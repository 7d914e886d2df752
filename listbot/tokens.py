"""Callback token codec.

A token packs one button's action and target item into the callback payload
Telegram hands back when the button is pressed:

    "<action-char><separator><item-identifier>"   e.g. "d_Bullseye", "e_Jessie"

The identifier is stored verbatim after a fixed two-character prefix. The
separator slot is written on encode but not checked on decode.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Tuple

from .errors import InvalidActionError, MalformedTokenError


class ButtonAction(str, Enum):
    """Closed set of actions a grid button can trigger."""

    EDIT = "edit"
    DELETE = "delete"


SEPARATOR = "_"
PREFIX_LENGTH = 2

# Single source for both codec directions. Adding a ButtonAction without an
# entry here makes the module fail at import.
ACTION_CHARS: Dict[ButtonAction, str] = {
    ButtonAction.EDIT: "e",
    ButtonAction.DELETE: "d",
}

_CHAR_ACTIONS: Dict[str, ButtonAction] = {char: action for action, char in ACTION_CHARS.items()}

if set(ACTION_CHARS) != set(ButtonAction) or len(_CHAR_ACTIONS) != len(ACTION_CHARS):
    raise RuntimeError("ACTION_CHARS must map every ButtonAction to a distinct character")


def encode_token(action: ButtonAction, identifier: str) -> str:
    """Return the callback token for ``action`` on ``identifier``."""

    return f"{ACTION_CHARS[action]}{SEPARATOR}{identifier}"


def decode_token(token: str) -> Tuple[ButtonAction, str]:
    """Split a callback token back into its action and item identifier.

    Raises:
        MalformedTokenError: If the token is shorter than the two-character prefix
        InvalidActionError: If the first character is not a known action character
    """

    if len(token) < PREFIX_LENGTH:
        raise MalformedTokenError(token=token, prefix_length=PREFIX_LENGTH)

    action_char = token[0]
    action = _CHAR_ACTIONS.get(action_char)
    if action is None:
        raise InvalidActionError(token=token, action_char=action_char)

    return action, token[PREFIX_LENGTH:]
