"""
Pydantic schemas for the button grid.

A Grid is the in-process picture of a message's inline keyboard: an ordered list of
rows, each row holding exactly two buttons (edit, then delete) that point at the
same item identifier. The grid has no storage of its own. It is read off the
remote message, transformed, and written back.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from .tokens import decode_token
from .errors import ListBotError


class GridButton(BaseModel):
    """A single inline button: visible label plus callback token."""

    text: str = Field(..., description="Label shown on the button")
    token: str = Field(..., description="Callback payload, see listbot.tokens")

    def identifier(self) -> Optional[str]:
        """Return the item identifier encoded in the token, or None if undecodable."""

        try:
            _, identifier = decode_token(self.token)
        except ListBotError:
            return None
        return identifier


class GridRow(BaseModel):
    """One list item: ``[edit button, delete button]`` in display order."""

    buttons: List[GridButton] = Field(..., min_length=2, max_length=2)

    @property
    def edit_button(self) -> GridButton:
        return self.buttons[0]

    @property
    def delete_button(self) -> GridButton:
        return self.buttons[1]


class Grid(BaseModel):
    """Ordered rows of a message's control surface, top to bottom."""

    rows: List[GridRow] = Field(default_factory=list)

    def identifiers(self) -> List[Optional[str]]:
        """Identifiers of every row as read from the edit button."""

        return [row.edit_button.identifier() for row in self.rows]

    def tokens(self) -> List[List[str]]:
        return [[button.token for button in row.buttons] for row in self.rows]
