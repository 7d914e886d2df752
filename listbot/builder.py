"""Grid builder: turns an ordered catalog of items into a fresh button grid."""

from typing import Iterable

from .schemas import Grid, GridButton, GridRow
from .tokens import ButtonAction, encode_token

# Heavy multiplication X, used as the delete button label.
DELETE_LABEL = "✖"


def build_row(identifier: str) -> GridRow:
    """Return the ``[edit, delete]`` row for one item."""

    return GridRow(
        buttons=[
            GridButton(text=identifier, token=encode_token(ButtonAction.EDIT, identifier)),
            GridButton(text=DELETE_LABEL, token=encode_token(ButtonAction.DELETE, identifier)),
        ]
    )


def build_grid(identifiers: Iterable[str]) -> Grid:
    """Build one row per identifier, preserving input order.

    Duplicates are kept as separate rows; an empty input gives an empty grid.
    """

    return Grid(rows=[build_row(identifier) for identifier in identifiers])
