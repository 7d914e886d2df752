"""
Grid mutator: computes the next grid for a decoded button action.

The mutator works only on the grid it is handed (read back from the remote message
by the dispatcher). It never rebuilds from the catalog and never mutates its input;
callers always get a new Grid.

Supported actions:
- DELETE removes every row whose delete token targets the identifier. Surviving rows
  keep their relative order. A miss returns an unchanged copy, so repeated deletes
  are harmless.
- EDIT is reserved. It raises UnimplementedActionError until edit behavior is defined.
"""

from .errors import ListBotError, UnimplementedActionError
from .schemas import Grid, GridRow
from .tokens import ButtonAction, decode_token


def _row_targets(row: GridRow, action: ButtonAction, identifier: str) -> bool:
    """True if the row's button for ``action`` decodes to ``identifier``."""

    button = row.delete_button if action is ButtonAction.DELETE else row.edit_button
    try:
        decoded_action, decoded_identifier = decode_token(button.token)
    except ListBotError:
        # Foreign or corrupted buttons never match, they simply survive.
        return False
    return decoded_action is action and decoded_identifier == identifier


def delete_rows(grid: Grid, identifier: str) -> Grid:
    """Return ``grid`` without the rows targeting ``identifier``."""

    return Grid(
        rows=[
            row.model_copy(deep=True)
            for row in grid.rows
            if not _row_targets(row, ButtonAction.DELETE, identifier)
        ]
    )


def apply_action(grid: Grid, action: ButtonAction, identifier: str) -> Grid:
    """Apply one decoded button action to ``grid``.

    Raises:
        UnimplementedActionError: For ButtonAction.EDIT
    """

    if action is ButtonAction.DELETE:
        return delete_rows(grid, identifier)
    if action is ButtonAction.EDIT:
        raise UnimplementedActionError(action=action, identifier=identifier)
    # Unreachable while ButtonAction stays in sync with this function.
    raise AssertionError(f"Unhandled button action: {action!r}")
