"""
Cell module for the minefield engine.

Represents individual cells on the game board. A cell carries its
content (mine or adjacent count) and two independent facets: whether
it has been revealed and whether the player flagged it.
"""
from enum import Enum, auto
from dataclasses import dataclass
from typing import Optional


# ============================================================================
# Constants
# ============================================================================

MINE_OBSERVATION = 9
HIDDEN_OBSERVATION = -1
FLAGGED_OBSERVATION = -2


class CellState(Enum):
    """Visual state of a cell, derived from its facets."""

    HIDDEN = auto()
    REVEALED = auto()
    FLAGGED = auto()


# ============================================================================
# Cell Data Class
# ============================================================================

@dataclass
class Cell:
    """
    Represents a single cell in the minefield grid.

    Attributes:
        is_mine: Whether this cell contains a mine.
        adjacent_mines: Count of mines in neighboring cells (0-8).
        revealed: Whether the cell has been uncovered. Never reset
            within a game.
        flagged: Whether the player marked the cell.
    """

    is_mine: bool = False
    adjacent_mines: int = 0
    revealed: bool = False
    flagged: bool = False

    def reveal(self) -> bool:
        """
        Reveal this cell on behalf of the player.

        Returns:
            True if cell was revealed, False if already revealed
            or flagged.
        """
        if self.revealed or self.flagged:
            return False
        self.revealed = True
        return True

    def force_reveal(self) -> bool:
        """
        Reveal this cell regardless of its flag.

        Used by the end-of-game sweeps only.

        Returns:
            True if the cell was hidden before.
        """
        if self.revealed:
            return False
        self.revealed = True
        return True

    def toggle_flag(self) -> bool:
        """
        Toggle flag on this cell.

        Returns:
            True if flag was toggled, False if cell is revealed.
        """
        if self.revealed:
            return False
        self.flagged = not self.flagged
        return True

    @property
    def state(self) -> CellState:
        """Visual state; revealed wins over flagged."""
        if self.revealed:
            return CellState.REVEALED
        if self.flagged:
            return CellState.FLAGGED
        return CellState.HIDDEN

    @property
    def is_hidden(self) -> bool:
        """Check if cell is hidden and unflagged."""
        return self.state == CellState.HIDDEN

    @property
    def is_revealed(self) -> bool:
        """Check if cell is revealed."""
        return self.revealed

    @property
    def is_flagged(self) -> bool:
        """Check if cell is flagged and still covered."""
        return self.state == CellState.FLAGGED

    def to_observation(self) -> int:
        """
        Convert cell to an integer observation value.

        Returns:
            -1: Hidden cell
            -2: Flagged cell
            0-8: Revealed cell with adjacent mine count
            9: Revealed mine (game over state)
        """
        state = self.state
        if state == CellState.HIDDEN:
            return HIDDEN_OBSERVATION
        if state == CellState.FLAGGED:
            return FLAGGED_OBSERVATION
        if self.is_mine:
            return MINE_OBSERVATION
        return self.adjacent_mines


# ============================================================================
# Read-only View
# ============================================================================

@dataclass(frozen=True)
class CellView:
    """
    Immutable snapshot of a cell as the player may see it.

    Content fields are None while the cell is covered.
    """

    row: int
    col: int
    revealed: bool
    flagged: bool
    is_mine: Optional[bool] = None
    adjacent_mines: Optional[int] = None

    @classmethod
    def from_cell(cls, row: int, col: int, cell: Cell) -> "CellView":
        """Build a view that hides the content of covered cells."""
        if not cell.revealed:
            return cls(row, col, revealed=False, flagged=cell.flagged)
        return cls(
            row,
            col,
            revealed=True,
            flagged=cell.flagged,
            is_mine=cell.is_mine,
            adjacent_mines=None if cell.is_mine else cell.adjacent_mines,
        )
