"""
Board module for the minefield engine.

Implements the game board with deferred mine placement, flood-fill
revealing, flag bookkeeping, elapsed-time counting and game status
management.
"""
import logging
import random
from collections import deque
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Deque, Dict, List, Optional, Tuple, Union

import numpy as np

from .cell import Cell, CellView


logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

class GameStatus(Enum):
    """Possible states of the game."""

    PENDING = auto()
    IN_PROGRESS = auto()
    WON = auto()
    LOST = auto()


class InvalidDifficultyError(ValueError):
    """Raised when a difficulty cannot produce a playable board."""


@dataclass(frozen=True)
class Difficulty:
    """
    Configuration for a minefield board.

    Attributes:
        rows: Number of rows.
        cols: Number of columns.
        bomb_count: Total mines to place.
        name: Preset name, empty for custom boards.
    """

    rows: int = 9
    cols: int = 9
    bomb_count: int = 10
    name: str = ""

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Ensure the board can hold its mines plus one safe cell."""
        if self.rows < 1 or self.cols < 1:
            raise InvalidDifficultyError("Board dimensions must be positive")
        if self.bomb_count < 1:
            raise InvalidDifficultyError("Board must contain at least one mine")
        max_mines = self.rows * self.cols - 1
        if self.bomb_count > max_mines:
            raise InvalidDifficultyError(f"Too many mines (max {max_mines})")

    @property
    def total_cells(self) -> int:
        """Number of cells on the board."""
        return self.rows * self.cols

    @property
    def safe_cells(self) -> int:
        """Number of cells without a mine."""
        return self.total_cells - self.bomb_count


# Preset difficulty levels
EASY = Difficulty(9, 9, 10, "easy")
MEDIUM = Difficulty(16, 16, 40, "medium")
HARD = Difficulty(16, 30, 99, "hard")

DIFFICULTIES: Dict[str, Difficulty] = {
    preset.name: preset for preset in (EASY, MEDIUM, HARD)
}


def get_difficulty(name: str) -> Difficulty:
    """
    Look up a preset difficulty by name.

    Raises:
        InvalidDifficultyError: If no preset has that name.
    """
    try:
        return DIFFICULTIES[name.lower()]
    except KeyError:
        known = ", ".join(sorted(DIFFICULTIES))
        raise InvalidDifficultyError(
            f"Unknown difficulty {name!r} (known: {known})"
        ) from None


DifficultyLike = Union[Difficulty, str]


def _resolve_difficulty(difficulty: DifficultyLike) -> Difficulty:
    if isinstance(difficulty, str):
        return get_difficulty(difficulty)
    return difficulty


# ============================================================================
# Board Class
# ============================================================================

@dataclass
class Board:
    """
    Minefield game board.

    Owns the grid of cells and the game status. Commands never raise
    during play: anything the rules forbid is a no-op reported by a
    False return value.
    """

    difficulty: Difficulty = field(default_factory=lambda: EASY)
    rng: random.Random = field(default_factory=random.Random, repr=False)
    _grid: List[List[Cell]] = field(default_factory=list, repr=False)
    _status: GameStatus = GameStatus.PENDING
    _elapsed_seconds: int = 0
    _timing: bool = False
    _mine_armed: bool = False
    _safe_revealed: int = 0

    def __post_init__(self) -> None:
        """Resolve preset names and start a fresh game."""
        self.reset(self.difficulty)

    # ========================================================================
    # Lifecycle
    # ========================================================================

    def reset(self, difficulty: Optional[DifficultyLike] = None) -> None:
        """
        Discard the current game and start a new one.

        Args:
            difficulty: New difficulty or preset name. Keeps the
                current one when omitted.

        Raises:
            InvalidDifficultyError: If a preset name is unknown.
        """
        if difficulty is not None:
            self.difficulty = _resolve_difficulty(difficulty)
        self._init_grid()
        self._status = GameStatus.PENDING
        self._elapsed_seconds = 0
        self._timing = False
        self._mine_armed = False
        self._safe_revealed = 0
        logger.debug(
            "New %dx%d board with %d mines",
            self.rows, self.cols, self.bomb_count,
        )

    def _init_grid(self) -> None:
        """Create empty grid of cells."""
        self._grid = [
            [Cell() for _ in range(self.difficulty.cols)]
            for _ in range(self.difficulty.rows)
        ]

    # ========================================================================
    # Mine Placement (Low-level)
    # ========================================================================

    def _place_mines(self, exclude_row: int, exclude_col: int) -> None:
        """
        Place mines by rejection sampling, keeping one cell mine-free.

        Args:
            exclude_row: Row of the cell that must stay safe.
            exclude_col: Column of the cell that must stay safe.
        """
        placed = 0
        while placed < self.difficulty.bomb_count:
            row = self.rng.randrange(self.difficulty.rows)
            col = self.rng.randrange(self.difficulty.cols)
            if (row, col) == (exclude_row, exclude_col):
                continue
            cell = self._grid[row][col]
            if cell.is_mine:
                continue
            cell.is_mine = True
            placed += 1

        self._calculate_adjacent_mines()
        self._mine_armed = True
        logger.debug(
            "Placed %d mines avoiding (%d, %d)",
            placed, exclude_row, exclude_col,
        )

    def _calculate_adjacent_mines(self) -> None:
        """Calculate adjacent mine counts for all cells."""
        for row in range(self.rows):
            for col in range(self.cols):
                cell = self._grid[row][col]
                if not cell.is_mine:
                    cell.adjacent_mines = self._count_adjacent_mines(row, col)

    def _count_adjacent_mines(self, row: int, col: int) -> int:
        """Count mines adjacent to a specific cell."""
        return sum(
            1 for neighbor_row, neighbor_col in self._get_neighbors(row, col)
            if self._grid[neighbor_row][neighbor_col].is_mine
        )

    # ========================================================================
    # Neighbor Utilities (Low-level)
    # ========================================================================

    def _get_neighbors(self, row: int, col: int) -> List[Tuple[int, int]]:
        """
        Get the in-bounds Moore neighborhood of a cell.

        Args:
            row: Row index of center cell.
            col: Column index of center cell.

        Returns:
            List of (row, col) tuples for valid neighbors.
        """
        neighbors = []
        for delta_row in (-1, 0, 1):
            for delta_col in (-1, 0, 1):
                if delta_row == 0 and delta_col == 0:
                    continue
                new_row = row + delta_row
                new_col = col + delta_col
                if self._is_valid_position(new_row, new_col):
                    neighbors.append((new_row, new_col))
        return neighbors

    def _is_valid_position(self, row: int, col: int) -> bool:
        """Check if position is within board bounds."""
        return 0 <= row < self.rows and 0 <= col < self.cols

    # ========================================================================
    # Game Actions (Mid-level)
    # ========================================================================

    def reveal(self, row: int, col: int) -> bool:
        """
        Reveal a cell at the given position.

        The first reveal places the mines, avoiding this cell, and
        starts the clock. Empty cells flood outward until numbered
        cells or flags stop them. Revealing a mine loses the game;
        uncovering the last safe cell wins it.

        Args:
            row: Row index to reveal.
            col: Column index to reveal.

        Returns:
            True if the board changed, False otherwise.
        """
        if self.is_over or not self._is_valid_position(row, col):
            return False
        cell = self._grid[row][col]
        if cell.flagged:
            return False

        if self._status == GameStatus.PENDING:
            self._start_game(row, col)

        if cell.revealed:
            return False

        if cell.is_mine:
            cell.reveal()
            self._lose()
            return True

        self._flood_reveal(row, col)
        self._check_win_condition()
        return True

    def _start_game(self, row: int, col: int) -> None:
        """Handle first click: arm the mines and start counting."""
        self._place_mines(row, col)
        self._timing = True
        self._status = GameStatus.IN_PROGRESS

    def _flood_reveal(self, row: int, col: int) -> None:
        """Reveal a safe cell and spread across zero-count cells."""
        pending: Deque[Tuple[int, int]] = deque([(row, col)])
        while pending:
            current_row, current_col = pending.popleft()
            cell = self._grid[current_row][current_col]
            if not cell.reveal():
                continue
            self._safe_revealed += 1
            if cell.adjacent_mines != 0:
                continue
            for neighbor_row, neighbor_col in self._get_neighbors(
                current_row, current_col
            ):
                neighbor = self._grid[neighbor_row][neighbor_col]
                if not neighbor.revealed and not neighbor.flagged:
                    pending.append((neighbor_row, neighbor_col))

    def _check_win_condition(self) -> None:
        """Win once every non-mine cell is revealed."""
        if self._safe_revealed != self.difficulty.safe_cells:
            return
        self._status = GameStatus.WON
        self._timing = False
        for cell in self._iter_cells():
            if not cell.is_mine:
                cell.force_reveal()
        logger.info("Game won after %d seconds", self._elapsed_seconds)

    def _lose(self) -> None:
        """End the game and uncover every mine."""
        self._status = GameStatus.LOST
        self._timing = False
        for cell in self._iter_cells():
            if cell.is_mine:
                cell.force_reveal()
        logger.info("Game lost after %d seconds", self._elapsed_seconds)

    def toggle_flag(self, row: int, col: int) -> bool:
        """
        Toggle flag on a cell.

        Args:
            row: Row index.
            col: Column index.

        Returns:
            True if flag was toggled, False otherwise.
        """
        if self.is_over or not self._is_valid_position(row, col):
            return False
        return self._grid[row][col].toggle_flag()

    def tick(self) -> bool:
        """
        Count one elapsed second.

        Callers schedule this once per second and stop when
        is_timing turns False.

        Returns:
            True if the second was counted.
        """
        if not self._timing:
            return False
        self._elapsed_seconds += 1
        return True

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    @property
    def rows(self) -> int:
        return self.difficulty.rows

    @property
    def cols(self) -> int:
        return self.difficulty.cols

    @property
    def bomb_count(self) -> int:
        return self.difficulty.bomb_count

    @property
    def status(self) -> GameStatus:
        """Get current game status."""
        return self._status

    @property
    def is_pending(self) -> bool:
        """Check if no cell has been revealed yet."""
        return self._status == GameStatus.PENDING

    @property
    def is_playing(self) -> bool:
        """Check if game is in progress."""
        return self._status == GameStatus.IN_PROGRESS

    @property
    def is_won(self) -> bool:
        return self._status == GameStatus.WON

    @property
    def is_lost(self) -> bool:
        return self._status == GameStatus.LOST

    @property
    def is_over(self) -> bool:
        """Check if the game reached a terminal status."""
        return self._status in (GameStatus.WON, GameStatus.LOST)

    @property
    def elapsed_seconds(self) -> int:
        return self._elapsed_seconds

    @property
    def is_timing(self) -> bool:
        """Check if elapsed-time counting is running."""
        return self._timing

    @property
    def mine_armed(self) -> bool:
        """Check if mines have been placed for this game."""
        return self._mine_armed

    @property
    def flag_count(self) -> int:
        """Number of flagged cells."""
        return sum(1 for cell in self._iter_cells() if cell.flagged)

    @property
    def revealed_count(self) -> int:
        """Number of revealed cells, mines included."""
        return sum(1 for cell in self._iter_cells() if cell.revealed)

    def _iter_cells(self):
        for grid_row in self._grid:
            yield from grid_row

    def get_cell(self, row: int, col: int) -> Optional[Cell]:
        """Get cell at position, or None if invalid."""
        if not self._is_valid_position(row, col):
            return None
        return self._grid[row][col]

    def snapshot(self) -> List[List[CellView]]:
        """
        Get the grid as the player sees it.

        Returns:
            Rows of CellView; content is withheld for covered cells.
        """
        return [
            [
                CellView.from_cell(row, col, self._grid[row][col])
                for col in range(self.cols)
            ]
            for row in range(self.rows)
        ]

    def get_observation(self) -> np.ndarray:
        """
        Get board state as a numpy array.

        Returns:
            2D numpy array where:
                -1 = hidden
                -2 = flagged
                0-8 = revealed with adjacent count
                9 = revealed mine
        """
        obs = np.zeros((self.rows, self.cols), dtype=np.int8)
        for row in range(self.rows):
            for col in range(self.cols):
                obs[row, col] = self._grid[row][col].to_observation()
        return obs

    def get_valid_actions(self) -> List[Tuple[int, int]]:
        """
        Get list of cells the player can reveal.

        Returns:
            List of (row, col) positions that are hidden and unflagged,
            or an empty list once the game is over.
        """
        if self.is_over:
            return []
        return [
            (row, col)
            for row in range(self.rows)
            for col in range(self.cols)
            if self._grid[row][col].is_hidden
        ]
