"""
Pytest configuration and shared fixtures.
"""
import pytest
import sys
from collections import deque
from pathlib import Path
from typing import Callable, Iterable, Tuple

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from minefield import Board, Cell, Difficulty, EASY


# ============================================================================
# Random Source
# ============================================================================

class ScriptedRandom:
    """
    Stand-in for random.Random that replays chosen cells.

    Each scripted (row, col) answers two randrange calls, so mine
    placement draws exactly the listed cells in order, including any
    excluded or duplicate cells it has to reject.
    """

    def __init__(self, positions: Iterable[Tuple[int, int]]) -> None:
        self._values = deque(value for pos in positions for value in pos)

    def randrange(self, stop: int) -> int:
        value = self._values.popleft()
        assert 0 <= value < stop
        return value

    def seed(self, *args, **kwargs) -> None:
        pass


# ============================================================================
# Board Fixtures
# ============================================================================

@pytest.fixture
def default_board() -> Board:
    """Create a default 9x9 board with 10 mines."""
    return Board()


@pytest.fixture
def easy_board() -> Board:
    """Create an easy difficulty board."""
    return Board(EASY)


@pytest.fixture
def rigged_board() -> Callable[..., Board]:
    """
    Factory for boards whose mines land on the given cells.

    Extra draws (for rejected cells) can be prepended via ``draws``.
    """
    def make(rows: int, cols: int, mines, draws=()) -> Board:
        difficulty = Difficulty(rows, cols, len(mines))
        rng = ScriptedRandom(list(draws) + list(mines))
        return Board(difficulty, rng=rng)

    return make


@pytest.fixture
def walled_board(rigged_board) -> Board:
    """5x5 board with a full column of mines down column 2."""
    return rigged_board(5, 5, [(row, 2) for row in range(5)])


@pytest.fixture
def two_mine_board(rigged_board) -> Board:
    """3x3 board with mines in the two right-hand corners."""
    return rigged_board(3, 3, [(0, 2), (2, 2)])


@pytest.fixture
def tiny_board(rigged_board) -> Board:
    """2x2 board with a single mine at (1, 1)."""
    return rigged_board(2, 2, [(1, 1)])


# ============================================================================
# Cell Fixtures
# ============================================================================

@pytest.fixture
def hidden_cell() -> Cell:
    """Create a hidden cell."""
    return Cell()


@pytest.fixture
def mine_cell() -> Cell:
    """Create a cell containing a mine."""
    return Cell(is_mine=True)


@pytest.fixture
def numbered_cell() -> Cell:
    """Create a revealed cell with adjacent mines."""
    cell = Cell(adjacent_mines=3)
    cell.reveal()
    return cell


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def valid_difficulty() -> Difficulty:
    """Create a valid custom difficulty."""
    return Difficulty(9, 9, 10)
