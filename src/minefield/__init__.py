"""
Minefield game module.

Provides the board engine, cell state and difficulty presets, plus a
Gymnasium environment that plays through the engine.
"""
from .cell import Cell, CellState, CellView
from .board import (
    Board,
    Difficulty,
    DIFFICULTIES,
    GameStatus,
    InvalidDifficultyError,
    EASY,
    MEDIUM,
    HARD,
    get_difficulty,
)
from .environment import MinefieldEnv, make_vec_env

__all__ = [
    "Cell",
    "CellState",
    "CellView",
    "Board",
    "Difficulty",
    "DIFFICULTIES",
    "GameStatus",
    "InvalidDifficultyError",
    "EASY",
    "MEDIUM",
    "HARD",
    "get_difficulty",
    "MinefieldEnv",
    "make_vec_env",
]
