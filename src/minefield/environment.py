"""
Gymnasium environment wrapper for the minefield engine.

Forwards flat action indices into board commands and reads the board
back as an observation array, so agents can play through the standard
Gymnasium interface.
"""
import random
from typing import Any, Dict, Optional, Tuple, SupportsFloat

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .board import Board, DifficultyLike, EASY
from .cell import MINE_OBSERVATION, FLAGGED_OBSERVATION, HIDDEN_OBSERVATION


# ============================================================================
# Rewards
# ============================================================================

SAFE_REVEAL_REWARD = 1.0
WIN_REWARD = 10.0
MINE_REWARD = -10.0
FLAG_REWARD = 0.0
IGNORED_ACTION_REWARD = -0.1


# ============================================================================
# Minefield Environment
# ============================================================================

class MinefieldEnv(gym.Env):
    """
    Gymnasium environment for the minefield game.

    Observation:
        2D array where:
        - -1 = hidden cell
        - -2 = flagged cell
        - 0-8 = revealed cell with adjacent mine count
        - 9 = revealed mine

    Actions:
        Discrete action space of size 2 * rows * cols.
        Action i < rows * cols reveals cell (i // cols, i % cols);
        larger actions toggle the flag on cell i - rows * cols.

    Rewards:
        - +1 for revealing a safe cell
        - +10 for winning the game
        - -10 for hitting a mine
        - 0 for toggling a flag
        - -0.1 for an action the board ignores
    """

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 4}

    def __init__(
        self,
        difficulty: DifficultyLike = EASY,
        render_mode: Optional[str] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        """
        Initialize the environment.

        Args:
            difficulty: Difficulty or preset name (default: easy).
            render_mode: How to render the environment.
            rng: Random source for mine placement.
        """
        super().__init__()

        self.board = Board(difficulty, rng=rng or random.Random())
        self.difficulty = self.board.difficulty
        self.render_mode = render_mode

        self.observation_space = spaces.Box(
            low=FLAGGED_OBSERVATION,
            high=MINE_OBSERVATION,
            shape=(self.difficulty.rows, self.difficulty.cols),
            dtype=np.int8,
        )

        # One reveal and one flag action per cell
        self._num_cells = self.difficulty.total_cells
        self.action_space = spaces.Discrete(2 * self._num_cells)

        self._steps = 0

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Reset the environment for a new episode.

        Args:
            seed: Seeds the mine placement of the next board.
            options: Additional options (unused).

        Returns:
            Tuple of (observation, info dict).
        """
        super().reset(seed=seed)
        if seed is not None:
            self.board.rng.seed(seed)
        self.board.reset()
        self._steps = 0

        return self.board.get_observation(), self._get_info()

    def step(
        self, action: int
    ) -> Tuple[np.ndarray, SupportsFloat, bool, bool, Dict[str, Any]]:
        """
        Execute one action in the environment.

        Args:
            action: Flat action index (see class docstring).

        Returns:
            Tuple of (observation, reward, terminated, truncated, info).
        """
        self._steps += 1
        flag, row, col = self._decode_action(int(action))

        if flag:
            reward = self._flag_reward(row, col)
        else:
            reward = self._reveal_reward(row, col)

        observation = self.board.get_observation()
        terminated = self.board.is_over
        truncated = False

        return observation, reward, terminated, truncated, self._get_info()

    def _decode_action(self, action: int) -> Tuple[bool, int, int]:
        """Convert flat action index to (is_flag, row, col)."""
        flag = action >= self._num_cells
        index = action - self._num_cells if flag else action
        row, col = divmod(index, self.difficulty.cols)
        return flag, row, col

    def _reveal_reward(self, row: int, col: int) -> float:
        """Reveal a cell and score the outcome."""
        if not self.board.reveal(row, col):
            return IGNORED_ACTION_REWARD
        if self.board.is_won:
            return WIN_REWARD
        if self.board.is_lost:
            return MINE_REWARD
        return SAFE_REVEAL_REWARD

    def _flag_reward(self, row: int, col: int) -> float:
        if not self.board.toggle_flag(row, col):
            return IGNORED_ACTION_REWARD
        return FLAG_REWARD

    def _get_info(self) -> Dict[str, Any]:
        """Get info dictionary for current state."""
        return {
            "steps": self._steps,
            "revealed": self.board.revealed_count,
            "total_safe": self.difficulty.safe_cells,
            "game_state": self.board.status.name,
            "flags": self.board.flag_count,
            "bombs": self.board.bomb_count,
            "valid_actions": len(self.board.get_valid_actions()),
        }

    def render(self) -> Optional[str]:
        """Render the current board state."""
        if self.render_mode == "ansi":
            return self._render_ansi()
        if self.render_mode == "human":
            print(self._render_ansi())
        return None

    def _render_ansi(self) -> str:
        """Render board as ASCII string."""
        symbols = {
            HIDDEN_OBSERVATION: ".",
            FLAGGED_OBSERVATION: "F",
            MINE_OBSERVATION: "*",
            0: " ",
        }
        obs = self.board.get_observation()
        return "\n".join(
            " ".join(symbols.get(int(val), str(val)) for val in row)
            for row in obs
        )

    def get_action_mask(self) -> np.ndarray:
        """
        Get mask of actions the board would accept.

        Returns:
            Boolean array where True = valid action.
        """
        mask = np.zeros(self.action_space.n, dtype=bool)
        if self.board.is_over:
            return mask
        for row, col in self.board.get_valid_actions():
            mask[row * self.difficulty.cols + col] = True
        for row in range(self.difficulty.rows):
            for col in range(self.difficulty.cols):
                if not self.board.get_cell(row, col).revealed:
                    mask[self._num_cells + row * self.difficulty.cols + col] = True
        return mask


# ============================================================================
# Vectorized Environment Factory
# ============================================================================

def make_vec_env(
    n_envs: int = 4,
    difficulty: DifficultyLike = EASY,
    asynchronous: bool = True,
) -> gym.vector.VectorEnv:
    """
    Create vectorized environment for parallel play.

    Args:
        n_envs: Number of parallel environments.
        difficulty: Difficulty or preset name for every copy.
        asynchronous: Run copies in subprocesses when True.

    Returns:
        Vectorized environment.
    """
    def make_env() -> MinefieldEnv:
        return MinefieldEnv(difficulty=difficulty)

    env_fns = [make_env for _ in range(n_envs)]
    if asynchronous:
        return gym.vector.AsyncVectorEnv(env_fns)
    return gym.vector.SyncVectorEnv(env_fns)
