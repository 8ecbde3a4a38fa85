from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from enum import Enum, IntEnum
from typing import Any, Mapping, Optional

import numpy as np

from .grid import GameGrid, collides
from .pieces import ActivePiece, PieceDefinition, PieceFactory, rotate
from .rules import ScoringRules

logger = logging.getLogger(__name__)


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    ROTATE = 2
    SOFT_DROP = 3
    HARD_DROP = 4
    NONE = 5


class Status(str, Enum):
    RUNNING = "running"
    OVER = "over"


class Phase(Enum):
    SPAWNING = "spawning"
    FALLING = "falling"
    LOCKING = "locking"
    CLEARING = "clearing"
    GAME_OVER = "game_over"


_OPTION_NAMES = {
    "boardWidth": "width",
    "boardHeight": "height",
    "initialDropIntervalMs": "initial_drop_interval_ms",
}


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    initial_drop_interval_ms: int = 1000
    random_seed: Optional[int] = None

    def __post_init__(self) -> None:
        for f in fields(self):
            if f.name == "random_seed":
                continue
            value = getattr(self, f.name)
            if int(value) <= 0:
                raise ValueError(f"{f.name} must be positive, got {value}")

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "GameConfig":
        """Build a config from the recognised option names (boardWidth, ...)."""
        kwargs = {}
        for key, value in options.items():
            if key not in _OPTION_NAMES:
                raise ValueError(f"Unknown option {key!r}; expected one of {sorted(_OPTION_NAMES)}")
            kwargs[_OPTION_NAMES[key]] = int(value)
        return cls(**kwargs)


@dataclass(frozen=True, eq=False)
class Snapshot:
    """Read-only view of a session for renderers."""

    grid: np.ndarray
    active_piece: Optional[ActivePiece]
    next_piece: PieceDefinition
    score: int
    lines_cleared_total: int
    status: Status
    phase: Phase


class GameSession:
    """One play-through: spawn -> fall -> lock -> clear -> spawn, until game over."""

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        factory: Optional[PieceFactory] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.factory = factory or PieceFactory(seed=self.config.random_seed)
        self.grid = GameGrid(self.config.width, self.config.height)
        self.score = 0
        self.lines_cleared_total = 0
        self.status = Status.RUNNING
        self.phase = Phase.SPAWNING
        self.current_piece: Optional[ActivePiece] = None
        self.next_piece: PieceDefinition = self.factory.next()
        self._spawn_piece()

    @property
    def game_over(self) -> bool:
        return self.status is Status.OVER

    @property
    def running(self) -> bool:
        return self.status is Status.RUNNING

    def _spawn_piece(self) -> None:
        self.phase = Phase.SPAWNING
        definition = self.next_piece
        x = self.grid.width // 2 - definition.width // 2
        self.current_piece = ActivePiece.from_definition(definition, x, 0)
        self.next_piece = self.factory.next()
        if collides(self.current_piece.shape, x, 0, self.grid):
            self.status = Status.OVER
            self.phase = Phase.GAME_OVER
            logger.info("Game over: %s blocked at spawn (score %d)", definition.kind.name, self.score)
            return
        logger.debug("Spawned %s at x=%d, next is %s", definition.kind.name, x, self.next_piece.kind.name)
        self.phase = Phase.FALLING

    def _move(self, dx: int, dy: int) -> bool:
        if not self.running or self.current_piece is None:
            return False
        piece = self.current_piece
        new_x = piece.x + dx
        new_y = piece.y + dy
        if collides(piece.shape, new_x, new_y, self.grid):
            return False
        piece.x = new_x
        piece.y = new_y
        return True

    def move_left(self) -> bool:
        return self._move(-1, 0)

    def move_right(self) -> bool:
        return self._move(1, 0)

    def soft_drop(self) -> bool:
        return self._move(0, 1)

    def rotate(self) -> bool:
        if not self.running or self.current_piece is None:
            return False
        piece = self.current_piece
        rotated = rotate(piece.shape)
        if collides(rotated, piece.x, piece.y, self.grid):
            return False
        piece.shape = rotated
        return True

    def hard_drop(self) -> int:
        """Drop the active piece as far as it goes and lock it.

        Returns the number of lines cleared by the lock.
        """
        if not self.running or self.current_piece is None:
            return 0
        while self._move(0, 1):
            pass
        return self._lock_piece()

    def drop_step(self) -> int:
        """Gravity step: move down one row, or lock if the piece has landed."""
        if not self.running or self.current_piece is None:
            return 0
        if self._move(0, 1):
            return 0
        return self._lock_piece()

    def _lock_piece(self) -> int:
        assert self.current_piece is not None
        self.phase = Phase.LOCKING
        piece = self.current_piece
        self.grid.lock(piece.shape, piece.x, piece.y, int(piece.kind))
        logger.debug("Locked %s at (%d, %d)", piece.kind.name, piece.x, piece.y)

        self.phase = Phase.CLEARING
        lines = self.grid.clear_lines()
        if lines:
            self.lines_cleared_total += lines
            self.score += self.rules.score_for_lines(lines)
            logger.debug("Cleared %d line(s), score %d", lines, self.score)

        self._spawn_piece()
        return lines

    def step(self, action: Action) -> int:
        """Apply one input command; returns lines cleared by it."""
        if not self.running:
            return 0
        if action == Action.LEFT:
            self.move_left()
        elif action == Action.RIGHT:
            self.move_right()
        elif action == Action.ROTATE:
            self.rotate()
        elif action == Action.SOFT_DROP:
            self.soft_drop()
        elif action == Action.HARD_DROP:
            return self.hard_drop()
        return 0

    def snapshot(self) -> Snapshot:
        return Snapshot(
            grid=self.grid.clone_state(),
            active_piece=self.current_piece.copy() if self.current_piece is not None else None,
            next_piece=self.next_piece.copy(),
            score=self.score,
            lines_cleared_total=self.lines_cleared_total,
            status=self.status,
            phase=self.phase,
        )

    def get_state(self) -> np.ndarray:
        # Overlay current piece on a copy of the grid for observation
        state = self.grid.clone_state()
        piece = self.current_piece
        if piece is not None and not self.game_over:
            rows, cols = piece.shape.shape
            for r in range(rows):
                for c in range(cols):
                    x, y = piece.x + c, piece.y + r
                    if piece.shape[r, c] and self.grid.is_inside(x, y):
                        # Use negative to indicate falling piece overlay
                        state[y, x] = -int(piece.kind)
        return state
