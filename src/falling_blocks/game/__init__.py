"""Game module for Falling Blocks.

Exports the core game engine and supporting classes:
- GameGrid: Grid representation, collision checks and line clearing
- PieceDefinition / PieceFactory: Piece catalog and random piece source
- ScoringRules: Flat per-line scoring
- GameSession: Spawn/fall/lock/clear state machine
- DropScheduler: Timed gravity steps
- GameController: Session lifecycle, gravity and leaderboard wiring
"""

from .grid import GameGrid, clear_lines, collides
from .pieces import CATALOG, ActivePiece, PieceDefinition, PieceFactory, TetrominoType, color_for, rotate
from .rules import ScoringRules
from .core import Action, GameConfig, GameSession, Phase, Snapshot, Status
from .scheduler import DropScheduler
from .controller import GameController

__all__ = [
    "GameGrid",
    "clear_lines",
    "collides",
    "CATALOG",
    "ActivePiece",
    "PieceDefinition",
    "PieceFactory",
    "TetrominoType",
    "color_for",
    "rotate",
    "ScoringRules",
    "Action",
    "GameConfig",
    "GameSession",
    "Phase",
    "Snapshot",
    "Status",
    "DropScheduler",
    "GameController",
]
