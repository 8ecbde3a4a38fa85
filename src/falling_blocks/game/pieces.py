from __future__ import annotations

import random
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Optional

import numpy as np


class TetrominoType(IntEnum):
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7


Shape = np.ndarray


def rotate(shape: Shape) -> Shape:
    """Rotate a shape 90 degrees clockwise.

    out[i, j] == shape[rows - 1 - j, i]; a (rows x cols) matrix becomes
    (cols x rows). Always returns a fresh array.
    """
    return np.rot90(shape, 1, axes=(1, 0)).copy()


def _frozen(rows) -> Shape:
    arr = np.array(rows, dtype=np.int8)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class PieceDefinition:
    kind: TetrominoType
    shape: Shape
    color: str

    @property
    def width(self) -> int:
        return int(self.shape.shape[1])

    def copy(self) -> "PieceDefinition":
        return PieceDefinition(self.kind, self.shape.copy(), self.color)


CATALOG: Dict[TetrominoType, PieceDefinition] = {
    TetrominoType.I: PieceDefinition(TetrominoType.I, _frozen([[1, 1, 1, 1]]), "#00f5ff"),
    TetrominoType.O: PieceDefinition(TetrominoType.O, _frozen([[1, 1], [1, 1]]), "#ffff00"),
    TetrominoType.T: PieceDefinition(TetrominoType.T, _frozen([[0, 1, 0], [1, 1, 1]]), "#8000ff"),
    TetrominoType.S: PieceDefinition(TetrominoType.S, _frozen([[0, 1, 1], [1, 1, 0]]), "#ff0000"),
    TetrominoType.Z: PieceDefinition(TetrominoType.Z, _frozen([[1, 1, 0], [0, 1, 1]]), "#00ff00"),
    TetrominoType.J: PieceDefinition(TetrominoType.J, _frozen([[1, 0, 0], [1, 1, 1]]), "#ff8000"),
    TetrominoType.L: PieceDefinition(TetrominoType.L, _frozen([[0, 0, 1], [1, 1, 1]]), "#0000ff"),
}


def color_for(kind: int) -> Optional[str]:
    """Display colour for a grid cell value, None for empty cells."""
    if kind == 0:
        return None
    return CATALOG[TetrominoType(abs(int(kind)))].color


class PieceFactory:
    """Draws pieces uniformly at random from the catalog."""

    def __init__(self, rng: Optional[random.Random] = None, seed: Optional[int] = None) -> None:
        self.rng = rng or random.Random(seed)

    def next(self) -> PieceDefinition:
        kind = self.rng.choice(list(TetrominoType))
        return CATALOG[kind].copy()


@dataclass(eq=False)
class ActivePiece:
    kind: TetrominoType
    shape: Shape
    color: str
    x: int
    y: int

    @classmethod
    def from_definition(cls, definition: PieceDefinition, x: int, y: int) -> "ActivePiece":
        return cls(definition.kind, definition.shape, definition.color, x, y)

    @property
    def width(self) -> int:
        return int(self.shape.shape[1])

    def copy(self) -> "ActivePiece":
        return ActivePiece(self.kind, self.shape.copy(), self.color, self.x, self.y)
