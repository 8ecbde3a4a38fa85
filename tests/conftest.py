from __future__ import annotations

import itertools
from typing import Iterable

import pytest

from falling_blocks.game import CATALOG, GameConfig, GameSession, PieceDefinition, TetrominoType


class ScriptedFactory:
    """Hands out pieces in a fixed, repeating order."""

    def __init__(self, kinds: Iterable[TetrominoType]) -> None:
        self._kinds = itertools.cycle(list(kinds))

    def next(self) -> PieceDefinition:
        return CATALOG[next(self._kinds)].copy()


class FakeClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_session():
    def _make(*kinds: TetrominoType, **config) -> GameSession:
        factory = ScriptedFactory(kinds or [TetrominoType.O])
        return GameSession(GameConfig(**config), factory=factory)

    return _make
