from __future__ import annotations

import logging
from typing import Callable, List, Optional, Protocol

from .core import Action, GameConfig, GameSession, Snapshot
from .pieces import PieceFactory
from .rules import ScoringRules
from .scheduler import DropScheduler

logger = logging.getLogger(__name__)


class Leaderboard(Protocol):
    def top(self) -> list: ...

    def submit(self, name: str, score: int) -> list: ...


class GameController:
    """Owns the current session and its drop scheduler.

    Hosts feed it input commands and call `update()` every frame; `reset()`
    throws the session away and starts a fresh one.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        leaderboard: Optional[Leaderboard] = None,
        factory_builder: Optional[Callable[[GameConfig], PieceFactory]] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.leaderboard = leaderboard
        self.factory_builder = factory_builder
        self.scheduler = DropScheduler(self.config.initial_drop_interval_ms, clock=clock)
        self.leaderboard_entries: List = []
        self.score_submitted = False
        self.save_error: Optional[str] = None
        self.session: GameSession
        self.reset()

    def reset(self, now_ms: Optional[float] = None) -> None:
        self.scheduler.stop()
        factory = self.factory_builder(self.config) if self.factory_builder else None
        self.session = GameSession(self.config, self.rules, factory)
        self.score_submitted = False
        self.save_error = None
        if self.leaderboard is not None:
            self.leaderboard_entries = list(self.leaderboard.top())
        if self.session.running:
            self.scheduler.start(now_ms)
        logger.debug("New session started")

    @property
    def final_score(self) -> Optional[int]:
        """Score to offer for saving, once the session is over."""
        return self.session.score if self.session.game_over else None

    def handle(self, action: Action) -> int:
        lines = self.session.step(action)
        self._check_over()
        return lines

    def update(self, now_ms: Optional[float] = None) -> bool:
        """Run a gravity step if one is due. Returns True if it fired."""
        if not self.session.running:
            return False
        if not self.scheduler.poll(now_ms):
            return False
        self.session.drop_step()
        self._check_over()
        return True

    def pause(self, now_ms: Optional[float] = None) -> None:
        self.scheduler.pause(now_ms)

    def resume(self, now_ms: Optional[float] = None) -> None:
        if self.session.running:
            self.scheduler.resume(now_ms)

    def _check_over(self) -> None:
        if self.session.game_over:
            self.scheduler.stop()

    def submit_score(self, name: str) -> List:
        if not self.session.game_over:
            raise RuntimeError("Cannot submit a score while the game is running")
        if self.leaderboard is None:
            raise RuntimeError("No leaderboard configured")
        if self.score_submitted:
            return self.leaderboard_entries
        try:
            entries = self.leaderboard.submit(name, self.session.score)
        except OSError as e:
            # Leave the submission open so the player can retry or skip
            logger.error("Could not save score %d: %s", self.session.score, e)
            self.save_error = str(e)
            return self.leaderboard_entries
        self.leaderboard_entries = list(entries)
        self.score_submitted = True
        self.save_error = None
        return self.leaderboard_entries

    def skip_submission(self) -> None:
        if self.session.game_over:
            self.score_submitted = True

    def snapshot(self) -> Snapshot:
        return self.session.snapshot()
