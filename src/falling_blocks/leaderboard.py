"""Leaderboard collaborators.

Both stores keep the best `capacity` scores (10 by default) sorted by score,
highest first; ties keep submission order.
"""

from __future__ import annotations

import json
import logging
import os
import time
from dataclasses import asdict, dataclass, field
from typing import List, Optional

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 10


@dataclass
class LeaderboardEntry:
    name: str
    score: int
    timestamp: float = field(default_factory=time.time)


class InMemoryLeaderboard:
    def __init__(self, capacity: int = DEFAULT_CAPACITY, entries: Optional[List[LeaderboardEntry]] = None) -> None:
        self.capacity = int(capacity)
        self._entries: List[LeaderboardEntry] = self._ranked(entries or [])

    def _ranked(self, entries: List[LeaderboardEntry]) -> List[LeaderboardEntry]:
        return sorted(entries, key=lambda e: e.score, reverse=True)[: self.capacity]

    def top(self) -> List[LeaderboardEntry]:
        return list(self._entries)

    def submit(self, name: str, score: int) -> List[LeaderboardEntry]:
        name = name.strip()
        if not name:
            raise ValueError("Player name must not be empty")
        if score < 0:
            raise ValueError(f"score must be non-negative, got {score}")
        ranked = self._ranked(self._current() + [LeaderboardEntry(name, int(score))])
        # Only adopt the new list once it has been saved
        self._persist(ranked)
        self._entries = ranked
        logger.info("Recorded score %d for %s", score, name)
        return self.top()

    def _current(self) -> List[LeaderboardEntry]:
        return list(self._entries)

    def _persist(self, entries: List[LeaderboardEntry]) -> None:
        pass


class JsonFileLeaderboard(InMemoryLeaderboard):
    """Leaderboard persisted as a JSON list of {name, score, timestamp}."""

    def __init__(self, path: str, capacity: int = DEFAULT_CAPACITY) -> None:
        self.path = path
        super().__init__(capacity, self._load())

    def _load(self) -> List[LeaderboardEntry]:
        if not os.path.exists(self.path):
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                raw = json.load(fh)
            return [LeaderboardEntry(str(r["name"]), int(r["score"]), float(r.get("timestamp", 0.0))) for r in raw]
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("Ignoring unreadable leaderboard file %s: %s", self.path, e)
            return []

    def top(self) -> List[LeaderboardEntry]:
        # Re-read so another process' submissions show up on reset
        self._entries = self._ranked(self._load())
        return super().top()

    def _current(self) -> List[LeaderboardEntry]:
        # Merge with whatever other processes have saved since the last read
        return self._load()

    def _persist(self, entries: List[LeaderboardEntry]) -> None:
        try:
            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as fh:
                json.dump([asdict(e) for e in entries], fh, indent=2)
        except OSError as e:
            logger.error("Failed to save leaderboard to %s: %s", self.path, e)
            raise
