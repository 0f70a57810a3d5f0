from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass
from typing import Dict, Optional

from ...engine.game import Game
from ..modes import Event, Mode, transition


@dataclass
class GameSession:
    """A game plus the interaction mode its client is in."""

    game: Game
    mode: Mode = Mode.GAMEPLAY

    def fire(self, event: Event) -> Mode:
        """Advance the mode on ``event`` (raises ModeError when not allowed)."""
        self.mode = transition(self.mode, event)
        return self.mode


class InMemorySessionStore:
    """Thread-safe in-memory game session store.

    Responsibilities:
    - Create new sessions with unique `game_id`s
    - Retrieve existing sessions by `game_id`
    - Delete sessions
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._sessions: Dict[str, GameSession] = {}

    def create(self, game: Optional[Game] = None) -> str:
        """Create a new game session and return its `game_id`."""
        gid = str(uuid.uuid4())
        if game is None:
            game = Game.new()
        with self._lock:
            self._sessions[gid] = GameSession(game=game)
        return gid

    def get(self, game_id: str) -> Optional[GameSession]:
        with self._lock:
            return self._sessions.get(game_id)

    def delete(self, game_id: str) -> None:
        with self._lock:
            if game_id in self._sessions:
                del self._sessions[game_id]

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
