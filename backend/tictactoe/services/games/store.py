"""In-process store of authoritative game sessions.

The id -> session map is guarded by a short-lived store lock. Every session
also owns a lock of its own; callers hold it through ``locked()`` for the
whole read-modify-write-broadcast sequence of one transition, so moves on one
session are serialized while different sessions proceed in parallel.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from tictactoe.errors import SessionNotFound
from tictactoe.models import GameSession
from .variants import GameVariant

logger = logging.getLogger(__name__)


class SessionStore:
    def __init__(self, variants: Dict[str, GameVariant], default_variant: str):
        if default_variant not in variants:
            raise ValueError(f"unknown default variant {default_variant!r}")
        self.variants = dict(variants)
        self.default_variant = default_variant
        self._sessions: Dict[int, GameSession] = {}
        self._session_locks: Dict[int, threading.Lock] = {}
        self._lock = threading.Lock()
        self._next_id = 1

    def variant(self, name: Optional[str] = None) -> GameVariant:
        """Look up a variant by name; KeyError when it is not configured."""
        return self.variants[name or self.default_variant]

    def create(self, variant: Optional[str] = None) -> GameSession:
        game_variant = self.variant(variant)
        with self._lock:
            session_id = self._next_id
            self._next_id += 1
            session = GameSession.new(session_id, game_variant)
            self._sessions[session_id] = session
            self._session_locks[session_id] = threading.Lock()
        logger.info(f"[session-create] session={session_id} variant={game_variant.name}")
        return session.copy()

    def get(self, session_id: int) -> Optional[GameSession]:
        """Return a private copy of the session, or None for an unknown id."""
        with self._lock:
            session = self._sessions.get(session_id)
            return session.copy() if session else None

    def replace(self, session_id: int, session: GameSession) -> Optional[GameSession]:
        """Persist the result of a transition; None when the id is unknown."""
        with self._lock:
            if session_id not in self._sessions:
                logger.info(f"[session-replace-skip] session={session_id} unknown")
                return None
            self._sessions[session_id] = session.copy()
        return session

    @contextmanager
    def locked(self, session_id: int) -> Iterator[None]:
        """Hold the per-session lock; raises SessionNotFound for unknown ids."""
        with self._lock:
            session_lock = self._session_locks.get(session_id)
        if session_lock is None:
            raise SessionNotFound(session_id)
        with session_lock:
            yield

    def snapshot(self, session_id: int) -> Optional[dict]:
        session = self.get(session_id)
        return session.to_dict() if session else None

    def ids(self) -> List[int]:
        with self._lock:
            return sorted(self._sessions)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
