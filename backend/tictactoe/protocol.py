"""Client message protocol.

Inbound frames are JSON objects tagged by ``kind``::

    {"kind": "join", "sessionId": 3}          # sessionId optional, "variant" optional
    {"kind": "move", "sessionId": 3, "cellIndex": 4}
    {"kind": "new-game", "sessionId": 3}
    {"kind": "reset-scores", "sessionId": 3}
    {"kind": "ping"}

Outbound frames always carry the protocol version ``v``::

    {"v": 1, "kind": "state", "session": {...snapshot...}}
    {"v": 1, "kind": "error", "reason": "CellOccupied", "message": "..."}
    {"v": 1, "kind": "ack"}
"""

import json
import logging
from collections.abc import Mapping
from typing import Any, Callable, Dict, Optional

from tictactoe.errors import (
    MalformedMessage,
    NotFoundError,
    SessionNotFound,
    SessionSyncError,
    UnknownMessageKind,
    ValidationError,
)
from tictactoe.models import GameSession
from tictactoe.services.connections import Connection, ConnectionRegistry
from tictactoe.services.games.store import SessionStore

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = 1


def decode_message(raw) -> Dict[str, Any]:
    """Turn a raw frame into a message dict with a string ``kind``."""
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode('utf-8')
        except UnicodeDecodeError as exc:
            raise MalformedMessage('Frame is not valid UTF-8') from exc
    if isinstance(raw, str):
        try:
            data = json.loads(raw)
        except (ValueError, RecursionError) as exc:
            raise MalformedMessage('Frame is not valid JSON') from exc
    elif isinstance(raw, Mapping):
        data = dict(raw)
    else:
        raise MalformedMessage('Frame must be a JSON object')
    if not isinstance(data, dict):
        raise MalformedMessage('Frame must be a JSON object')
    kind = data.get('kind')
    if not isinstance(kind, str) or not kind:
        raise MalformedMessage('kind is required')
    return data


def require_int(message: Dict[str, Any], field: str) -> int:
    value = message.get(field)
    if value is None:
        raise MalformedMessage(f'{field} is required')
    # bool is an int subclass but never a valid id or index
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedMessage(f'{field} must be an integer')
    return value


def _encode(kind: str, **fields) -> str:
    return json.dumps({'v': PROTOCOL_VERSION, 'kind': kind, **fields}, ensure_ascii=False)


def encode_state(snapshot: Dict[str, Any]) -> str:
    return _encode('state', session=snapshot)


def encode_error(error: SessionSyncError) -> str:
    return _encode('error', reason=error.reason, message=error.message)


def encode_ack() -> str:
    return _encode('ack')


class Dispatcher:
    """Routes decoded client messages to the session store and registry."""

    def __init__(self, store: SessionStore, registry: ConnectionRegistry):
        self.store = store
        self.registry = registry
        self._handlers: Dict[str, Callable[[Connection, Dict[str, Any]], None]] = {
            'join': self._join,
            'subscribe': self._join,
            'move': self._move,
            'new-game': self._new_game,
            'reset-scores': self._reset_scores,
            'ping': self._ping,
        }

    def handle_inbound_message(self, connection: Connection, raw) -> None:
        """Entry point for every frame the transport receives."""
        try:
            message = decode_message(raw)
            handler = self._handlers.get(message['kind'])
            if handler is None:
                raise UnknownMessageKind(message['kind'])
            handler(connection, message)
        except (ValidationError, NotFoundError) as exc:
            logger.info(f"[rejected] connection={connection.id} reason={exc.reason} detail={exc.message}")
            self.registry.send(connection, encode_error(exc))

    def on_connection_closed(self, connection: Connection) -> None:
        self.registry.close(connection)

    def get_session_snapshot(self, session_id: int) -> Optional[Dict[str, Any]]:
        return self.store.snapshot(session_id)

    def _join(self, connection, message):
        if message.get('sessionId') is None:
            variant = message.get('variant')
            if variant is not None and (not isinstance(variant, str) or variant not in self.store.variants):
                raise MalformedMessage(f'Unknown variant {variant!r}')
            session_id = self.store.create(variant).id
        else:
            session_id = require_int(message, 'sessionId')
        # Subscribing under the session lock keeps the initial state ordered
        # before any broadcast that follows it.
        with self.store.locked(session_id):
            session = self.store.get(session_id)
            if session is None:
                raise SessionNotFound(session_id)
            self.registry.subscribe(connection, session_id)
            self.registry.send(connection, encode_state(session.to_dict()))

    def _move(self, connection, message):
        session_id = require_int(message, 'sessionId')
        cell_index = require_int(message, 'cellIndex')

        def apply(session: GameSession):
            player = session.current_player_index
            snapshot = session.apply_move(cell_index)
            logger.info(f"[move] session={session_id} cell={cell_index} player={player}")
            return snapshot

        self._transition(connection, session_id, apply)

    def _new_game(self, connection, message):
        session_id = require_int(message, 'sessionId')
        self._transition(connection, session_id, GameSession.reset)
        logger.info(f"[new-game] session={session_id}")

    def _reset_scores(self, connection, message):
        session_id = require_int(message, 'sessionId')
        self._transition(connection, session_id, GameSession.reset_scores)
        logger.info(f"[reset-scores] session={session_id}")

    def _ping(self, connection, message):
        self.registry.send(connection, encode_ack())

    def _transition(self, connection, session_id, action):
        """Run get -> action -> replace -> broadcast as one critical section."""
        with self.store.locked(session_id):
            session = self.store.get(session_id)
            if session is None:
                raise SessionNotFound(session_id)
            snapshot = action(session)
            if self.store.replace(session_id, session) is None:
                raise SessionNotFound(session_id)
            frame = encode_state(snapshot)
            self.registry.broadcast(session_id, frame)
            # The sender always learns the outcome, even when it follows another session
            if connection.session_id != session_id:
                self.registry.send(connection, frame)
