import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from tictactoe.errors import TransportError

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Connection:
    """A live transport endpoint.

    ``send_frame`` is supplied by the transport layer and writes one encoded
    frame. ``session_id`` is changed only by the registry.
    """

    id: str
    send_frame: Callable[[str], None]
    session_id: Optional[int] = None
    open: bool = True

    def send(self, frame: str) -> bool:
        """Write a frame; False when the connection is already closed."""
        if not self.open:
            return False
        try:
            self.send_frame(frame)
        except Exception as exc:
            if isinstance(exc, TransportError):
                raise
            raise TransportError(f"write to connection {self.id} failed: {exc}") from exc
        return True


class ConnectionRegistry:
    """Tracks live connections and which session each one follows."""

    def __init__(self):
        self._connections: Dict[str, Connection] = {}
        self._subscribers: Dict[int, Dict[str, Connection]] = {}
        self._lock = threading.Lock()

    def open(self, connection_id: str, send_frame: Callable[[str], None]) -> Connection:
        connection = Connection(id=connection_id, send_frame=send_frame)
        with self._lock:
            previous = self._connections.get(connection_id)
            if previous is not None:
                self._detach(previous)
                previous.open = False
            self._connections[connection_id] = connection
        return connection

    def connection(self, connection_id: str) -> Optional[Connection]:
        with self._lock:
            return self._connections.get(connection_id)

    def subscribe(self, connection: Connection, session_id: int) -> None:
        with self._lock:
            if connection.session_id == session_id and connection.id in self._subscribers.get(session_id, {}):
                return
            self._detach(connection)
            self._subscribers.setdefault(session_id, {})[connection.id] = connection
            connection.session_id = session_id
        logger.info(f"[subscribe] connection={connection.id} session={session_id}")

    def unsubscribe(self, connection: Connection) -> Optional[int]:
        """Drop the connection's subscription, returning the session it left."""
        with self._lock:
            return self._detach(connection)

    def close(self, connection: Connection) -> Optional[int]:
        with self._lock:
            session_id = self._detach(connection)
            connection.open = False
            if self._connections.get(connection.id) is connection:
                del self._connections[connection.id]
        logger.info(f"[connection-closed] connection={connection.id} session={session_id}")
        return session_id

    def subscribers(self, session_id: int) -> List[Connection]:
        with self._lock:
            return list(self._subscribers.get(session_id, {}).values())

    def send(self, connection: Connection, frame: str) -> bool:
        """Unicast to one connection; write failures are logged and skipped."""
        try:
            return connection.send(frame)
        except TransportError as exc:
            logger.warning(f"[send-skip] connection={connection.id} error={exc}")
            return False

    def broadcast(self, session_id: int, frame: str) -> int:
        """Deliver a frame to every subscriber of a session; returns deliveries."""
        delivered = 0
        for connection in self.subscribers(session_id):
            if self.send(connection, frame):
                delivered += 1
            else:
                logger.info(f"[broadcast-skip] connection={connection.id} session={session_id}")
        return delivered

    def _detach(self, connection: Connection) -> Optional[int]:
        session_id = connection.session_id
        if session_id is None:
            return None
        members = self._subscribers.get(session_id)
        if members is not None and members.get(connection.id) is connection:
            del members[connection.id]
            if not members:
                del self._subscribers[session_id]
        connection.session_id = None
        return session_id
