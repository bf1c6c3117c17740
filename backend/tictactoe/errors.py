from enum import Enum


class RejectReason(str, Enum):
    GAME_NOT_ACTIVE = 'GameNotActive'
    INDEX_OUT_OF_RANGE = 'IndexOutOfRange'
    CELL_OCCUPIED = 'CellOccupied'


class SessionSyncError(Exception):
    """Base for every failure raised by the session synchronization core.

    ``reason`` is the wire code sent back in an ``error`` frame.
    """

    reason = 'Error'

    def __init__(self, message: str = '', *args: object) -> None:
        self.message = message or self.reason
        super().__init__(self.message, *args)

    def __str__(self) -> str:
        return self.message


class ValidationError(SessionSyncError):
    reason = 'ValidationError'


class MoveRejected(ValidationError):
    """Raised when a move is illegal for the current session state."""

    def __init__(self, reason: RejectReason, message: str = '', *args: object) -> None:
        self.reject_reason = RejectReason(reason)
        self.reason = self.reject_reason.value
        super().__init__(message or self.reason, *args)


class MalformedMessage(ValidationError):
    reason = 'MalformedMessage'


class UnknownMessageKind(ValidationError):
    reason = 'UnknownMessageKind'

    def __init__(self, kind, *args: object) -> None:
        self.kind = kind
        super().__init__(f"Unknown message kind {kind!r}", *args)


class NotFoundError(SessionSyncError):
    reason = 'NotFound'


class SessionNotFound(NotFoundError):
    reason = 'SessionNotFound'

    def __init__(self, session_id, *args: object) -> None:
        self.session_id = session_id
        super().__init__(f"Session with id {session_id} not found", *args)


class TransportError(SessionSyncError):
    """Raised when a frame cannot be written to one connection."""

    reason = 'TransportError'
