from flask import current_app, request

from tictactoe import socketio

# Single event carrying every protocol frame in both directions
FRAME_EVENT = 'frame'


def _dispatcher():
    return current_app.extensions['session_sync']


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _open_connection():
    sid = _get_sid()
    namespace = request.namespace  # type: ignore

    def send_frame(frame: str) -> None:
        socketio.emit(FRAME_EVENT, frame, to=sid, namespace=namespace)

    return _dispatcher().registry.open(sid, send_frame)


def handle_connect(auth=None):
    _open_connection()


def handle_disconnect(reason=None):
    dispatcher = _dispatcher()
    connection = dispatcher.registry.connection(_get_sid())
    if connection is not None:
        dispatcher.on_connection_closed(connection)


def handle_frame(*args):
    # a frame is exactly one payload; anything else decodes as malformed
    data = args[0] if len(args) == 1 else None
    dispatcher = _dispatcher()
    connection = dispatcher.registry.connection(_get_sid())
    if connection is None:
        connection = _open_connection()
    dispatcher.handle_inbound_message(connection, data)


def register_socketio_handlers(namespace: str = '/ws') -> None:
    """Register Socket.IO event handlers on the game namespace."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event(FRAME_EVENT, handle_frame, namespace=namespace)
