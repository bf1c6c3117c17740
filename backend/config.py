import os


def _optional_int(name):
    raw = os.environ.get(name)
    return int(raw) if raw else None


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    CORS_ORIGINS = [
        origin.strip()
        for origin in os.environ.get(
            'CORS_ORIGINS',
            'http://localhost:5173,http://127.0.0.1:5173,http://localhost:5174,http://127.0.0.1:5174',
        ).split(',')
        if origin.strip()
    ]
    # Socket.IO namespace the game clients connect to
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/ws')
    # Variant used when a join or create request names none
    DEFAULT_VARIANT = os.environ.get('DEFAULT_VARIANT', 'classic')
    # Optional custom variant; registered as "custom" when BOARD_SIZE is set
    BOARD_SIZE = _optional_int('BOARD_SIZE')
    WIN_LENGTH = _optional_int('WIN_LENGTH')
    PLAYER_COUNT = _optional_int('PLAYER_COUNT')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
