import os


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev")

    # CORS
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")

    # Reverse proxy / IP headers
    TRUST_PROXY_HEADERS = os.environ.get("TRUST_PROXY_HEADERS", "1") == "1"

    # Socket.IO ("" picks eventlet or threading depending on the platform)
    SOCKETIO_ASYNC_MODE = os.environ.get("SOCKETIO_ASYNC_MODE", "").strip()

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

    # Game
    MAX_PLAYERS = int(os.environ.get("MAX_PLAYERS", "6"))
    MIN_PLAYERS = int(os.environ.get("MIN_PLAYERS", "3"))
    CATCH_REWARD = int(os.environ.get("CATCH_REWARD", "100"))
    ESCAPE_REWARD = int(os.environ.get("ESCAPE_REWARD", "200"))
    ROOM_CODE_LENGTH = int(os.environ.get("ROOM_CODE_LENGTH", "6"))
    # "first_to_reach" or "first_seen" (legacy)
    TIE_BREAK = os.environ.get("TIE_BREAK", "first_to_reach")
    REJECT_UNKNOWN_VOTE_TARGETS = os.environ.get("REJECT_UNKNOWN_VOTE_TARGETS", "1") == "1"
