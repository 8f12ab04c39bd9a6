from dotenv import load_dotenv

load_dotenv()

try:
    from backend.shadowsignal.server import create_app
except ImportError:  # pragma: no cover
    from shadowsignal.server import create_app

app, socketio = create_app()
