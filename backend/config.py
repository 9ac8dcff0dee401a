import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///' + os.path.join(BASE_DIR, 'starcatcher.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Comma separated list of frontend origins allowed by CORS and Socket.IO
    CORS_ORIGINS = [
        o.strip() for o in os.environ.get(
            'CORS_ORIGINS',
            'http://localhost:5173,http://127.0.0.1:5173',
        ).split(',') if o.strip()
    ]
    # Push leaderboard_update over /ws after each write. 0 disables.
    LEADERBOARD_BROADCAST = int(os.environ.get('LEADERBOARD_BROADCAST', '1'))


class GameConfig:
    LEADERBOARD_URL = os.environ.get('LEADERBOARD_URL') or 'http://localhost:5001'
    # Seconds; 0 means no timeout on leaderboard calls
    LEADERBOARD_TIMEOUT_SEC = float(os.environ.get('LEADERBOARD_TIMEOUT_SEC', '0'))
    CANVAS_WIDTH = int(os.environ.get('CANVAS_WIDTH', '720'))
    CANVAS_HEIGHT = int(os.environ.get('CANVAS_HEIGHT', '420'))
    FPS = int(os.environ.get('FPS', '60'))
    # Leaderboard polling (seconds) during play and in the browsing view
    LIVE_POLL_SEC = float(os.environ.get('LIVE_POLL_SEC', '3'))
    BROWSE_POLL_SEC = float(os.environ.get('BROWSE_POLL_SEC', '4'))
    ASSETS_DIR = os.environ.get('ASSETS_DIR') or os.path.join(BASE_DIR, 'assets')
