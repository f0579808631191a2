import os


def _origins(value):
    if not value or value.strip() == '*':
        return '*'
    return [o.strip() for o in value.split(',') if o.strip()]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Listening port for run.py
    PORT = int(os.environ.get('PORT', '3000'))
    CORS_ALLOWED_ORIGINS = _origins(os.environ.get('CORS_ALLOWED_ORIGINS', '*'))
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    # Scoreboard hold before an automatic round advance (seconds)
    ROUND_ADVANCE_DELAY_SEC = float(os.environ.get('ROUND_ADVANCE_DELAY_SEC', '3'))
    # None uses the built-in sentence corpus
    TYPING_SENTENCES = None
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
