import os


def _flag(name, default='0'):
    return os.environ.get(name, default).lower() in ('1', 'true', 'yes', 'on')


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///cleaning_party.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', 'http://localhost:5173,http://127.0.0.1:5173').split(',')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    # Session store backend: 'sql' (game_record table) or 'memory' (process-local)
    SESSION_STORE = os.environ.get('SESSION_STORE', 'sql')
    # 'last_write_wins' or 'compare_and_swap'
    SESSION_CONSISTENCY = os.environ.get('SESSION_CONSISTENCY', 'last_write_wins')
    CAS_MAX_RETRIES = int(os.environ.get('CAS_MAX_RETRIES', '3'))
    # Round length (ms); 20 minutes
    ROUND_DURATION_MS = int(os.environ.get('ROUND_DURATION_MS', str(20 * 60 * 1000)))
    SILLY_TASK_COUNT = int(os.environ.get('SILLY_TASK_COUNT', '4'))
    # Optional rule hardening. All off by default to keep the original behavior.
    CLEAR_STALE_PARTNERS = _flag('CLEAR_STALE_PARTNERS')
    VALIDATE_PARTNER_FROM_CATALOG = _flag('VALIDATE_PARTNER_FROM_CATALOG')
    REJECT_EXPIRED_COMPLETIONS = _flag('REJECT_EXPIRED_COMPLETIONS')
    RECORD_END_TIME = _flag('RECORD_END_TIME')
