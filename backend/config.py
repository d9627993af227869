import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    PORT = int(os.environ.get('PORT', '3001'))
    # Comma separated list; '*' accepts any origin
    CORS_ALLOWED_ORIGINS = os.environ.get('CORS_ALLOWED_ORIGINS', '*')
    # Rooms are evicted by age, not by activity (seconds)
    ROOM_MAX_AGE_SEC = int(os.environ.get('ROOM_MAX_AGE_SEC', '1800'))
    ROOM_SWEEP_INTERVAL_SEC = int(os.environ.get('ROOM_SWEEP_INTERVAL_SEC', '300'))
    # Upper bound on code generation retries before giving up
    ROOM_CODE_MAX_ATTEMPTS = int(os.environ.get('ROOM_CODE_MAX_ATTEMPTS', '1000'))
