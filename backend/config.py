import os

class Config:
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '3001'))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()
    # Comma separated list, or '*' for any origin
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    # Round timing (milliseconds)
    QUESTION_DURATION_MS = int(os.environ.get('QUESTION_DURATION_MS', '10000'))
    ROUND_PAUSE_MS = int(os.environ.get('ROUND_PAUSE_MS', '2000'))
    LEAD_IN_MS = int(os.environ.get('LEAD_IN_MS', '1000'))
    # Rope physics
    MAX_FORCE = float(os.environ.get('MAX_FORCE', '15'))
    MAX_ROPE = float(os.environ.get('MAX_ROPE', '100'))
    # Matchmaking (seconds)
    AI_FALLBACK_SEC = float(os.environ.get('AI_FALLBACK_SEC', '5'))
    MATCHMAKER_TICK_SEC = float(os.environ.get('MATCHMAKER_TICK_SEC', '1'))
    # Synthetic opponent
    AI_SKILL_LEVEL = float(os.environ.get('AI_SKILL_LEVEL', '0.7'))
    AI_MIN_DELAY_MS = int(os.environ.get('AI_MIN_DELAY_MS', '1000'))
    AI_MAX_DELAY_MS = int(os.environ.get('AI_MAX_DELAY_MS', '4000'))
