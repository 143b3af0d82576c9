"""Domain constants for networking sessions."""

DEFAULT_ROTATION_SECONDS = 120
MIN_ROTATION_SECONDS = 60
MAX_ROTATION_SECONDS = 600

DEFAULT_SESSION_LENGTH_MINUTES = 30
DEFAULT_WAITLIST_LIMIT = 30
MIN_JOIN_LIMIT = 2

SLUG_MAX_LENGTH = 80
DEFAULT_SLUG_FALLBACK = "networking-session"

DEFAULT_NO_SHOW_THRESHOLD = 2
DEFAULT_COOLDOWN_DAYS = 14
DEFAULT_PENALTY_WEIGHT = 1

DEFAULT_LOOKBACK_DAYS = 180
SESSION_LIST_LIMIT = 200
BUSINESS_CARD_LIST_LIMIT = 100

MAX_SATISFACTION_SCORE = 5
