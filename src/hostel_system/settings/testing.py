SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

SEED_MOCK_DATA = True
SESSION_DAYS = 7

MODERATION_BACKEND = "keyword"
MODERATION_URL = ""
MODERATION_API_KEY = ""
MODERATION_TIMEOUT = 5.0
MODERATION_FAIL_OPEN = False
