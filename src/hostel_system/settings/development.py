import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Demo accounts and sample records are loaded into the in-memory store on startup
SEED_MOCK_DATA = bool(int(os.getenv("SEED_MOCK_DATA", "1")))

SESSION_DAYS = int(os.getenv("SESSION_DAYS", "7"))

# keyword | http
MODERATION_BACKEND = os.getenv("MODERATION_BACKEND", "keyword")
MODERATION_URL = os.getenv("MODERATION_URL", "")
MODERATION_API_KEY = os.getenv("MODERATION_API_KEY", "")
MODERATION_TIMEOUT = float(os.getenv("MODERATION_TIMEOUT", "30"))
MODERATION_FAIL_OPEN = bool(int(os.getenv("MODERATION_FAIL_OPEN", "0")))
