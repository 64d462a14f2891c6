import os

SECRET_KEY = os.environ["SECRET_KEY"]

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

SEED_MOCK_DATA = bool(int(os.getenv("SEED_MOCK_DATA", "0")))
SESSION_DAYS = int(os.getenv("SESSION_DAYS", "7"))

MODERATION_BACKEND = os.getenv("MODERATION_BACKEND", "http")
MODERATION_URL = os.getenv("MODERATION_URL", "")
MODERATION_API_KEY = os.getenv("MODERATION_API_KEY", "")
MODERATION_TIMEOUT = float(os.getenv("MODERATION_TIMEOUT", "30"))
MODERATION_FAIL_OPEN = bool(int(os.getenv("MODERATION_FAIL_OPEN", "0")))
