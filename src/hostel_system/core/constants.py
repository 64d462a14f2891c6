"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
MAX_COMPLAINT_IMAGES = 3
# Estimated completion dates are stored as end of working day.
COMPLETION_HOUR = 18
DEFAULT_BLOCK_DAYS = 7
DEFAULT_NEW_USER_PASSWORD = "password123"
MIN_RATING = 1
MAX_RATING = 5
