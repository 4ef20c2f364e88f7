"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_LATE_THRESHOLD_MINUTES = 6
DEFAULT_HALF_DAY_THRESHOLD_MINUTES = 240
DEFAULT_HALF_DAY_MAX_MINUTES = 270

DEFAULT_SHIFT_LABEL = "General"
DEFAULT_PAID_LEAVE_BALANCE = 12.0

DEFAULT_JWT_EXPIRES_MINUTES = 12 * 60
DEFAULT_HISTORY_LIMIT = 10
NOTIFICATION_FEED_LIMIT = 50
