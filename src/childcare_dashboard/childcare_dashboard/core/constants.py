"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Returned by the time parser for missing or malformed values.
INVALID_TIME = -1

# Window used when a day is planned and the weekly schedule has no entry for it.
DEFAULT_PLANNED_START = "09:00"
DEFAULT_PLANNED_END = "17:00"

# New weekly schedule entries start on Monday (0 = Sunday).
DEFAULT_REGULAR_DAY_OF_WEEK = 1
DEFAULT_REGULAR_START = "08:00"
DEFAULT_REGULAR_END = "17:00"

# Older rows used these values in TIME columns to mean "not departed yet".
LEGACY_UNSET_TIMES = ("", "00:00:00")

# Clock-driven check-outs in the minute after midnight are stored as this time.
MIDNIGHT_DEPARTURE = "00:01"

PHOTOS_PREFIX = "photos"
PHOTOS_FOLDER = "public"
ALLOWED_PHOTO_EXTENSIONS = ("jpg", "jpeg", "png", "gif", "webp")

DEFAULT_MESSAGE_LIMIT = 20
DEFAULT_FEED_LIMIT = 20

# Activities have no time of their own in the daily record; the feed shows them mid-morning.
FEED_ACTIVITIES_TIME = "10:00"

UNKNOWN_CHILD_NAME = "Unknown child"
GLOBAL_PLANNING_UNKNOWN_NAME = "N/A"
