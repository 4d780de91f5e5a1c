"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

WORK_HOURS_PRECISION = 2

EMAIL_PATTERN = r"^\w+([.-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,3})+$"

DATE_FORMAT = "%Y-%m-%d"
CLOCK_FORMATS = ("%H:%M", "%H:%M:%S")
CLOCK_PATTERN = r"^\d{2}:\d{2}(:\d{2})?$"

# Widest value the unique generated columns in schema.sql can hold.
MAX_KEY_LENGTH = 255

API_NAME = "HRMS Lite API"
