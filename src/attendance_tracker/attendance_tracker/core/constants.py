"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

LATE_THRESHOLD = time(9, 30)
HALF_DAY_HOURS = 4

DEFAULT_TOKEN_DAYS = 7
MIN_PASSWORD_LENGTH = 6

MY_HISTORY_LIMIT = 100
TEAM_RECORDS_LIMIT = 500
RECENT_DAYS = 7

EMPLOYEE_CODE_PREFIX = {
    "employee": "EMP",
    "manager": "MGR",
}
