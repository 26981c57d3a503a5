"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from .enums import LeaveStatus

DEFAULT_SESSION_DAYS = 7
DEFAULT_LIST_LIMIT = 200
REVIEW_QUEUE_LIMIT = 500
MIN_PASSWORD_LENGTH = 6

# Leave statuses that count as "On Leave" on the attendance calendar.
ON_LEAVE_STATUSES = (LeaveStatus.APPROVED, LeaveStatus.DEPT_APPROVED)
