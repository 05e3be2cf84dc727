"""Constants and defaults.

Note: Keep constants here to avoid magic values spread across code.
"""

# Sentinel stored in both student columns of a session's meta row.
META_FLAG = "__meta__"

ATTENDANCE_HEADERS = [
    "record_id",
    "teacher_id",
    "class_name",
    "session_name",
    "student_id",
    "student_name",
    "timestamp",
]

TEACHER_HEADERS = [
    "teacher_id",
    "name",
    "email",
    "password_hash",
    "role",
]

DEFAULT_ATTENDANCE_SHEET = "Attendance"
DEFAULT_TEACHERS_SHEET = "Teachers"

QR_SEPARATOR = "|"
DEFAULT_QR_JSON_PREFIX = "QR_ATTENDANCE"

UNGROUPED_CLASS = "Ungrouped"

DEFAULT_JWT_EXPIRY_HOURS = 12
DEFAULT_SCAN_DEBOUNCE_SECONDS = 1.0
MIN_PASSWORD_LENGTH = 6
