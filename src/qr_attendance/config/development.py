import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
JWT_SECRET = os.getenv("JWT_SECRET", "dev-jwt-secret")
JWT_EXPIRY_HOURS = int(os.getenv("JWT_EXPIRY_HOURS", "12"))

# "sheets" talks to Google Sheets; "memory" keeps rows in-process (lost on restart)
STORE_BACKEND = os.getenv("STORE_BACKEND", "sheets")

GOOGLE_SPREADSHEET_ID = os.getenv("GOOGLE_SPREADSHEET_ID", "")
GOOGLE_SERVICE_ACCOUNT_EMAIL = os.getenv("GOOGLE_SERVICE_ACCOUNT_EMAIL", "")
GOOGLE_SERVICE_ACCOUNT_KEY = os.getenv("GOOGLE_SERVICE_ACCOUNT_KEY", "")
GOOGLE_ATTENDANCE_SHEET = os.getenv("GOOGLE_ATTENDANCE_SHEET", "Attendance")
GOOGLE_TEACHERS_SHEET = os.getenv("GOOGLE_TEACHERS_SHEET", "Teachers")

QR_FORMAT = os.getenv("QR_FORMAT", "pipe")
QR_JSON_PREFIX = os.getenv("QR_JSON_PREFIX", "QR_ATTENDANCE")

OPTIMISTIC_WRITES = bool(int(os.getenv("OPTIMISTIC_WRITES", "0")))
SCAN_DEBOUNCE_SECONDS = float(os.getenv("SCAN_DEBOUNCE_SECONDS", "1.0"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
DEBUG = True
