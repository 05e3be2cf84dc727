SECRET_KEY = "test-secret"
JWT_SECRET = "test-jwt-secret-0123456789abcdef0123"
JWT_EXPIRY_HOURS = 1

STORE_BACKEND = "memory"

GOOGLE_SPREADSHEET_ID = ""
GOOGLE_SERVICE_ACCOUNT_EMAIL = ""
GOOGLE_SERVICE_ACCOUNT_KEY = ""
GOOGLE_ATTENDANCE_SHEET = "Attendance"
GOOGLE_TEACHERS_SHEET = "Teachers"

QR_FORMAT = "pipe"
QR_JSON_PREFIX = "QR_ATTENDANCE"

OPTIMISTIC_WRITES = False
SCAN_DEBOUNCE_SECONDS = 1.0

LOG_LEVEL = "WARNING"
DEBUG = False
TESTING = True
