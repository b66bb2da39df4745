"""Constants for the LAMP portal client."""

# Configuration
CONF_BASE_URL = "base_url"
CONF_TIMEOUT = "timeout"
CONF_TIMEZONE = "timezone"
CONF_NOTIFICATION_PAGE_SIZE = "notification_page_size"
CONF_TOKEN_EXPIRY_BUFFER = "token_expiry_buffer"

ENV_BASE_URL = "LAMP_BASE_URL"
ENV_TIMEOUT = "LAMP_TIMEOUT"
ENV_TIMEZONE = "LAMP_TIMEZONE"
ENV_NOTIFICATION_PAGE_SIZE = "LAMP_NOTIFICATION_PAGE_SIZE"

# Default values
DEFAULT_BASE_URL = "http://localhost/testapilamp/student/lamp.php"
DEFAULT_TIMEOUT = 30  # seconds
DEFAULT_TIMEZONE = "Asia/Manila"
DEFAULT_NOTIFICATION_PAGE_SIZE = 50
TOKEN_EXPIRY_BUFFER_SECONDS = 300  # treat tokens as expired 5 minutes early

# Response envelope
REM_SUCCESS = "success"
REM_FAILED = "failed"
NO_RECORDS_MARKER = "no records"

# Activity statuses
STATUS_NOT_STARTED = "not_started"
STATUS_MISSING = "missing"
STATUS_COMPLETED = "completed"
STATUS_LATE = "late"
ACTIVITY_STATUSES = (STATUS_NOT_STARTED, STATUS_MISSING, STATUS_COMPLETED, STATUS_LATE)

# Notification types
NOTIFICATION_POST = "post"
NOTIFICATION_ACTIVITY = "activity"
NOTIFICATION_RESOURCE = "resource"
NOTIFICATION_TYPES = (NOTIFICATION_POST, NOTIFICATION_ACTIVITY, NOTIFICATION_RESOURCE)

# Identifier fields, in precedence order
ACTIVITY_KEY_FIELDS = ("recno_fld", "actcode_fld")
SUBMISSION_KEY_FIELDS = ("actrecno_fld", "actcode_fld")

# Course colours, assigned by class position
COURSE_COLORS = (
	"#3b82f6", "#ec4899", "#8b5cf6", "#f59e0b", "#10b981",
	"#f97316", "#06b6d4", "#a855f7", "#ef4444", "#84cc16",
)

# Grouping
REFERENCE_YEAR = 2025  # due-date labels carry only month and day
NO_DUE_DATE_LABEL = "No due date"
MONTH_NAMES = (
	"January", "February", "March", "April", "May", "June",
	"July", "August", "September", "October", "November", "December",
)
DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

# User-facing messages
MSG_SERVICE_UNAVAILABLE = "Service temporarily unavailable. Please try again later."
MSG_CONNECTION = "Network error. Please check your connection."
MSG_TIMEOUT = "Request timeout. Please try again."
MSG_LOGIN_REQUIRED = "Please login to continue."
MSG_SESSION_EXPIRED = "Session expired. Please login again."
MSG_UNEXPECTED = "An unexpected error occurred. Please try again."
MSG_NO_CLASSES = "No classes found for this academic year and semester"
MSG_SETTINGS_UNAVAILABLE = "Academic year or semester not found"
MSG_SUBMISSIONS_UNAVAILABLE = "Could not load your submissions. Please try again."
MSG_PARTIAL_CLASSES = "Some classes could not be loaded: {classes}. Pull to retry."
