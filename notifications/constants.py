"""Constants used throughout the notification engine."""

# HTTP Headers
REQUEST_ID_HEADER = "X-Request-ID"

# OAuth2 scopes
USER_SCOPE = "notification:user"
ADMIN_SCOPE = "notification:admin"

# HH:MM wall-clock format used by quiet hours and digest time
TIME_OF_DAY_PATTERN = r"^([01][0-9]|2[0-3]):[0-5][0-9]$"

# Canonical notification field limits
TITLE_MAX_LENGTH = 200
MESSAGE_MAX_LENGTH = 1000

# Feed listing
DEFAULT_LIST_LIMIT = 50
MAX_LIST_LIMIT = 100

# Realtime topics and events
USER_TOPIC_TEMPLATE = "private-user-{user_id}"
NEW_NOTIFICATION_EVENT = "notification:new"

# Digest flush lease; a claimed window is retried once the lease expires
DIGEST_CLAIM_TIMEOUT_SECONDS = 300

# Dispatch warnings
WARNING_GLOBAL_DISABLED = "suppressed: global-disabled"
WARNING_CATEGORY_DISABLED = "suppressed: category-disabled"
WARNING_QUIET_HOURS = "suppressed: quiet-hours"
WARNING_DIGEST_DEFERRED = "deferred: digest"
WARNING_MISSING_CATEGORY = "integrity: missing-category"
WARNING_DUPLICATE = "duplicate: idempotency-key"
