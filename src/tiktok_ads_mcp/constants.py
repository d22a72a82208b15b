"""Constants and configuration defaults for the TikTok Business API."""

# API endpoints
API_BASE_URL = "https://business-api.tiktok.com/open_api/v1.3"
AUTH_PATH = "/oauth2/access_token/"

USER_AGENT = "TikTokAdsMCP/1.0 (Language=Python)"

# HTTP behaviour
REQUEST_TIMEOUT_SECONDS = 30
RATE_LIMIT_COOLDOWN_SECONDS = 5
MAX_RATE_LIMIT_RETRIES = 1
MAX_AUTH_RETRIES = 1

# Client-side admission control
DEFAULT_RATE_LIMIT = 10  # requests per window
DEFAULT_RATE_LIMIT_WINDOW_MS = 1000
MAX_ADMISSION_POLL_SECONDS = 1.0

# Pagination
DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 1000

MAX_NAME_LENGTH = 512

# Environment variables
ENV_ACCESS_TOKEN = "TIKTOK_ACCESS_TOKEN"
ENV_REFRESH_TOKEN = "TIKTOK_REFRESH_TOKEN"
ENV_APP_ID = "TIKTOK_APP_ID"
ENV_APP_SECRET = "TIKTOK_APP_SECRET"
ENV_ADVERTISER_ID = "TIKTOK_ADVERTISER_ID"
ENV_BC_ID = "TIKTOK_BC_ID"
ENV_BASE_URL = "TIKTOK_API_BASE_URL"
ENV_RATE_LIMIT = "TIKTOK_RATE_LIMIT"
ENV_RATE_LIMIT_WINDOW_MS = "TIKTOK_RATE_LIMIT_WINDOW_MS"
ENV_LOG_LEVEL = "TIKTOK_LOG_LEVEL"

# Ambient identifiers: argument name -> environment variable that supplies a default
AMBIENT_IDENTIFIERS = {
    "advertiser_id": ENV_ADVERTISER_ID,
    "bc_id": ENV_BC_ID,
}

# Enumerations accepted by the Marketing API
OBJECTIVE_TYPES = ["REACH", "TRAFFIC", "APP_INSTALL", "VIDEO_VIEW", "CONVERSIONS", "LEAD_GENERATION"]
BUDGET_MODES = ["BUDGET_MODE_DAY", "BUDGET_MODE_TOTAL"]
APP_PROMOTION_TYPES = ["APP_INSTALL", "APP_RETARGETING"]
OPERATION_STATUSES = ["ENABLE", "DISABLE", "DELETE"]
PLACEMENT_TYPES = ["PLACEMENT_TYPE_AUTOMATIC", "PLACEMENT_TYPE_MANUAL"]
SCHEDULE_TYPES = ["SCHEDULE_START_END", "SCHEDULE_FROM_NOW"]
AD_FORMATS = ["SINGLE_VIDEO", "SINGLE_IMAGE", "CAROUSEL", "SPARK_AD"]
CREATIVE_MATERIAL_MODES = ["CUSTOM", "DYNAMIC"]
VIDEO_UPLOAD_TYPES = ["UPLOAD_BY_FILE", "UPLOAD_BY_URL", "UPLOAD_BY_VIDEO_ID"]
IMAGE_UPLOAD_TYPES = ["UPLOAD_BY_FILE", "UPLOAD_BY_URL", "UPLOAD_BY_FILE_ID"]
REPORT_TYPES = ["BASIC", "AUDIENCE", "PLAYABLE_MATERIAL", "RESERVATION"]
DATA_LEVELS = ["AUCTION_ADVERTISER", "AUCTION_CAMPAIGN", "AUCTION_ADGROUP", "AUCTION_AD"]
PRIVACY_LEVELS = ["PUBLIC_TO_EVERYONE", "MUTUAL_FOLLOW_FRIEND", "SELF_ONLY"]
INTERACTION_SETTINGS = ["EVERYONE", "FRIENDS", "OFF"]
PRODUCT_AVAILABILITY = ["IN_STOCK", "OUT_OF_STOCK", "PREORDER", "AVAILABLE_FOR_ORDER", "DISCONTINUED"]

# Date formats
DATE_FORMAT = "%Y-%m-%d"
DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
