EXCHANGE_NAME = "kraken"

# Base urls
REST_URL = "https://api.kraken.com"

# Every REST path is served, and signed, under this version segment
API_VERSION_PATH = "/0"

# Public Kraken API endpoints
SERVER_TIME_PATH_URL = "/public/Time"
SYSTEM_STATUS_PATH_URL = "/public/SystemStatus"
ASSET_PAIRS_PATH_URL = "/public/AssetPairs"

# Private Kraken API endpoints
OPEN_ORDERS_PATH_URL = "/private/OpenOrders"

# Paths containing this marker are signed
PRIVATE_PATH_MARKER = "private"

# Auth headers
API_KEY_HEADER = "API-Key"
API_SIGN_HEADER = "API-Sign"

# Payload keys with a meaning for the signing pipeline
NONCE_KEY = "nonce"
OTP_KEY = "otp"

# Value of the passphrase-required flag that turns two-factor credentials on
PASSPHRASE_REQUIRED_SENTINEL = "1"

# Environment variables read by the config loader
ENV_API_KEY = "API_KEY"
ENV_API_SECRET = "API_SECRET"
ENV_API_KEY_2FA = "API_KEY_2FA"
ENV_API_SECRET_2FA = "API_SECRET_2FA"
ENV_API_PASSPHRASE = "API_PASSPHRASE"
ENV_API_PASSPHRASE_REQUIRED = "API_PASSPHRASE_REQUIRED"
ENV_BASE_URL = "BASE_URL"

