"""
Constants and configuration values for browserfetch.

This module contains all hardcoded values, URLs, timeouts, and other constants
used throughout the application.
"""

# Upstream release feeds
CHROMIUM_RELEASES_URL = "https://chromiumdash.appspot.com/fetch_releases"
CHROMIUM_RELEASES_LIMIT = 100
FIREFOX_PRODUCT_DETAILS_URL = "https://product-details.mozilla.org/1.0/{product}.json"

# Artifact hosts
CHROMIUM_SNAPSHOTS_URL = (
    "https://storage.googleapis.com/chromium-browser-snapshots/"
    "{dir_name}/{position}/{file_name}"
)
FIREFOX_RELEASES_URL = (
    "https://ftp.mozilla.org/pub/{product}/releases/{version}/"
    "{dir_name}/en-US/{file_name}"
)

# Network timeouts (in seconds)
DEFAULT_REQUEST_TIMEOUT = 30
DEFAULT_CONNECTOR_LIMIT = 10
HTTP_STATUS_ERROR_THRESHOLD = 400

# Fetch cache
DEFAULT_FETCH_CACHE_TTL_SECONDS = 60 * 60 * 24  # 1 day
FETCH_CACHE_KEY_PREFIX = "fetch:"
FETCH_CACHE_EXPIRES_SUFFIX = ":expiresAt"
FETCH_CACHE_FILE = "fetch_cache.json"

# Execution modes
MODE_PRODUCTION = "production"
MODE_DEVELOPMENT = "development"
VALID_MODES = (MODE_PRODUCTION, MODE_DEVELOPMENT)

# Application directories and files
APP_NAME = "browserfetch"
CONFIG_FILE_NAME = "browserfetch.yaml"

# Environment variables
LOG_LEVEL_ENV_VAR = "BROWSERFETCH_LOG_LEVEL"
MODE_ENV_VAR = "BROWSERFETCH_MODE"

# Logging
LOGGER_NAME = "browserfetch"
LOG_FILE_NAME = "browserfetch.log"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
INFO_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
DEBUG_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s: %(message)s"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024  # 10 MB
LOG_FILE_BACKUP_COUNT = 5
