"""Application constants - centralized configuration values."""

# =============================================================================
# Pagination
# =============================================================================
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
MAX_SEARCH_RESULTS = 20
SEARCH_MIN_LENGTH = 2
GOOGLE_SEARCH_RESULTS = 5

# =============================================================================
# Graph
# =============================================================================
GRAPH_EDGE_LIMIT = 500  # Edges read per graph build (no pagination beyond this)
STATS_TOP_BOOKS = 10

# =============================================================================
# Discovery
# =============================================================================
DISCOVERY_MENTION_RESULTS = 20  # Google Books maxResults for mention search
DISCOVERY_SNIPPET_LENGTH = 150
DISCOVERY_DESCRIPTION_LENGTH = 1000
LLM_TEMPERATURE = 0.3
UNKNOWN_AUTHOR = "Unknown"

# =============================================================================
# Cache TTLs (in seconds)
# =============================================================================
CACHE_TTL_STATS = 300  # 5 minutes
CACHE_TTL_SEARCH = 60 * 60  # 1 hour

# =============================================================================
# API Timeouts (in seconds)
# =============================================================================
API_TIMEOUT_DEFAULT = 10.0
API_TIMEOUT_EXTERNAL = 15.0
API_TIMEOUT_LLM = 60.0
HTTPX_TIMEOUT = 10.0

# =============================================================================
# Maintenance scripts
# =============================================================================
COVER_BACKFILL_DELAY = 0.5  # seconds between Google Books calls
SEED_DISCOVERY_DELAY = 2.0  # seconds between discovery runs

# =============================================================================
# Database pool
# =============================================================================
DB_POOL_SIZE = 10
DB_MAX_OVERFLOW = 20
DB_POOL_TIMEOUT_SECONDS = 30
DB_POOL_RECYCLE_SECONDS = 1800  # 30 minutes

# =============================================================================
# Session & Security
# =============================================================================
SESSION_TIMEOUT_DAYS = 7
SESSION_COOKIE_NAME = "booklinks_session"
AUTH_RATE_LIMIT = 10  # attempts per window per caller address
AUTH_RATE_WINDOW_SECONDS = 60

# =============================================================================
# Content limits
# =============================================================================
MAX_COMMENT_LENGTH = 2000
MAX_FEEDBACK_LENGTH = 5000

# =============================================================================
# Covers
# =============================================================================
DEFAULT_COVER_URL = "https://images.unsplash.com/photo-1543002588-bfa74002ed7e?w=500"
FALLBACK_COVER_HOST = "unsplash.com"

# =============================================================================
# External API URLs
# =============================================================================
GOOGLE_BOOKS_API_URL = "https://www.googleapis.com/books/v1"
GOOGLE_BOOKS_VOLUME_URL = "https://books.google.com/books"
