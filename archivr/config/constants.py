"""Constants for Archivr."""

# Application constants
APP_NAME = "archivr"
APP_TITLE = "Archivr"
DEFAULT_APP_URL = "http://localhost:3000"

# Default paths
DEFAULT_LOG_DIR = ".logs"
DEFAULT_CONFIG_FILE = "archivr.yaml"

# Provider
OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
OPENROUTER_API_KEY_ENV = "OPENROUTER_API_KEY"
DEFAULT_LLM_TIMEOUT = 60  # seconds
DEFAULT_TEMPERATURE = 0.3
DEFAULT_MAX_TOKENS = 500

# Model tiers (free models are tried first, paid only after free is exhausted)
DEFAULT_FREE_MODELS = [
    "meta-llama/llama-3.3-70b-instruct:free",
    "mistralai/mistral-small-3.1-24b-instruct:free",
    "meta-llama/llama-4-maverick:free",
]
DEFAULT_PAID_MODELS = [
    "openai/gpt-4o-mini",
    "anthropic/claude-3.5-haiku",
]

# Batch pacing (seconds)
DEFAULT_COURTESY_DELAY = 1.0
DEFAULT_FAILURE_BACKOFF = 2.0  # multiplied by the consecutive failure count
DEFAULT_FAILURE_THRESHOLD = 5
DEFAULT_COOLDOWN = 30.0
DEFAULT_RETRY_SETTLE_DELAY = 5.0
DEFAULT_RETRY_SPACING = 3.0
DEFAULT_PROGRESS_EVERY = 5

# Tagging
MIN_TAGS = 4
MAX_TAGS = 6
FALLBACK_TAG = "untagged"
FALLBACK_MOOD = "neutral"
FALLBACK_CONFIDENCE = 0.3

# Collection suggestions
MAX_SUGGESTION_TAGS = 30
