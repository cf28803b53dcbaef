"""
Application-wide constants for configuration and tuning.

Note: Environment-dependent settings (DB, API keys, paths) belong in settings.py.
This file is for operational parameters that rarely change between environments.
"""

# ==============================================================================
# TRANSLATION ENGINES
# ==============================================================================

# Engine identifiers used by the registry
GOOGLE_TRANSLATE_ENGINE_ID: str = "google-translate"
GROK_TRANSLATE_ENGINE_ID: str = "grok-translate"

# Regions accepted by Cloud Translation v3 for this deployment
SUPPORTED_TRANSLATION_LOCATIONS: frozenset = frozenset({"global", "us-central1"})
DEFAULT_TRANSLATION_LOCATION: str = "global"

# Rough per-character price used for cost estimates (USD)
TRANSLATION_COST_PER_CHAR: float = 0.00002

# ==============================================================================
# GROK (CHAT MODEL) TRANSLATION
# ==============================================================================

# Hard client-side timeout per chat completion request (seconds)
GROK_REQUEST_TIMEOUT_SEC: float = 10.0

# In-process response cache bounds
GROK_CACHE_MAX_ENTRIES: int = 5000
GROK_CACHE_TTL_SEC: float = 60 * 60 * 24

# Max characters of an error body kept in logs
GROK_ERROR_BODY_LOG_CHARS: int = 500

GROK_SYSTEM_PROMPT: str = (
    "You are a translation engine. Translate accurately while preserving meaning, "
    "tone, idioms, and intent. Output ONLY the translated text (no explanations, "
    "no quotes, no extra formatting)."
)

# ==============================================================================
# SPEECH-TO-TEXT STREAMING
# ==============================================================================

STT_ENCODINGS: tuple = ("WEBM_OPUS", "LINEAR16")
STT_DEFAULT_ENCODING: str = "WEBM_OPUS"
STT_DEFAULT_SAMPLE_RATE: int = 48000

# Google closes streaming sessions after ~5 minutes; half-close slightly before
STT_STREAM_TIMEOUT_SEC: float = 290.0

# ==============================================================================
# TEXT-TO-SPEECH CACHE
# ==============================================================================

TTS_CACHE_EXTENSION: str = ".mp3"

# Max time to wait for pending cache writes on shutdown (seconds)
TTS_CACHE_DRAIN_TIMEOUT_SEC: float = 5.0

# ==============================================================================
# LANGUAGES
# ==============================================================================

# Languages offered by the relay UI; both engines support all of them
SUPPORTED_LANGUAGES: tuple = (
    ("en", "English"),
    ("zh", "Chinese"),
    ("it", "Italian"),
    ("de", "German"),
    ("nl", "Dutch"),
)
