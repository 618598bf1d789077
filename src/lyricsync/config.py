"""Configuration settings for lyricsync."""

import os

from .exceptions import ConfigError

# Provider endpoints
BETTER_LYRICS_SEARCH_URL = "https://api.betterlyrics.com/search"
MUSIXMATCH_MATCHER_URL = "https://api.musixmatch.com/ws/1.1/matcher.lyrics.get"
LRCLIB_SEARCH_URL = "https://lrclib.net/api/search"
GENIUS_SEARCH_URL = "https://api.genius.com/search"

# Pass-through relay used when a direct request fails
RELAY_URL = os.getenv("LYRICSYNC_RELAY_URL", "https://api.allorigins.win/get")

USER_AGENT = "lyricsync/0.1 (+https://lrclib.net)"

# Network timeouts in seconds (can be overridden via environment variables)
PROVIDER_TIMEOUT = float(os.getenv("LYRICSYNC_PROVIDER_TIMEOUT", "5"))
LRCLIB_TIMEOUT = float(os.getenv("LYRICSYNC_LRCLIB_TIMEOUT", "10"))

# Timeline building
FALLBACK_LINE_DURATION = 3.0  # Duration given to the final line
MAX_LINE_DURATION = 10.0  # Lines held longer than this are capped...
CAPPED_LINE_DURATION = 5.0  # ...to this, leaving silence for a gap segment
GAP_THRESHOLD = 0.5  # Silence longer than this becomes a gap segment
GAP_PLACEHOLDER = "♪"

# Playback cursor
LOOKAHEAD_LINES = int(os.getenv("LYRICSYNC_LOOKAHEAD", "3"))
MAX_LOOKAHEAD_LINES = 9

# Debounce between a track change and the provider search
FETCH_DELAY = float(os.getenv("LYRICSYNC_FETCH_DELAY", "0.5"))

# Environment variables holding provider credentials
MUSIXMATCH_KEY_ENV = "LYRICSYNC_MUSIXMATCH_KEY"
GENIUS_TOKEN_ENV = "LYRICSYNC_GENIUS_TOKEN"


def validate_config() -> None:
    """Validate configuration values."""
    if PROVIDER_TIMEOUT <= 0 or LRCLIB_TIMEOUT <= 0:
        raise ConfigError("Provider timeouts must be positive")

    if not (0 <= LOOKAHEAD_LINES <= MAX_LOOKAHEAD_LINES):
        raise ConfigError(
            f"Lookahead must be between 0 and {MAX_LOOKAHEAD_LINES} lines"
        )

    if FETCH_DELAY < 0:
        raise ConfigError("Fetch delay cannot be negative")

    if not (0 < GAP_THRESHOLD < CAPPED_LINE_DURATION <= MAX_LINE_DURATION):
        raise ConfigError("Invalid gap/line duration thresholds")


def get_credentials():
    """Read provider credentials from the environment.

    Missing variables leave the corresponding provider disabled.
    """
    from .core.models import Credentials

    return Credentials(
        musixmatch_key=os.getenv(MUSIXMATCH_KEY_ENV),
        genius_token=os.getenv(GENIUS_TOKEN_ENV),
    )


# Validate config on import
validate_config()
