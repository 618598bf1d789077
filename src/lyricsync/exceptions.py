"""Custom exceptions for lyricsync."""

class LyricSyncError(Exception):
    """Base exception for lyricsync."""
    pass

class ProviderError(LyricSyncError):
    """A lyrics provider returned an unusable response."""
    pass

class LyricsError(LyricSyncError):
    """Error fetching or processing lyrics."""
    pass

class ConfigError(LyricSyncError):
    """Invalid configuration value."""
    pass

class ValidationError(LyricSyncError):
    """Invalid input parameters."""
    pass
