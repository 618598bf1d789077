"""lyricsync - synced lyrics acquisition and playback cursor."""

__version__ = "0.1.0"
