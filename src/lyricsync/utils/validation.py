"""Validation utilities."""

import logging
import math
from pathlib import Path

from ..config import MAX_LOOKAHEAD_LINES
from ..exceptions import ValidationError

logger = logging.getLogger(__name__)


def validate_track_field(value: str, field_name: str) -> str:
    """Validate an artist or title string."""
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} cannot be empty")
    return str(value).strip()


def validate_position(position: float) -> float:
    """Validate a playback position in seconds."""
    try:
        seconds = float(position)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid playback position: {position!r}")
    if math.isnan(seconds) or math.isinf(seconds):
        raise ValidationError(f"Invalid playback position: {position!r}")
    if seconds < 0:
        raise ValidationError("Playback position cannot be negative")
    return seconds


def validate_lookahead(lookahead: int) -> int:
    """Validate the number of upcoming lines shown after the active one."""
    if not 0 <= lookahead <= MAX_LOOKAHEAD_LINES:
        raise ValidationError(
            f"Lookahead must be between 0 and {MAX_LOOKAHEAD_LINES}"
        )
    return lookahead


def validate_lrc_path(path: str) -> Path:
    """Validate that a timed-text file exists and is readable."""
    lrc_path = Path(path)
    if not lrc_path.is_file():
        raise ValidationError(f"Lyrics file not found: {path}")
    if lrc_path.suffix.lower() not in (".lrc", ".txt", ".elrc"):
        logger.debug(f"Unusual lyrics file extension: {lrc_path.suffix}")
    return lrc_path
