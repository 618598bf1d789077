"""Fallback orchestration across lyrics providers."""

import time
from typing import Callable, List, Optional, Sequence

from ..utils.logging import get_logger
from .lrc import parse_timed_text
from .models import (
    AttemptOutcome,
    Credentials,
    ProviderAttempt,
    ResolvedLyrics,
)
from .providers import LyricsProvider, build_default_providers

logger = get_logger(__name__)


class LyricsResolver:
    """Try providers in a fixed order until one yields a non-empty timeline.

    Provider and parser failures never escape ``resolve``: the only outcomes
    are a ``ResolvedLyrics`` or None. The attempts of the latest call are
    kept on ``last_attempts`` for diagnostics.
    """

    def __init__(
        self,
        providers: Optional[Sequence[LyricsProvider]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.providers = (
            list(providers) if providers is not None else build_default_providers()
        )
        self.last_attempts: List[ProviderAttempt] = []
        self._clock = clock

    def resolve(
        self,
        artist: str,
        title: str,
        credentials: Optional[Credentials] = None,
    ) -> Optional[ResolvedLyrics]:
        attempts: List[ProviderAttempt] = []
        self.last_attempts = attempts
        logger.debug(f"Resolving lyrics for: {artist} - {title}")

        for provider in self.providers:
            source = getattr(provider, "name", provider.__class__.__name__)
            started = self._clock()
            try:
                result = provider.fetch(artist, title, credentials)
                timeline = (
                    parse_timed_text(result.raw_payload)
                    if result is not None and result.raw_payload
                    else ()
                )
            except Exception as e:
                elapsed = self._clock() - started
                logger.warning(f"{source} raised unexpectedly: {e}")
                attempts.append(
                    ProviderAttempt(source, AttemptOutcome.ERROR, elapsed=elapsed)
                )
                continue

            elapsed = self._clock() - started
            if result is None or not result.raw_payload:
                attempts.append(
                    ProviderAttempt(source, AttemptOutcome.NO_RESULT, elapsed=elapsed)
                )
                continue

            if not timeline:
                logger.debug(f"{source}: payload has no timed lines")
                attempts.append(
                    ProviderAttempt(
                        source, AttemptOutcome.EMPTY_TIMELINE, elapsed=elapsed
                    )
                )
                continue

            attempts.append(
                ProviderAttempt(
                    source,
                    AttemptOutcome.ACCEPTED,
                    segment_count=len(timeline),
                    elapsed=elapsed,
                )
            )
            logger.info(f"Lyrics from {result.source_name} ({len(timeline)} lines)")
            return ResolvedLyrics(
                timeline=timeline,
                source_name=result.source_name,
                granularity=result.granularity,
                synced=result.synced,
                attempts=tuple(attempts),
                raw_payload=result.raw_payload,
            )

        tried = ", ".join(f"{a.source_name}={a.outcome.value}" for a in attempts)
        logger.info(f"No lyrics found for {artist} - {title} (tried: {tried})")
        return None


def resolve_lyrics(
    artist: str,
    title: str,
    credentials: Optional[Credentials] = None,
    providers: Optional[Sequence[LyricsProvider]] = None,
) -> Optional[ResolvedLyrics]:
    """Resolve lyrics through the default (or given) provider chain."""
    return LyricsResolver(providers).resolve(artist, title, credentials)
