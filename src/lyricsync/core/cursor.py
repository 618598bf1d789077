"""Playback cursor: decide which lyric segment is active and what comes next."""

from typing import Optional, Sequence

from ..config import LOOKAHEAD_LINES
from .models import ActiveWindow, Granularity, LyricSegment, WordProgress


def find_active_index(
    timeline: Sequence[LyricSegment], position: float, start_index: int = 0
) -> int:
    """Index of the last segment starting at or before ``position``.

    On a contiguous timeline this is the segment with
    ``start_time <= position < end_time``. Before the first segment the
    answer is 0; past the end it is the last index. ``start_index`` lets a
    caller resume a forward scan; it must not be past the answer.
    """
    if not timeline:
        return -1

    index = min(max(start_index, 0), len(timeline) - 1)
    while index + 1 < len(timeline) and timeline[index + 1].start_time <= position:
        index += 1
    return index


def _word_progress(
    segment: LyricSegment, position: float, granularity: Optional[Granularity]
):
    if not segment.words:
        return None
    if granularity is not None and not granularity.has_sub_line_timing:
        return None
    return tuple(
        WordProgress(text=word.text, time=word.time, sung=position >= word.time)
        for word in segment.words
    )


def _project(
    timeline: Sequence[LyricSegment],
    index: int,
    position: float,
    lookahead: int,
    granularity: Optional[Granularity],
) -> ActiveWindow:
    visible = tuple(timeline[index : index + 1 + lookahead])
    return ActiveWindow(
        active_index=index,
        segments=visible,
        words=_word_progress(timeline[index], position, granularity),
    )


def active_window(
    timeline: Sequence[LyricSegment],
    position: float,
    *,
    lookahead: int = LOOKAHEAD_LINES,
    granularity: Optional[Granularity] = None,
) -> Optional[ActiveWindow]:
    """Active segment plus the next ``lookahead`` segments at ``position``.

    ``granularity`` None means word progress is reported whenever the active
    segment has word timings; ``Granularity.LINE`` suppresses it.
    Returns None only for an empty timeline.
    """
    if not timeline:
        return None
    index = find_active_index(timeline, position)
    return _project(timeline, index, position, lookahead, granularity)


class SyncCursor:
    """Stateful cursor that remembers the last active index.

    Normal playback only moves forward, so each update resumes the scan from
    the previous index. A backwards seek or a new timeline restarts it.
    """

    def __init__(self, lookahead: int = LOOKAHEAD_LINES):
        self.lookahead = lookahead
        self._timeline: Optional[Sequence[LyricSegment]] = None
        self._index = 0

    def reset(self) -> None:
        self._timeline = None
        self._index = 0

    @property
    def index(self) -> int:
        return self._index

    def active_window(
        self,
        timeline: Sequence[LyricSegment],
        position: float,
        granularity: Optional[Granularity] = None,
    ) -> Optional[ActiveWindow]:
        if not timeline:
            self.reset()
            return None

        if timeline is not self._timeline:
            self._timeline = timeline
            self._index = 0

        start = self._index
        if start >= len(timeline) or timeline[start].start_time > position:
            start = 0
        self._index = find_active_index(timeline, position, start)
        return _project(timeline, self._index, position, self.lookahead, granularity)
