from __future__ import annotations

from collections.abc import Sequence

from shorts_finder.models import Segment

DEFAULT_MAX_SEGMENTS = 3


def rank_segments(segments: Sequence[Segment], max_segments: int = DEFAULT_MAX_SEGMENTS) -> list[Segment]:
    """Return the top windows by descending engagement.

    Equal engagement keeps input order. Overlapping windows are returned
    together; use ``suppress_overlaps`` for a de-overlapped selection.
    """

    ranked = sorted(segments, key=lambda segment: -segment.engagement)
    return ranked[: max(max_segments, 0)]


def suppress_overlaps(segments: Sequence[Segment]) -> list[Segment]:
    """Drop every window that overlaps an earlier (higher ranked) kept window."""

    selected: list[Segment] = []
    for segment in segments:
        if _overlaps_any(segment, selected):
            continue
        selected.append(segment)
    return selected


def _overlaps_any(segment: Segment, selected: list[Segment]) -> bool:
    segment_end = segment.start_time + segment.duration

    for kept in selected:
        kept_end = kept.start_time + kept.duration
        if segment.start_time < kept_end and segment_end > kept.start_time:
            return True

    return False
