from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from shorts_finder.config import SelectionSettings, YouTubeSettings
from shorts_finder.ingest.comments import fetch_video_comments
from shorts_finder.ingest.timestamps import collect_markers
from shorts_finder.models import CommentRecord, HighlightSegment
from shorts_finder.propose.effects import suggest_effects
from shorts_finder.propose.ranker import rank_segments, suppress_overlaps
from shorts_finder.scoring.windows import aggregate_windows

logger = logging.getLogger(__name__)


def select_segments_from_comments(
    *,
    video_id: str,
    comments: Iterable[CommentRecord | tuple[str, Any]],
    max_segments: int | None = None,
    selection: SelectionSettings | None = None,
) -> list[HighlightSegment]:
    """Run marker collection, windowing, scoring and ranking over fetched comments.

    Comments without time references produce no markers; no markers produce
    an empty result rather than an error.
    """

    settings = selection or SelectionSettings()
    limit = settings.max_segments if max_segments is None else max_segments

    markers = collect_markers(comments)
    windows = aggregate_windows(
        markers,
        window_seconds=settings.window_seconds,
        marker_saturation=settings.marker_saturation,
        type_diversity_cap=settings.type_diversity_cap,
    )

    if settings.suppress_overlaps:
        ranked = rank_segments(suppress_overlaps(rank_segments(windows, len(windows))), limit)
    else:
        ranked = rank_segments(windows, limit)

    results = [
        HighlightSegment(
            video_id=video_id,
            rank=rank,
            start_time=segment.start_time,
            duration=segment.duration,
            confidence=segment.confidence,
            engagement=segment.engagement,
            segment_type=segment.type,
            marker_count=len(segment.markers),
            suggested_effects=suggest_effects(segment.type),
        )
        for rank, segment in enumerate(ranked, start=1)
    ]

    logger.info(
        "Selected %d of %d candidate windows for %s from %d markers",
        len(results),
        len(windows),
        video_id,
        len(markers),
    )
    return results


def find_highlight_segments(
    video_id: str,
    max_segments: int | None = None,
    *,
    client: Any,
    selection: SelectionSettings | None = None,
    youtube: YouTubeSettings | None = None,
) -> list[HighlightSegment]:
    """Fetch comments for ``video_id`` and select its highlight segments.

    Comment fetch failures propagate before any selection work starts.
    """

    youtube_settings = youtube or YouTubeSettings()
    comments = fetch_video_comments(
        client,
        video_id,
        max_results=youtube_settings.max_comment_results,
        order=youtube_settings.comment_order,
    )
    return select_segments_from_comments(
        video_id=video_id,
        comments=comments,
        max_segments=max_segments,
        selection=selection,
    )
