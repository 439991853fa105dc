from __future__ import annotations

import logging
from collections.abc import Sequence

from shorts_finder.models import Marker, Segment
from shorts_finder.scoring.classify import classify_segment
from shorts_finder.scoring.confidence import (
    DEFAULT_MARKER_SATURATION,
    DEFAULT_TYPE_DIVERSITY_CAP,
    score_confidence,
)

DEFAULT_WINDOW_SECONDS = 60

logger = logging.getLogger(__name__)


def aggregate_windows(
    markers: Sequence[Marker],
    window_seconds: int = DEFAULT_WINDOW_SECONDS,
    *,
    marker_saturation: int = DEFAULT_MARKER_SATURATION,
    type_diversity_cap: int = DEFAULT_TYPE_DIVERSITY_CAP,
) -> list[Segment]:
    """Build one candidate window per anchor marker.

    Each window spans ``[anchor.time, anchor.time + window_seconds)`` and holds
    every marker falling inside it, so windows overlap and a marker can appear
    in several of them. Near-identical windows are kept; the ranker's
    truncation is the only redundancy reduction.
    """

    duration = max(int(window_seconds), 1)
    segments: list[Segment] = []

    for anchor in markers:
        window_end = anchor.time + duration
        in_window = [marker for marker in markers if anchor.time <= marker.time < window_end]
        if not in_window:
            continue

        segments.append(
            Segment(
                start_time=anchor.time,
                duration=duration,
                markers=in_window,
                engagement=sum(marker.engagement for marker in in_window),
                type=classify_segment(in_window),
                confidence=score_confidence(
                    in_window,
                    marker_saturation=marker_saturation,
                    type_diversity_cap=type_diversity_cap,
                ),
            )
        )

    logger.debug("Aggregated %d markers into %d windows of %ds", len(markers), len(segments), duration)
    return segments
