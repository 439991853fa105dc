from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from shorts_finder.models import Marker

UNKNOWN_SEGMENT_TYPE = "unknown"


def classify_segment(markers: Sequence[Marker]) -> str:
    """Return the most frequent marker type in a window.

    Ties go to the type encountered first, so results are stable for a fixed
    marker order.
    """

    if not markers:
        return UNKNOWN_SEGMENT_TYPE

    # Counter keeps insertion order and most_common() sorts stably
    counts = Counter(marker.type for marker in markers)
    return counts.most_common(1)[0][0]
