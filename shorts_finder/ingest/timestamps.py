from __future__ import annotations

import logging
import math
import re
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from shorts_finder.models import DEFAULT_MARKER_TYPE, CommentRecord, Marker

logger = logging.getLogger(__name__)

# Optional hours, then minutes and seconds: "1:23:45", "12:34", "0:05".
TIMESTAMP_PATTERN = re.compile(r"(?:([0-9]+):)?([0-9]+):([0-9]+)")


def extract_timestamp(text: str) -> int | None:
    """Return the first ``[H:]MM:SS`` reference in ``text`` as seconds.

    ``None`` means no reference was found; ``0`` is a valid reference to the
    very start of the video. Later references in the same text are ignored.
    """

    if not isinstance(text, str):
        return None

    match = TIMESTAMP_PATTERN.search(text)
    if match is None:
        return None

    hours, minutes, seconds = (_to_int(group) for group in match.groups())
    return hours * 3600 + minutes * 60 + seconds


def collect_markers(
    comments: Iterable[CommentRecord | Mapping[str, Any] | tuple[str, Any]],
    marker_type: str = DEFAULT_MARKER_TYPE,
) -> list[Marker]:
    """Turn comments into time-anchored markers, keeping input order.

    Accepts validated ``CommentRecord`` items, mappings with ``text`` and
    ``likeCount`` (or ``like_count``) keys, or plain ``(text, weight)`` pairs.
    Comments without a parsable time reference are dropped. Any other item
    shape raises ``TypeError``.
    """

    markers: list[Marker] = []
    skipped = 0

    for idx, item in enumerate(comments, start=1):
        text, weight = _comment_fields(item, idx)

        timestamp = extract_timestamp(text)
        if timestamp is None:
            skipped += 1
            continue

        markers.append(Marker(time=timestamp, type=marker_type, engagement=_to_engagement(weight)))

    logger.debug("Collected %d markers (%d comments without a time reference)", len(markers), skipped)
    return markers


def _comment_fields(item: Any, idx: int) -> tuple[Any, Any]:
    if isinstance(item, CommentRecord):
        return item.text, item.like_count
    if isinstance(item, Mapping):
        weight = item.get("likeCount", item.get("like_count"))
        return item.get("text"), weight
    if isinstance(item, Sequence) and not isinstance(item, (str, bytes)) and len(item) == 2:
        return item[0], item[1]
    raise TypeError(
        f"Comment item {idx} must be a CommentRecord, a mapping or a (text, weight) pair; got {type(item).__name__}."
    )


def _to_int(raw_value: str | None) -> int:
    if not raw_value:
        return 0
    try:
        return int(raw_value)
    except ValueError:
        return 0


def _to_engagement(raw_value: Any) -> float:
    if raw_value is None or isinstance(raw_value, bool):
        return 0.0
    try:
        value = float(raw_value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(value) or value < 0:
        return 0.0
    return value
