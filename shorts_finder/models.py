from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

DEFAULT_MARKER_TYPE = "comment"


@dataclass(slots=True)
class CommentRecord:
    """A top-level comment validated at the YouTube API boundary."""

    text: str
    like_count: int = 0


@dataclass(frozen=True, slots=True)
class Marker:
    """A time-anchored engagement signal derived from one comment."""

    time: int
    type: str = DEFAULT_MARKER_TYPE
    engagement: float = 0.0


@dataclass(slots=True)
class Segment:
    """Candidate window anchored at one marker's time."""

    start_time: int
    duration: int
    markers: list[Marker] = field(default_factory=list)
    engagement: float = 0.0
    type: str = DEFAULT_MARKER_TYPE
    confidence: float = 0.0


@dataclass(slots=True)
class HighlightSegment:
    """Ranked result shared between selection, export and the MCP tool."""

    video_id: str
    rank: int
    start_time: int
    duration: int
    confidence: float
    engagement: float
    segment_type: str
    marker_count: int
    suggested_effects: list[str]

    def to_payload(self) -> dict[str, Any]:
        return {
            "startTime": self.start_time,
            "duration": self.duration,
            "confidence": self.confidence,
            "suggestedEffects": list(self.suggested_effects),
        }
