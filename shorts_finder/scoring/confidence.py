from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from shorts_finder.models import Marker

DEFAULT_MARKER_SATURATION = 5
DEFAULT_TYPE_DIVERSITY_CAP = 3


@dataclass(slots=True)
class ConfidenceDetails:
    """Explainable output for window confidence scoring."""

    score: float
    marker_count_factor: float
    engagement_spread_factor: float
    type_diversity_factor: float


def score_confidence(
    markers: Sequence[Marker],
    *,
    marker_saturation: int = DEFAULT_MARKER_SATURATION,
    type_diversity_cap: int = DEFAULT_TYPE_DIVERSITY_CAP,
) -> float:
    """Compute a [0, 1] confidence for one window's markers."""

    return explain_confidence(
        markers,
        marker_saturation=marker_saturation,
        type_diversity_cap=type_diversity_cap,
    ).score


def explain_confidence(
    markers: Sequence[Marker],
    *,
    marker_saturation: int = DEFAULT_MARKER_SATURATION,
    type_diversity_cap: int = DEFAULT_TYPE_DIVERSITY_CAP,
) -> ConfidenceDetails:
    """Score density, engagement uniformity and type diversity, then average them.

    Each factor is clamped to [0, 1] before the unweighted mean is taken.
    """

    if not markers:
        return ConfidenceDetails(
            score=0.0,
            marker_count_factor=0.0,
            engagement_spread_factor=0.0,
            type_diversity_factor=0.0,
        )

    marker_count_factor = _clamp(len(markers) / max(marker_saturation, 1))
    engagement_spread_factor = _engagement_spread([marker.engagement for marker in markers])
    type_diversity_factor = _clamp(len({marker.type for marker in markers}) / max(type_diversity_cap, 1))

    score = (marker_count_factor + engagement_spread_factor + type_diversity_factor) / 3

    return ConfidenceDetails(
        score=_clamp(score),
        marker_count_factor=marker_count_factor,
        engagement_spread_factor=engagement_spread_factor,
        type_diversity_factor=type_diversity_factor,
    )


def _engagement_spread(engagements: list[float]) -> float:
    highest = max(engagements)
    lowest = min(engagements)
    # all-zero windows carry no uniformity signal
    if highest <= 0:
        return 0.0
    return _clamp(1 - ((highest - lowest) / highest))


def _clamp(value: float, minimum: float = 0.0, maximum: float = 1.0) -> float:
    return max(minimum, min(maximum, value))
