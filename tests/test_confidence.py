from __future__ import annotations

import pytest

from shorts_finder.models import Marker
from shorts_finder.scoring.confidence import explain_confidence, score_confidence


def test_confidence_is_mean_of_three_factors() -> None:
    markers = [
        Marker(time=10, type="A", engagement=5),
        Marker(time=40, type="A", engagement=3),
    ]

    details = explain_confidence(markers)

    assert details.marker_count_factor == pytest.approx(0.4)
    assert details.engagement_spread_factor == pytest.approx(0.6)
    assert details.type_diversity_factor == pytest.approx(1 / 3)
    assert details.score == pytest.approx((0.4 + 0.6 + (1 / 3)) / 3)
    assert score_confidence(markers) == pytest.approx(details.score)


def test_marker_count_factor_saturates_at_five() -> None:
    markers = [Marker(time=t, engagement=2) for t in range(12)]

    details = explain_confidence(markers)

    assert details.marker_count_factor == 1.0
    assert details.engagement_spread_factor == 1.0


def test_zero_engagement_window_has_zero_spread_factor() -> None:
    markers = [Marker(time=1, engagement=0), Marker(time=2, engagement=0)]

    details = explain_confidence(markers)

    assert details.engagement_spread_factor == 0.0
    assert details.score == pytest.approx((0.4 + 0.0 + (1 / 3)) / 3)


def test_type_diversity_is_clamped_beyond_three_types() -> None:
    markers = [
        Marker(time=1, type="action", engagement=4),
        Marker(time=2, type="highlight", engagement=4),
        Marker(time=3, type="transition", engagement=4),
        Marker(time=4, type="reaction", engagement=4),
        Marker(time=5, type="comment", engagement=4),
    ]

    details = explain_confidence(markers)

    assert details.type_diversity_factor == 1.0
    assert details.score == pytest.approx(1.0)


def test_custom_saturation_and_type_cap() -> None:
    markers = [Marker(time=1, type="a", engagement=1), Marker(time=2, type="b", engagement=1)]

    details = explain_confidence(markers, marker_saturation=2, type_diversity_cap=2)

    assert details.score == pytest.approx(1.0)


def test_empty_window_scores_zero() -> None:
    assert score_confidence([]) == 0.0


@pytest.mark.parametrize(
    "engagements",
    [[0, 0, 0], [1, 1000], [0, 5], [7], [3, 3, 3, 3, 3, 3, 3]],
)
def test_confidence_stays_within_unit_interval(engagements: list[float]) -> None:
    markers = [Marker(time=idx, engagement=value) for idx, value in enumerate(engagements)]

    assert 0.0 <= score_confidence(markers) <= 1.0
