from __future__ import annotations

from shorts_finder.models import Marker, Segment
from shorts_finder.propose.ranker import rank_segments, suppress_overlaps


def _segment(start_time: int, engagement: float, duration: int = 60) -> Segment:
    return Segment(
        start_time=start_time,
        duration=duration,
        markers=[Marker(time=start_time, engagement=engagement)],
        engagement=engagement,
    )


def test_rank_segments_sorts_by_descending_engagement() -> None:
    segments = [_segment(0, 2), _segment(100, 9), _segment(200, 4), _segment(300, 7)]

    ranked = rank_segments(segments, max_segments=3)

    assert [segment.start_time for segment in ranked] == [100, 300, 200]
    engagements = [segment.engagement for segment in ranked]
    assert engagements == sorted(engagements, reverse=True)


def test_rank_segments_keeps_input_order_for_ties() -> None:
    segments = [_segment(10, 5), _segment(20, 7), _segment(30, 5), _segment(40, 7)]

    ranked = rank_segments(segments, max_segments=4)

    assert [segment.start_time for segment in ranked] == [20, 40, 10, 30]


def test_rank_segments_defaults_to_three_and_handles_small_inputs() -> None:
    segments = [_segment(t, t) for t in range(10)]

    assert len(rank_segments(segments)) == 3
    assert len(rank_segments(segments[:2])) == 2
    assert rank_segments([]) == []
    assert rank_segments(segments, max_segments=0) == []
    assert rank_segments(segments, max_segments=-2) == []


def test_rank_segments_returns_overlapping_windows_together() -> None:
    segments = [_segment(10, 8), _segment(40, 3), _segment(500, 1)]

    ranked = rank_segments(segments, max_segments=2)

    assert [segment.start_time for segment in ranked] == [10, 40]


def test_suppress_overlaps_keeps_earliest_ranked_window() -> None:
    ranked = [_segment(10, 8), _segment(40, 3), _segment(500, 2), _segment(69, 1), _segment(70, 1)]

    kept = suppress_overlaps(ranked)

    assert [segment.start_time for segment in kept] == [10, 500, 70]
