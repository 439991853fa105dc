from __future__ import annotations

from typing import Any

import pytest

from shorts_finder.config import SelectionSettings, YouTubeSettings
from shorts_finder.models import CommentRecord
from shorts_finder.pipeline_segment_finder import find_highlight_segments, select_segments_from_comments


def _comments() -> list[CommentRecord]:
    return [
        CommentRecord(text="great moment at 1:30", like_count=10),
        CommentRecord(text="2:00 lol", like_count=5),
        CommentRecord(text="no timestamp, still popular", like_count=100),
        CommentRecord(text="10:00 best part", like_count=12),
        CommentRecord(text="0:00 intro", like_count=0),
    ]


def test_select_segments_ranks_windows_by_engagement() -> None:
    segments = select_segments_from_comments(video_id="vid1", comments=_comments())

    assert [segment.start_time for segment in segments] == [90, 600, 120]
    assert [segment.engagement for segment in segments] == [15, 12, 5]
    assert [segment.rank for segment in segments] == [1, 2, 3]
    assert segments[0].marker_count == 2
    assert segments[0].confidence == pytest.approx((0.4 + 0.5 + (1 / 3)) / 3)
    assert all(segment.duration == 60 for segment in segments)
    assert all(segment.suggested_effects == ["blur-background"] for segment in segments)


def test_select_segments_respects_max_segments() -> None:
    segments = select_segments_from_comments(video_id="vid1", comments=_comments(), max_segments=2)

    assert [segment.start_time for segment in segments] == [90, 600]


def test_select_segments_payload_matches_contract() -> None:
    segments = select_segments_from_comments(video_id="vid1", comments=_comments(), max_segments=1)

    assert segments[0].to_payload() == {
        "startTime": 90,
        "duration": 60,
        "confidence": pytest.approx(0.411111, rel=1e-4),
        "suggestedEffects": ["blur-background"],
    }


def test_select_segments_without_timestamps_is_empty() -> None:
    comments = [CommentRecord(text="love this", like_count=40), CommentRecord(text="first!", like_count=2)]

    assert select_segments_from_comments(video_id="vid1", comments=comments) == []
    assert select_segments_from_comments(video_id="vid1", comments=[]) == []


def test_select_segments_can_suppress_overlapping_windows() -> None:
    selection = SelectionSettings(suppress_overlaps=True)

    segments = select_segments_from_comments(video_id="vid1", comments=_comments(), selection=selection)

    assert [segment.start_time for segment in segments] == [90, 600, 0]


def test_select_segments_uses_configured_window_size() -> None:
    selection = SelectionSettings(window_seconds=31, max_segments=5)

    segments = select_segments_from_comments(video_id="vid1", comments=_comments(), selection=selection)

    assert segments[0].start_time == 90
    assert segments[0].engagement == 15
    assert all(segment.duration == 31 for segment in segments)


def test_find_highlight_segments_fetches_then_selects(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, Any] = {}

    def _fake_fetch(client: Any, video_id: str, **kwargs: Any) -> list[CommentRecord]:
        captured.update({"client": client, "video_id": video_id, **kwargs})
        return _comments()

    monkeypatch.setattr("shorts_finder.pipeline_segment_finder.fetch_video_comments", _fake_fetch)

    segments = find_highlight_segments(
        "vid9",
        1,
        client="client-handle",
        youtube=YouTubeSettings(max_comment_results=50, comment_order="time"),
    )

    assert captured == {"client": "client-handle", "video_id": "vid9", "max_results": 50, "order": "time"}
    assert len(segments) == 1
    assert segments[0].video_id == "vid9"


def test_find_highlight_segments_propagates_fetch_failures(monkeypatch: pytest.MonkeyPatch) -> None:
    def _failing_fetch(*_args: Any, **_kwargs: Any) -> list[CommentRecord]:
        raise RuntimeError("Comments are disabled for video vid9.")

    monkeypatch.setattr("shorts_finder.pipeline_segment_finder.fetch_video_comments", _failing_fetch)

    with pytest.raises(RuntimeError, match="Comments are disabled"):
        find_highlight_segments("vid9", client=object())
