from __future__ import annotations

import csv
import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

from shorts_finder.models import HighlightSegment
from shorts_finder.propose.render import (
    DEFAULT_HEIGHT,
    DEFAULT_WIDTH,
    MAX_SHORT_DURATION_SECONDS,
    build_ffmpeg_short_command,
)


def export_segments(segments: list[HighlightSegment], output_path: str) -> Path:
    """Export highlight segments to JSON (default) or CSV, based on file extension."""

    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if path.suffix.lower() == ".csv":
        _write_csv(segments, path)
    else:
        _write_json(segments, path)

    return path


def export_final_outputs(
    segments: list[HighlightSegment],
    output_dir: str | Path,
    *,
    basename: str = "segments_final",
    source_path: str | None = None,
    include_ffmpeg_commands: bool = True,
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    max_duration_seconds: int = MAX_SHORT_DURATION_SECONDS,
) -> dict[str, Path]:
    """Export final JSON/CSV contract files and a review manifest for quick triage."""

    resolved_output_dir = Path(output_dir)
    resolved_output_dir.mkdir(parents=True, exist_ok=True)

    json_path = resolved_output_dir / f"{basename}.json"
    csv_path = resolved_output_dir / f"{basename}.csv"
    review_path = resolved_output_dir / f"{basename}_review.json"

    export_segments(segments, str(json_path))
    export_segments(segments, str(csv_path))

    review_manifest = generate_review_manifest(
        segments,
        source_path=source_path,
        include_ffmpeg_commands=include_ffmpeg_commands,
        width=width,
        height=height,
        max_duration_seconds=max_duration_seconds,
    )
    review_path.write_text(json.dumps(review_manifest, indent=2, ensure_ascii=False), encoding="utf-8")

    return {
        "json": json_path,
        "csv": csv_path,
        "review": review_path,
    }


def generate_review_manifest(
    segments: list[HighlightSegment],
    *,
    source_path: str | None = None,
    include_ffmpeg_commands: bool = True,
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    max_duration_seconds: int = MAX_SHORT_DURATION_SECONDS,
) -> list[dict[str, Any]]:
    """Build a lightweight review manifest with confidence labels and effects."""

    manifest: list[dict[str, Any]] = []
    for segment in segments:
        entry = {
            "rank": segment.rank,
            "video_id": segment.video_id,
            "start_time": segment.start_time,
            "end_time": segment.start_time + segment.duration,
            "duration": segment.duration,
            "engagement": segment.engagement,
            "confidence": round(segment.confidence, 4),
            "confidence_label": _confidence_label(segment.confidence),
            "segment_type": segment.segment_type,
            "suggested_effects": list(segment.suggested_effects),
            "watch_url": _watch_url(segment),
        }
        if include_ffmpeg_commands and source_path:
            entry["ffmpeg_command"] = build_ffmpeg_short_command(
                source_path=source_path,
                segment=segment,
                width=width,
                height=height,
                max_duration_seconds=max_duration_seconds,
            )
        manifest.append(entry)

    return manifest


def load_highlight_segments(path: str | Path) -> list[HighlightSegment]:
    """Load highlight segments from the exporter JSON contract."""

    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(payload, list):
        raise ValueError("Segment contract must be a JSON array.")

    segments: list[HighlightSegment] = []
    for idx, row in enumerate(payload, start=1):
        if not isinstance(row, dict):
            raise ValueError(f"Segment row {idx} must be an object.")
        try:
            segments.append(
                HighlightSegment(
                    video_id=str(row["video_id"]),
                    rank=int(row.get("rank", idx)),
                    start_time=int(row["start_time"]),
                    duration=int(row["duration"]),
                    confidence=float(row.get("confidence", 0.0)),
                    engagement=float(row.get("engagement", 0.0)),
                    segment_type=str(row.get("segment_type", "unknown")),
                    marker_count=int(row.get("marker_count", 0)),
                    suggested_effects=[str(effect) for effect in row.get("suggested_effects", [])],
                )
            )
        except KeyError as exc:
            raise ValueError(f"Segment row {idx} is missing required field {exc.args[0]!r}.") from exc
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Segment row {idx} has an invalid field value: {exc}") from exc

    return segments


def _write_json(segments: list[HighlightSegment], path: Path) -> None:
    payload = [asdict(segment) for segment in segments]
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")


def _write_csv(segments: list[HighlightSegment], path: Path) -> None:
    fields = [
        "rank",
        "video_id",
        "start_time",
        "end_time",
        "duration",
        "engagement",
        "confidence",
        "confidence_label",
        "segment_type",
        "marker_count",
        "suggested_effects",
    ]

    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.DictWriter(handle, fieldnames=fields)
        writer.writeheader()
        for segment in segments:
            writer.writerow(
                {
                    "rank": segment.rank,
                    "video_id": segment.video_id,
                    "start_time": segment.start_time,
                    "end_time": segment.start_time + segment.duration,
                    "duration": segment.duration,
                    "engagement": f"{segment.engagement:g}",
                    "confidence": f"{segment.confidence:.4f}",
                    "confidence_label": _confidence_label(segment.confidence),
                    "segment_type": segment.segment_type,
                    "marker_count": segment.marker_count,
                    "suggested_effects": "|".join(segment.suggested_effects),
                }
            )


def _confidence_label(confidence: float) -> str:
    if confidence >= 0.8:
        return "high"
    if confidence >= 0.6:
        return "medium"
    return "low"


def _watch_url(segment: HighlightSegment) -> str:
    return f"https://www.youtube.com/watch?v={segment.video_id}&t={segment.start_time}s"
