from __future__ import annotations

import logging
import shlex
import subprocess
from pathlib import Path

from shorts_finder.models import HighlightSegment

DEFAULT_WIDTH = 1080
DEFAULT_HEIGHT = 1920
MAX_SHORT_DURATION_SECONDS = 60

logger = logging.getLogger(__name__)


def short_output_path(segment: HighlightSegment, output_dir: str | Path) -> Path:
    return Path(output_dir) / f"{segment.video_id}-short-{segment.rank:02d}.mp4"


def build_short_command_args(
    *,
    source_path: str,
    segment: HighlightSegment,
    output_path: str | Path,
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    max_duration_seconds: int = MAX_SHORT_DURATION_SECONDS,
) -> list[str]:
    """Build the ffmpeg argument list that cuts one segment into a vertical Short."""

    duration = max(1, min(int(segment.duration), max_duration_seconds))
    effect_filters = _effect_filters(segment.suggested_effects, duration)

    command = [
        "ffmpeg",
        "-v",
        "error",
        "-y",
        "-ss",
        f"{max(0, segment.start_time):.3f}",
        "-i",
        source_path,
        "-t",
        str(duration),
    ]

    if "blur-background" in segment.suggested_effects:
        graph = (
            "[0:v]split[original][blur];"
            f"[blur]scale={width}:{height},boxblur=20:20[blurred];"
            f"[original]scale={width}:{height}:force_original_aspect_ratio=decrease[scaled];"
            "[blurred][scaled]overlay=(W-w)/2:(H-h)/2"
        )
        if effect_filters:
            graph += "," + ",".join(effect_filters)
        command += ["-filter_complex", f"{graph}[v]", "-map", "[v]", "-map", "0:a?"]
    else:
        chain = [
            f"scale={width}:{height}:force_original_aspect_ratio=decrease",
            f"pad={width}:{height}:-1:-1",
            *effect_filters,
        ]
        command += ["-vf", ",".join(chain)]

    command += [
        "-c:v",
        "libx264",
        "-c:a",
        "aac",
        "-movflags",
        "+faststart",
        "-f",
        "mp4",
        str(output_path),
    ]
    return command


def build_ffmpeg_short_command(
    *,
    source_path: str,
    segment: HighlightSegment,
    output_dir: str = "shorts",
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    max_duration_seconds: int = MAX_SHORT_DURATION_SECONDS,
) -> str:
    """Generate a copy-paste ffmpeg command for one highlight segment."""

    output_path = short_output_path(segment, output_dir.rstrip("/") or ".")
    args = build_short_command_args(
        source_path=source_path,
        segment=segment,
        output_path=output_path,
        width=width,
        height=height,
        max_duration_seconds=max_duration_seconds,
    )
    return " ".join(shlex.quote(arg) for arg in args)


def render_short(
    *,
    source_path: str,
    segment: HighlightSegment,
    output_dir: str | Path,
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    max_duration_seconds: int = MAX_SHORT_DURATION_SECONDS,
) -> Path:
    """Render one segment from a local source video into a vertical mp4."""

    resolved_source = Path(source_path).expanduser().resolve()
    if not resolved_source.exists():
        raise FileNotFoundError(f"Source video not found: {resolved_source}")

    output_path = short_output_path(segment, Path(output_dir).expanduser().resolve())
    output_path.parent.mkdir(parents=True, exist_ok=True)

    command = build_short_command_args(
        source_path=str(resolved_source),
        segment=segment,
        output_path=output_path,
        width=width,
        height=height,
        max_duration_seconds=max_duration_seconds,
    )

    try:
        subprocess.run(command, check=True, capture_output=True, text=True)
    except FileNotFoundError as exc:
        raise RuntimeError(
            "ffmpeg executable was not found. Install FFmpeg so ffmpeg is available on PATH."
        ) from exc
    except subprocess.CalledProcessError as exc:
        stderr = (exc.stderr or "").strip()
        details = f" ffmpeg stderr: {stderr}" if stderr else ""
        raise RuntimeError(f"ffmpeg failed to render short from {resolved_source}.{details}") from exc

    logger.info("Rendered short %s (%ss from %ss)", output_path, segment.duration, segment.start_time)
    return output_path


def _effect_filters(effects: list[str], duration: int) -> list[str]:
    filters: list[str] = []
    for effect in effects:
        if effect == "speedup":
            filters.append("setpts=0.5*PTS")
        elif effect == "slowdown":
            filters.append("setpts=2*PTS")
        elif effect == "fade":
            filters.append(f"fade=in:0:30,fade=out:st={max(duration - 1, 0)}:d=1")
        elif effect == "mirror":
            filters.append("hflip")
    return filters
