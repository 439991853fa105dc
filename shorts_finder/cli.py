from __future__ import annotations

import json
import logging
from pathlib import Path
from time import perf_counter
from typing import Callable, TypeVar

import typer

from shorts_finder.config import Settings, load_settings
from shorts_finder.ingest.comments import build_youtube_client, fetch_video_comments, load_comments_file
from shorts_finder.logging_config import configure_logging
from shorts_finder.mcp_server import main as run_mcp_server
from shorts_finder.mcp_server import resolve_api_key
from shorts_finder.models import HighlightSegment
from shorts_finder.pipeline_segment_finder import select_segments_from_comments
from shorts_finder.propose.exporter import export_final_outputs, load_highlight_segments
from shorts_finder.propose.render import render_short

app = typer.Typer(help="Find YouTube Shorts candidates from comment timestamps.")
config_app = typer.Typer(help="Configuration commands.")
propose_app = typer.Typer(help="Segment review and rendering commands.")

app.add_typer(config_app, name="config")
app.add_typer(propose_app, name="propose")

logger = logging.getLogger(__name__)

T = TypeVar("T")

CONFIG_OPTION = typer.Option(
    Path("configs/default.yaml"),
    "--config",
    "-c",
    envvar="SHORTS_FINDER_CONFIG",
    help="Path to YAML configuration file.",
)


def _run_with_progress(step_index: int, total_steps: int, label: str, work: Callable[[], T]) -> T:
    typer.echo(f"[{step_index}/{total_steps}] {label}...", err=True)
    started_at = perf_counter()
    try:
        result = work()
    except Exception:
        elapsed = perf_counter() - started_at
        typer.echo(f"[{step_index}/{total_steps}] {label} failed after {elapsed:.1f}s", err=True)
        raise
    elapsed = perf_counter() - started_at
    typer.echo(f"[{step_index}/{total_steps}] {label} done in {elapsed:.1f}s", err=True)
    return result


def _bootstrap(config_path: Path) -> Settings:
    settings = load_settings(config_path)
    configure_logging(settings.logging)
    logger.debug("Loaded runtime settings from %s", config_path)
    return settings


def _segments_payload(segments: list[HighlightSegment]) -> list[dict[str, object]]:
    return [
        {
            "rank": segment.rank,
            **segment.to_payload(),
            "engagement": segment.engagement,
            "segmentType": segment.segment_type,
        }
        for segment in segments
    ]


@config_app.command("show")
def show_config(config_path: Path = CONFIG_OPTION) -> None:
    """Print resolved runtime configuration."""

    settings = _bootstrap(config_path)
    payload = settings.model_dump(mode="json")
    if payload["youtube"]["api_key"]:
        payload["youtube"]["api_key"] = "***"
    typer.echo(json.dumps(payload, indent=2))


@app.command("find")
def find_segments(
    video_id: str,
    max_segments: int | None = typer.Option(None, help="Maximum segments to return. Defaults to selection.max_segments."),
    api_key: str | None = typer.Option(None, envvar="YOUTUBE_API_KEY", help="YouTube Data API key."),
    output_dir: Path | None = typer.Option(None, "--output-dir", "-o", help="Directory for JSON/CSV/review outputs."),
    export: bool = typer.Option(True, help="Write JSON/CSV/review artifacts for the selected segments."),
    config_path: Path = CONFIG_OPTION,
) -> None:
    """Fetch comments for a video and print its highlight segments."""

    settings = _bootstrap(config_path)
    total_steps = 3 if export else 2

    try:
        comments = _run_with_progress(
            1,
            total_steps,
            "Fetch comments",
            lambda: fetch_video_comments(
                build_youtube_client(api_key or resolve_api_key(settings)),
                video_id,
                max_results=settings.youtube.max_comment_results,
                order=settings.youtube.comment_order,
            ),
        )
        segments = _run_with_progress(
            2,
            total_steps,
            "Select highlight segments",
            lambda: select_segments_from_comments(
                video_id=video_id,
                comments=comments,
                max_segments=max_segments,
                selection=settings.selection,
            ),
        )
        exported: dict[str, Path] = {}
        if export:
            exported = _run_with_progress(
                3,
                total_steps,
                "Export outputs",
                lambda: export_final_outputs(
                    segments,
                    output_dir=output_dir or settings.shorts.output_dir,
                    basename=f"{video_id}_segments",
                ),
            )
    except (RuntimeError, ValueError) as exc:
        logger.error("Segment search failed: %s", exc)
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(
        json.dumps(
            {
                "status": "ok",
                "video_id": video_id,
                "comment_count": len(comments),
                "segments": _segments_payload(segments),
                "outputs": {key: str(path) for key, path in exported.items()},
            },
            indent=2,
        )
    )


@app.command("segments")
def segments_from_file(
    comments_path: Path = typer.Argument(..., help="JSON file with comments or a commentThreads response."),
    video_id: str | None = typer.Option(None, help="Video id for the output. Defaults to the file stem."),
    max_segments: int | None = typer.Option(None, help="Maximum segments to return. Defaults to selection.max_segments."),
    config_path: Path = CONFIG_OPTION,
) -> None:
    """Select highlight segments from a local comments file."""

    settings = _bootstrap(config_path)
    try:
        comments = load_comments_file(comments_path)
    except (FileNotFoundError, ValueError) as exc:
        logger.error("Failed to load comments: %s", exc)
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    segments = select_segments_from_comments(
        video_id=video_id or comments_path.stem,
        comments=comments,
        max_segments=max_segments,
        selection=settings.selection,
    )
    typer.echo(json.dumps(_segments_payload(segments), indent=2))


@propose_app.command("review")
def review_segments(
    segments_path: Path = typer.Argument(..., help="Path to segment JSON contract."),
    output_dir: Path = typer.Option(Path("data/shorts"), "--output-dir", "-o", help="Directory for JSON/CSV/review outputs."),
    basename: str = typer.Option("segments_final", help="Base filename for exported artifacts."),
    source_path: str | None = typer.Option(None, help="Optional local source video for ffmpeg command generation."),
    include_ffmpeg_commands: bool = typer.Option(True, help="Include ffmpeg commands in review manifest when source_path is provided."),
    config_path: Path = CONFIG_OPTION,
) -> None:
    """Export final JSON/CSV contract artifacts and review manifest."""

    settings = _bootstrap(config_path)
    try:
        segments = load_highlight_segments(segments_path)
        exported = export_final_outputs(
            segments,
            output_dir=output_dir,
            basename=basename,
            source_path=source_path,
            include_ffmpeg_commands=include_ffmpeg_commands,
            width=settings.shorts.width,
            height=settings.shorts.height,
            max_duration_seconds=settings.shorts.max_duration_seconds,
        )
    except (RuntimeError, ValueError, FileNotFoundError) as exc:
        logger.error("Review failed: %s", exc)
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(
        json.dumps(
            {key: str(path) for key, path in exported.items()},
            indent=2,
        )
    )


@propose_app.command("render")
def render_segment(
    segments_path: Path = typer.Argument(..., help="Path to segment JSON contract."),
    source_path: str = typer.Argument(..., help="Local source video file."),
    rank: int = typer.Option(1, help="Rank of the segment to render."),
    config_path: Path = CONFIG_OPTION,
) -> None:
    """Render one ranked segment to a vertical Short with its suggested effects."""

    settings = _bootstrap(config_path)
    try:
        segments = load_highlight_segments(segments_path)
        selected = next((segment for segment in segments if segment.rank == rank), None)
        if selected is None:
            raise ValueError(f"No segment with rank {rank} in {segments_path}.")

        output_path = _run_with_progress(
            1,
            1,
            "Render short",
            lambda: render_short(
                source_path=source_path,
                segment=selected,
                output_dir=settings.shorts.output_dir,
                width=settings.shorts.width,
                height=settings.shorts.height,
                max_duration_seconds=settings.shorts.max_duration_seconds,
            ),
        )
    except (RuntimeError, ValueError, FileNotFoundError) as exc:
        logger.error("Render failed: %s", exc)
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(json.dumps({"status": "ok", "rank": rank, "output_path": str(output_path)}, indent=2))


@app.command("serve")
def serve() -> None:
    """Run the MCP server on stdio."""

    run_mcp_server()


if __name__ == "__main__":
    app()
