from __future__ import annotations

import logging
import os
from typing import Any

from fastmcp import FastMCP

from shorts_finder.config import Settings, load_settings
from shorts_finder.ingest.comments import build_youtube_client
from shorts_finder.logging_config import configure_logging
from shorts_finder.pipeline_segment_finder import find_highlight_segments

logger = logging.getLogger(__name__)

mcp = FastMCP(name="ShortsFinder")


def resolve_api_key(settings: Settings) -> str | None:
    return settings.youtube.api_key or os.getenv("YOUTUBE_API_KEY")


def find_short_segments(video_id: str, max_segments: int | None = None) -> list[dict[str, Any]]:
    """Find optimal segments for Shorts in a YouTube video.

    Uses time references in viewer comments (e.g. "2:15 was hilarious") weighted
    by their like counts to locate 60-second windows worth clipping.

    Args:
        video_id: The YouTube video id.
        max_segments: Maximum number of segments to return. Defaults to the
            configured ``selection.max_segments``.

    Returns:
        list[dict]: Ranked segments with startTime, duration, confidence and
        suggestedEffects.
    """

    settings = load_settings()
    client = build_youtube_client(resolve_api_key(settings))
    segments = find_highlight_segments(
        video_id,
        max_segments,
        client=client,
        selection=settings.selection,
        youtube=settings.youtube,
    )
    logger.info("find_short_segments(%s) returned %d segments", video_id, len(segments))
    return [segment.to_payload() for segment in segments]


mcp.tool(name="find_short_segments")(find_short_segments)


def main() -> None:
    configure_logging(load_settings().logging)
    logger.info("Starting ShortsFinder MCP server on stdio")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
