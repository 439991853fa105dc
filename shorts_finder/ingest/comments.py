from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from shorts_finder.models import CommentRecord

logger = logging.getLogger(__name__)

COMMENT_THREADS_PAGE_LIMIT = 100


def build_youtube_client(api_key: str | None) -> Any:
    """Build a YouTube Data API v3 client handle from an explicit API key."""

    if not api_key:
        raise ValueError(
            "YouTube API key is not configured. Set YOUTUBE_API_KEY or youtube.api_key in the config file."
        )
    return build("youtube", "v3", developerKey=api_key, cache_discovery=False)


def fetch_video_comments(
    client: Any,
    video_id: str,
    *,
    max_results: int = COMMENT_THREADS_PAGE_LIMIT,
    order: str = "relevance",
) -> list[CommentRecord]:
    """Fetch top-level comments for a video as validated records."""

    comments: list[CommentRecord] = []
    page_token: str | None = None

    while len(comments) < max_results:
        params: dict[str, Any] = {
            "part": "snippet",
            "videoId": video_id,
            "order": order,
            "maxResults": min(max_results - len(comments), COMMENT_THREADS_PAGE_LIMIT),
            "textFormat": "plainText",
        }
        if page_token:
            params["pageToken"] = page_token

        try:
            response = client.commentThreads().list(**params).execute()
        except HttpError as exc:
            if "commentsDisabled" in str(exc):
                raise RuntimeError(f"Comments are disabled for video {video_id}.") from exc
            raise RuntimeError(f"YouTube API request for comments on {video_id} failed: {exc}") from exc

        comments.extend(parse_comment_threads(response))

        page_token = response.get("nextPageToken")
        if not page_token:
            break

    logger.info("Fetched %d comments for video %s", len(comments[:max_results]), video_id)
    return comments[:max_results]


def parse_comment_threads(payload: dict[str, Any]) -> list[CommentRecord]:
    """Reshape a ``commentThreads.list`` response into comment records.

    Items missing a top-level comment snippet are skipped.
    """

    records: list[CommentRecord] = []
    for idx, item in enumerate(payload.get("items", []) or []):
        snippet = _top_level_snippet(item)
        if snippet is None:
            logger.debug("Skipping comment thread item %d without a top-level snippet", idx)
            continue

        text = snippet.get("textOriginal")
        if text is None:
            text = snippet.get("textDisplay", "")

        records.append(CommentRecord(text=str(text), like_count=_to_like_count(snippet.get("likeCount"))))

    return records


def load_comments_file(path: str | Path) -> list[CommentRecord]:
    """Load comments from a JSON file for offline selection runs.

    Accepts either a JSON array of ``{"text", "likeCount"}`` objects or a raw
    ``commentThreads.list`` response.
    """

    source_path = Path(path).expanduser().resolve()
    if not source_path.exists():
        raise FileNotFoundError(f"Comments file not found: {source_path}")

    payload = json.loads(source_path.read_text(encoding="utf-8"))
    if isinstance(payload, dict) and "items" in payload:
        return parse_comment_threads(payload)
    if not isinstance(payload, list):
        raise ValueError("Comments file must be a JSON array or a commentThreads response.")

    records: list[CommentRecord] = []
    for idx, row in enumerate(payload, start=1):
        if not isinstance(row, dict):
            raise ValueError(f"Comment row {idx} must be an object.")
        like_count = row.get("likeCount", row.get("like_count"))
        records.append(CommentRecord(text=str(row.get("text", "")), like_count=_to_like_count(like_count)))

    return records


def _top_level_snippet(item: Any) -> dict[str, Any] | None:
    current: Any = item
    for key in ("snippet", "topLevelComment", "snippet"):
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current if isinstance(current, dict) else None


def _to_like_count(raw_value: Any) -> int:
    if raw_value in (None, "") or isinstance(raw_value, bool):
        return 0
    try:
        return max(0, int(raw_value))
    except (TypeError, ValueError):
        return 0
