from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

DEFAULT_CONFIG_PATH = Path("configs/default.yaml")
ENV_PREFIX = "SHORTS_FINDER_"


class SelectionSettings(BaseModel):
    window_seconds: int = Field(default=60, gt=0)
    max_segments: int = Field(default=3, ge=0)
    marker_saturation: int = Field(default=5, gt=0)
    type_diversity_cap: int = Field(default=3, gt=0)
    suppress_overlaps: bool = False


class YouTubeSettings(BaseModel):
    api_key: str | None = None
    max_comment_results: int = Field(default=100, gt=0)
    comment_order: str = "relevance"


class ShortsSettings(BaseModel):
    output_dir: Path = Path("data/shorts")
    width: int = 1080
    height: int = 1920
    max_duration_seconds: int = 60


class LoggingSettings(BaseModel):
    level: str = "INFO"


class Settings(BaseModel):
    selection: SelectionSettings = Field(default_factory=SelectionSettings)
    youtube: YouTubeSettings = Field(default_factory=YouTubeSettings)
    shorts: ShortsSettings = Field(default_factory=ShortsSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load typed settings from YAML with environment-variable overrides.

    The default config file is optional; an explicitly requested one must exist.
    """

    explicit_path = config_path or os.getenv(f"{ENV_PREFIX}CONFIG")
    resolved_path = Path(explicit_path or DEFAULT_CONFIG_PATH)

    if resolved_path.exists():
        raw_config = yaml.safe_load(resolved_path.read_text(encoding="utf-8")) or {}
    elif explicit_path and resolved_path != DEFAULT_CONFIG_PATH:
        raise FileNotFoundError(f"Config file not found: {resolved_path}")
    else:
        raw_config = {}

    data = Settings.model_validate(raw_config).model_dump(mode="python")

    for key, raw_value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue

        suffix = key[len(ENV_PREFIX) :]
        if suffix == "CONFIG":
            continue

        path = [part.lower() for part in suffix.split("__")]
        _apply_override(data, path, raw_value)

    return Settings.model_validate(data)


def _apply_override(data: dict[str, Any], path: list[str], raw_value: str) -> None:
    current: Any = data
    for segment in path[:-1]:
        if not isinstance(current, dict) or segment not in current:
            return
        current = current[segment]

    if not isinstance(current, dict):
        return

    final_key = path[-1]
    if final_key not in current:
        return

    current[final_key] = _coerce_value(raw_value, current[final_key])


def _coerce_value(raw_value: str, existing_value: Any) -> Any:
    if isinstance(existing_value, bool):
        return raw_value.lower() in {"1", "true", "yes", "on"}
    if isinstance(existing_value, int) and not isinstance(existing_value, bool):
        return int(raw_value)
    if isinstance(existing_value, float):
        return float(raw_value)
    if isinstance(existing_value, list | dict):
        return json.loads(raw_value)
    if isinstance(existing_value, Path):
        return Path(raw_value)
    return raw_value
