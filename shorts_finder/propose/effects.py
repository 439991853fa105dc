from __future__ import annotations

DEFAULT_EFFECTS = ("blur-background",)

EFFECTS_BY_SEGMENT_TYPE: dict[str, tuple[str, ...]] = {
    "action": ("speedup", "fade"),
    "highlight": ("slowdown", "blur-background"),
    "transition": ("fade",),
    "reaction": ("mirror", "fade"),
}


def suggest_effects(segment_type: str) -> list[str]:
    """Map a classified segment type to recommended post-processing effects."""

    return list(EFFECTS_BY_SEGMENT_TYPE.get(segment_type, DEFAULT_EFFECTS))
