"""Default configuration blobs attached to newly created sessions."""

from typing import Any

DEFAULT_SESSION_HIGHLIGHTS = [
    "2 or 5 minute rotations",
    "Browser-based video booths",
    "Automated pair shuffling",
]

DEFAULT_HOST_TIPS = [
    "Set expectations in lobby chat before the first rotation.",
    "Use spotlight announcements between rounds for sponsor plugs.",
]


def default_video_config(rotation_duration_seconds: int) -> dict[str, Any]:
    return {
        "provider": "speednet-video",
        "mode": "peer_to_peer",
        "layout": "speed_networking",
        "features": {
            "screenShare": False,
            "stageBroadcast": True,
            "breakoutTimer": True,
            "chat": True,
            "businessCardSharing": True,
        },
        "bitrate": {"maxKbps": 900, "adaptive": True},
        "clientLoadShare": 0.82,
        "slotDurationSeconds": rotation_duration_seconds,
    }


def default_showcase_config(overrides: dict[str, Any] | None = None) -> dict[str, Any]:
    overrides = overrides or {}
    return {
        "heroImage": overrides.get("heroImage"),
        "sessionHighlights": overrides.get("sessionHighlights", list(DEFAULT_SESSION_HIGHLIGHTS)),
        "cta": overrides.get("cta", "Reserve your seat"),
        "hostTips": overrides.get("hostTips", list(DEFAULT_HOST_TIPS)),
    }


def build_video_config(
    rotation_duration_seconds: int, overrides: dict[str, Any] | None = None
) -> dict[str, Any]:
    """Defaults merged with caller overrides (shallow, caller wins)."""
    return {**default_video_config(rotation_duration_seconds), **(overrides or {})}


def build_showcase_config(overrides: dict[str, Any] | None = None) -> dict[str, Any]:
    return {**default_showcase_config(overrides), **(overrides or {})}
