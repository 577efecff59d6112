"""Stream format detection from URL and Content-Type."""

from __future__ import annotations

# (label, url markers, content-type markers) in priority order
_STREAM_TYPES: tuple[tuple[str, tuple[str, ...], tuple[str, ...]], ...] = (
    ("HLS (m3u8)", (".m3u8",), ("mpegurl",)),
    ("DASH", (".mpd",), ("dash",)),
    ("MPEG-TS", (".ts",), ("mp2t",)),
    ("MP4", (".mp4",), ("mp4",)),
    ("FLV", (".flv",), ("flv",)),
    ("MKV", (".mkv",), ("matroska",)),
    ("Video Stream", (), ("video/",)),
    ("Audio Stream", (), ("audio/",)),
)


def detect_stream_type(url: str | None, content_type: str | None) -> str:
    """Guess the stream format; ``"Unknown"`` when nothing matches."""
    url_lower = (url or "").lower()
    ct_lower = (content_type or "").lower()

    for label, url_markers, ct_markers in _STREAM_TYPES:
        if any(m in url_lower for m in url_markers):
            return label
        if any(m in ct_lower for m in ct_markers):
            return label
    return "Unknown"
