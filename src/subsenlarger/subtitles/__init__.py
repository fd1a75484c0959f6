from __future__ import annotations

from .types import StreamCounts, StreamInventory, StyleCapability, SubtitleTrack
from .style import DEFAULT_LARGE_STYLE, enlarge_stream, enlarge_subtitle_file, parse_format_row

__all__ = [
    "StreamCounts",
    "StreamInventory",
    "StyleCapability",
    "SubtitleTrack",
    "DEFAULT_LARGE_STYLE",
    "enlarge_stream",
    "enlarge_subtitle_file",
    "parse_format_row",
]
