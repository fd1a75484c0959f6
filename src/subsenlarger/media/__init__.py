from __future__ import annotations

from .runner import ToolResult, ToolRunner
from .probe import parse_stream_listing, probe_streams
from .extract import build_extract_args, extract_subtitles
from .remux import build_remux_args, remux

__all__ = [
    "ToolResult",
    "ToolRunner",
    "parse_stream_listing",
    "probe_streams",
    "build_extract_args",
    "extract_subtitles",
    "build_remux_args",
    "remux",
]
