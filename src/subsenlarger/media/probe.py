from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, Optional, TYPE_CHECKING

from ..subtitles.types import StreamInventory, SubtitleTrack

if TYPE_CHECKING:
    from .runner import ToolRunner


# 例:
#   Stream #0:0(jpn): Video: h264 (High), yuv420p(progressive), 1920x1080 (default)
#   Stream #0:1[0x2](eng): Audio: aac (LC), 48000 Hz, stereo, fltp (default)
#   Stream #0:3(eng): Subtitle: ass (default) (forced)
#   Stream #0:5: Video: mjpeg (Baseline), yuvj420p, 600x600, 90k tbn (attached pic)
STREAM_LINE_RE = re.compile(
    r"Stream #(?P<file>\d+):(?P<index>\d+)"
    r"(?:\[0x[0-9a-fA-F]+\])?"
    r"(?:\((?P<lang>[^)]*)\))?"
    r": (?P<kind>[A-Za-z]+): (?P<codec>[\w\-]+)"
    r"(?P<rest>.*)$"
)


def _has_flag(rest: str, flag: str) -> bool:
    return f"({flag})" in rest


def parse_stream_listing(text: str | Iterable[str], source: str | Path) -> StreamInventory:
    """
    解析 ffprobe 输出到 stderr 的流列表，返回字幕流与各类型计数。

    不符合格式的行直接跳过、不计数；没有字幕流时返回空列表。
    字幕流按 ffprobe 报告的顺序（即流序号升序）排列。
    """
    source_path = Path(source)
    lines = text.splitlines() if isinstance(text, str) else text
    inventory = StreamInventory()

    for raw in lines:
        # 只匹配以 "Stream #" 开头的行，元数据值中的同样文本不算
        match = STREAM_LINE_RE.match(raw.strip())
        if match is None:
            continue
        kind = match.group("kind")
        rest = match.group("rest") or ""

        if kind == "Video" and _has_flag(rest, "attached pic"):
            inventory.counts.attached_pictures += 1
            continue
        inventory.counts.add(kind)

        if kind != "Subtitle":
            continue
        lang: Optional[str] = match.group("lang") or None
        inventory.tracks.append(
            SubtitleTrack.for_source(
                source_path,
                stream_index=int(match.group("index")),
                codec=match.group("codec"),
                language=lang,
                default=_has_flag(rest, "default"),
                forced=_has_flag(rest, "forced"),
            )
        )
    return inventory


def probe_streams(source: Path, runner: "ToolRunner") -> StreamInventory:
    """
    调用 ffprobe 获取流列表。ffprobe 无法启动时 ToolNotFoundError 直接向上抛出。
    """
    result = runner.run_ffprobe(["-hide_banner", str(source)])
    runner.check(result, "ffprobe 读取流信息")
    # ffprobe 把流列表打印到 stderr
    return parse_stream_listing(result.stderr, source)
