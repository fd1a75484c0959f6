from __future__ import annotations

from pathlib import Path
from typing import List, Sequence, TYPE_CHECKING

from ..subtitles.types import StyleCapability, SubtitleTrack

if TYPE_CHECKING:
    from ..config import SubsEnlargerConfig
    from .runner import ToolRunner


def _subtitle_codec_for(track: SubtitleTrack) -> str:
    # ASS/SSA 直接复制；SRT 等纯文本字幕由 ffmpeg 转为 ASS
    if track.capability is StyleCapability.STYLE_TABLE:
        return "copy"
    return "ass"


def build_extract_args(
    source: Path,
    tracks: Sequence[SubtitleTrack],
    config: "SubsEnlargerConfig",
) -> List[str]:
    """
    构造一次 ffmpeg 调用的参数：每条字幕流单独 map 到各自的输出文件。
    """
    args: List[str] = ["-hide_banner", "-nostdin", "-v", config.loglevel, "-y", "-i", str(source)]
    for track in tracks:
        args += [
            "-map",
            f"0:{track.stream_index}",
            "-c:s",
            _subtitle_codec_for(track),
            str(track.extracted_path),
        ]
    return args


def extract_subtitles(
    source: Path,
    tracks: Sequence[SubtitleTrack],
    runner: "ToolRunner",
    config: "SubsEnlargerConfig",
) -> List[Path]:
    """
    从容器中提取全部字幕流。没有字幕流时不调用 ffmpeg。

    只检查退出码；输出文件是否存在由后续的样式改写步骤负责检查。
    """
    if not tracks:
        return []
    result = runner.run_ffmpeg(build_extract_args(source, tracks, config))
    runner.check(result, "ffmpeg 提取字幕")
    return [track.extracted_path for track in tracks]
