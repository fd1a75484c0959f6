from __future__ import annotations

from pathlib import Path
from typing import List, Sequence, TYPE_CHECKING

from ..subtitles.types import StreamCounts, SubtitleTrack

if TYPE_CHECKING:
    from ..config import SubsEnlargerConfig
    from .runner import ToolRunner


def _disposition_args(tracks: Sequence[SubtitleTrack]) -> List[str]:
    """
    外部字幕输入不携带 default/forced 标记，这里按原容器中的标记逐条恢复。
    原容器中没有任何 default 字幕时，把第一条字幕设为 default。
    """
    args: List[str] = []
    any_default = any(track.default for track in tracks)
    for out_idx, track in enumerate(tracks):
        flags = []
        if track.default or (not any_default and out_idx == 0):
            flags.append("default")
        if track.forced:
            flags.append("forced")
        args += [f"-disposition:s:{out_idx}", "+".join(flags) if flags else "0"]
    return args


def _metadata_args(tracks: Sequence[SubtitleTrack], counts: StreamCounts) -> List[str]:
    # 全局元数据不会级联到各条流，需要逐类型、逐序号单独映射
    args: List[str] = ["-map_metadata", "0"]
    for idx in range(counts.video):
        args += [f"-map_metadata:s:v:{idx}", f"0:s:V:{idx}"]
    for idx in range(counts.audio):
        args += [f"-map_metadata:s:a:{idx}", f"0:s:a:{idx}"]
    for idx in range(len(tracks)):
        args += [f"-map_metadata:s:s:{idx}", f"0:s:s:{idx}"]
    for idx in range(counts.attachment):
        args += [f"-map_metadata:s:t:{idx}", f"0:s:t:{idx}"]
    return args


def build_remux_args(
    source: Path,
    tracks: Sequence[SubtitleTrack],
    counts: StreamCounts,
    output: Path,
    config: "SubsEnlargerConfig",
) -> List[str]:
    """
    构造重新封装的 ffmpeg 参数。

    - 输入依次为原始容器和每条放大后的字幕文件；
    - 视频使用 0:V（排除被识别为视频流的封面图），音频 0:a；
    - 字幕全部来自外部的放大字幕输入，而不是原容器内的字幕流：
      原容器带封面图时直接 1:1 复制会导致字幕播放只剩一行；
    - 附件（字体）与章节单独映射，不存在时忽略；
    - 全部流 -c copy，不重新编码。
    """
    args: List[str] = ["-hide_banner", "-nostdin", "-v", config.loglevel]
    args.append("-y" if config.overwrite else "-n")
    args += ["-i", str(source)]
    for track in tracks:
        args += ["-i", str(track.rewritten_path)]

    args += ["-map", "0:V?", "-map", "0:a?"]
    for input_idx, _track in enumerate(tracks, start=1):
        args += ["-map", f"{input_idx}:s"]
    args += ["-map", "0:t?", "-map_chapters", "0"]

    args += ["-c", "copy"]
    args += _metadata_args(tracks, counts)
    args += _disposition_args(tracks)
    args.append(str(output))
    return args


def remux(
    source: Path,
    tracks: Sequence[SubtitleTrack],
    counts: StreamCounts,
    output: Path,
    runner: "ToolRunner",
    config: "SubsEnlargerConfig",
) -> Path:
    result = runner.run_ffmpeg(build_remux_args(source, tracks, counts, output, config))
    runner.check(result, "ffmpeg 重新封装")
    return output
