from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from .config import SubsEnlargerConfig
from .errors import ProcessInvocationError, SubsEnlargerError, UnsupportedSubtitleError
from .media import ToolRunner, extract_subtitles, probe_streams, remux
from .subtitles import StreamInventory, SubtitleTrack, enlarge_subtitle_file
from .subtitles.types import is_image_based_codec


SUPPORTED_SUFFIXES = {".mkv"}

STATUS_DONE = "done"
STATUS_FAILED = "failed"
STATUS_SKIPPED = "skipped"


@dataclass
class FileResult:
    """
    单个输入文件的处理结果。
    """

    source: Path
    status: str
    output: Optional[Path] = None
    tracks: List[SubtitleTrack] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == STATUS_DONE


class SubsEnlargerPipeline:
    """
    字幕放大的主 Pipeline。

    每个文件依次执行：流信息 -> 提取字幕 -> 放大样式 -> 重新封装 -> 清理中间文件。
    各阶段都是独立方法，便于单独测试；单个文件失败不会中断整个批处理。
    """

    def __init__(self, config: SubsEnlargerConfig, runner: Optional[ToolRunner] = None) -> None:
        self.config = config
        self.runner = runner or ToolRunner(
            ffmpeg=config.ffmpeg_path,
            ffprobe=config.ffprobe_path,
            verbose=config.verbose,
        )

    def run_inventory(self, source: Path) -> StreamInventory:
        print("[Inventory] 读取流信息...")
        inventory = probe_streams(source, self.runner)
        counts = inventory.counts
        print(
            f"[Inventory] 视频 {counts.video}，音频 {counts.audio}，"
            f"字幕 {counts.subtitle}，附件 {counts.attachment}"
            + (f"，封面图 {counts.attached_pictures}" if counts.attached_pictures else "")
        )
        unsupported = [t for t in inventory.tracks if is_image_based_codec(t.codec)]
        if unsupported:
            labels = ", ".join(t.label for t in unsupported)
            raise UnsupportedSubtitleError(f"包含无法转换为文本的图形字幕: {labels}")
        return inventory

    def run_extraction(self, source: Path, tracks: List[SubtitleTrack]) -> List[Path]:
        if not tracks:
            print("[Extract] 没有字幕流，跳过提取")
            return []
        print(f"[Extract] 提取 {len(tracks)} 条字幕...")
        return extract_subtitles(source, tracks, self.runner, self.config)

    def run_transform(self, tracks: List[SubtitleTrack]) -> List[Path]:
        outputs: List[Path] = []
        for track in tracks:
            print(f"[Enlarge] {track.label} -> {track.rewritten_path.name}")
            outputs.append(
                enlarge_subtitle_file(
                    track,
                    fontsize_increment=self.config.fontsize_increment,
                    outline_increment=self.config.outline_increment,
                )
            )
        return outputs

    def run_remux(self, source: Path, inventory: StreamInventory) -> Path:
        output = self.config.output_path_for(source)
        print(f"[Remux] 封装新文件: {output.name}")
        try:
            return remux(source, inventory.tracks, inventory.counts, output, self.runner, self.config)
        except ProcessInvocationError:
            # 删除写了一半的输出，中间字幕文件保留
            if output.is_file():
                try:
                    output.unlink()
                    print(f"[Remux] 已删除不完整的输出文件: {output.name}")
                except OSError as exc:
                    print(f"[Remux] 无法删除不完整的输出文件 {output.name}: {exc}")
            raise

    def run_cleanup(self, tracks: List[SubtitleTrack]) -> int:
        if self.config.keep_intermediates:
            print("[Cleanup] 保留中间字幕文件")
            return 0
        removed = 0
        for track in tracks:
            for path in (track.extracted_path, track.rewritten_path):
                if not path.is_file():
                    continue
                try:
                    path.unlink()
                except OSError as exc:
                    print(f"[Cleanup] 无法删除 {path.name}: {exc}")
                    continue
                removed += 1
        print(f"[Cleanup] 已删除 {removed} 个中间文件")
        return removed

    def run_file(self, source: str | Path) -> FileResult:
        """
        处理单个文件。可预期的错误只影响当前文件，记录在 FileResult 中返回。

        重新封装失败时不清理中间文件，保留现场便于排查。
        """
        source_path = Path(source).expanduser().resolve()
        print(f"处理文件: {source_path}")

        if not source_path.is_file():
            print("文件不存在，跳过")
            return FileResult(source=source_path, status=STATUS_SKIPPED, error="文件不存在")
        if source_path.suffix.lower() not in SUPPORTED_SUFFIXES:
            print("不是 mkv 文件，跳过")
            return FileResult(source=source_path, status=STATUS_SKIPPED, error="不是 mkv 文件")

        output = self.config.output_path_for(source_path)
        if output.exists() and not self.config.overwrite:
            message = f"输出文件已存在: {output}（使用 --overwrite 覆盖）"
            print(message)
            return FileResult(source=source_path, status=STATUS_FAILED, error=message)

        tracks: List[SubtitleTrack] = []
        try:
            inventory = self.run_inventory(source_path)
            tracks = inventory.tracks
            self.run_extraction(source_path, tracks)
            self.run_transform(tracks)
            output = self.run_remux(source_path, inventory)
        except (SubsEnlargerError, OSError) as exc:
            print(f"处理失败: {exc}")
            return FileResult(source=source_path, status=STATUS_FAILED, tracks=tracks, error=str(exc))

        self.run_cleanup(tracks)
        print(f"完成: {output}")
        return FileResult(source=source_path, status=STATUS_DONE, output=output, tracks=tracks)

    def run_batch(self, sources: Iterable[str | Path]) -> List[FileResult]:
        results: List[FileResult] = []
        for source in sources:
            results.append(self.run_file(source))
            print()
        return results
