from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional


STYLE_TABLE_CODECS = frozenset({"ass", "ssa"})
IMAGE_BASED_CODECS = frozenset(
    {"hdmv_pgs_subtitle", "dvd_subtitle", "dvb_subtitle", "dvb_teletext", "xsub"}
)

# 提取阶段统一输出为 ASS 文本
EXTRACTED_EXT = "ass"


def is_image_based_codec(codec: str) -> bool:
    return codec.lower() in IMAGE_BASED_CODECS


class StyleCapability(Enum):
    """
    字幕编码是否自带样式表。

    STYLE_TABLE: ASS/SSA，样式行中包含 Fontsize / Outline 字段，可以直接做加法；
    PLAIN_TEXT: SRT 等纯文本字幕，转换为 ASS 后只有 ffmpeg 生成的默认样式，
                整行替换为预设的大号样式。
    """

    STYLE_TABLE = "style_table"
    PLAIN_TEXT = "plain_text"

    @classmethod
    def from_codec(cls, codec: str) -> "StyleCapability":
        if codec.lower() in STYLE_TABLE_CODECS:
            return cls.STYLE_TABLE
        return cls.PLAIN_TEXT


@dataclass
class SubtitleTrack:
    """
    容器中的一条字幕流，以及它在处理过程中对应的中间文件。
    """

    stream_index: int
    codec: str
    extracted_path: Path
    rewritten_path: Path
    language: Optional[str] = None
    default: bool = False
    forced: bool = False

    @classmethod
    def for_source(
        cls,
        source: Path,
        stream_index: int,
        codec: str,
        language: Optional[str] = None,
        default: bool = False,
        forced: bool = False,
    ) -> "SubtitleTrack":
        base = source.with_suffix("")
        return cls(
            stream_index=stream_index,
            codec=codec.lower(),
            extracted_path=base.with_name(f"{base.name}.{stream_index}.{EXTRACTED_EXT}"),
            rewritten_path=base.with_name(f"{base.name}.{stream_index}.large.{EXTRACTED_EXT}"),
            language=language,
            default=default,
            forced=forced,
        )

    @property
    def capability(self) -> StyleCapability:
        return StyleCapability.from_codec(self.codec)

    @property
    def label(self) -> str:
        lang = f", {self.language}" if self.language else ""
        return f"字幕流 #{self.stream_index} ({self.codec}{lang})"


@dataclass
class StreamCounts:
    """
    按流类型（Video / Audio / Subtitle / Attachment ...）统计的数量。

    封面图（attached pic）虽然被 ffmpeg 报告为 Video，但单独计入
    attached_pictures，不计入 Video。
    """

    by_kind: Dict[str, int] = field(default_factory=dict)
    attached_pictures: int = 0

    def add(self, kind: str) -> None:
        self.by_kind[kind] = self.by_kind.get(kind, 0) + 1

    def get(self, kind: str) -> int:
        return self.by_kind.get(kind, 0)

    @property
    def video(self) -> int:
        return self.get("Video")

    @property
    def audio(self) -> int:
        return self.get("Audio")

    @property
    def subtitle(self) -> int:
        return self.get("Subtitle")

    @property
    def attachment(self) -> int:
        return self.get("Attachment")


@dataclass
class StreamInventory:
    tracks: List[SubtitleTrack] = field(default_factory=list)
    counts: StreamCounts = field(default_factory=StreamCounts)
