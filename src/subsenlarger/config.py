from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
import os
from pathlib import Path
from typing import Optional


DEFAULT_OUTPUT_SUFFIX = " (enlarged subs)"
OUTPUT_EXT = ".mkv"


def parse_increment(value: str | Decimal) -> Decimal:
    """
    把描边增加量解析为有限的 Decimal，非法值抛出 ValueError。
    """
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"不是合法数字: {value!r}") from None
    if not number.is_finite():
        raise ValueError(f"不是有限数字: {value!r}")
    return number


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class SubsEnlargerConfig:
    """
    核心配置对象。

    所有字段都只作用于一次批处理，不在文件之间保存任何状态。
    """

    ffmpeg_path: str = "ffmpeg"
    ffprobe_path: str = "ffprobe"
    fontsize_increment: int = 20
    outline_increment: Decimal = Decimal("5")
    output_suffix: str = DEFAULT_OUTPUT_SUFFIX
    # 成功后是否保留提取/改写出的中间字幕文件；失败时总是保留
    keep_intermediates: bool = False
    overwrite: bool = False
    loglevel: str = "warning"
    verbose: bool = False

    def output_path_for(self, source: Path) -> Path:
        return source.with_name(f"{source.stem}{self.output_suffix}{OUTPUT_EXT}")

    @classmethod
    def from_args(
        cls,
        ffmpeg_path: Optional[str | Path] = None,
        ffprobe_path: Optional[str | Path] = None,
        fontsize_increment: Optional[int] = None,
        outline_increment: Optional[str | Decimal] = None,
        keep_intermediates: Optional[bool] = None,
        overwrite: bool = False,
        verbose: bool = False,
    ) -> "SubsEnlargerConfig":
        # 显式参数优先，其次读取环境变量，最后使用默认值
        if ffmpeg_path is None:
            ffmpeg_path = os.getenv("SUBS_ENLARGER_FFMPEG", "").strip() or "ffmpeg"
        if ffprobe_path is None:
            ffprobe_path = os.getenv("SUBS_ENLARGER_FFPROBE", "").strip() or "ffprobe"

        if fontsize_increment is None:
            env_value = os.getenv("SUBS_ENLARGER_FONTSIZE_INCREMENT", "20")
            try:
                fontsize_value = int(env_value)
            except ValueError:
                fontsize_value = 20
        else:
            fontsize_value = fontsize_increment

        if outline_increment is None:
            env_value = os.getenv("SUBS_ENLARGER_OUTLINE_INCREMENT", "5")
            try:
                outline_value = parse_increment(env_value)
            except ValueError:
                outline_value = Decimal("5")
        else:
            # 显式传入的值不做回退，错误直接抛给调用方
            outline_value = parse_increment(outline_increment)

        if keep_intermediates is None:
            keep_intermediates = _env_flag("SUBS_ENLARGER_KEEP_INTERMEDIATES")

        return cls(
            ffmpeg_path=str(ffmpeg_path),
            ffprobe_path=str(ffprobe_path),
            fontsize_increment=fontsize_value,
            outline_increment=outline_value,
            keep_intermediates=keep_intermediates,
            overwrite=overwrite,
            verbose=verbose,
        )
