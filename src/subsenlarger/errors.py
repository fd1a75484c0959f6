from __future__ import annotations

from pathlib import Path
from typing import Sequence


class SubsEnlargerError(Exception):
    """subsenlarger 所有可预期错误的基类。"""


class ToolNotFoundError(SubsEnlargerError, FileNotFoundError):
    """找不到或无法启动 ffmpeg / ffprobe。"""


class ProcessInvocationError(SubsEnlargerError):
    """
    外部进程以非零退出码结束。

    保存完整参数列表与 stderr 末尾若干行，便于在控制台直接定位问题。
    """

    def __init__(
        self,
        step: str,
        args: Sequence[str],
        returncode: int,
        stderr: str = "",
        tail_lines: int = 10,
    ) -> None:
        self.step = step
        self.args_list = [str(a) for a in args]
        self.returncode = returncode
        lines = [line for line in (stderr or "").splitlines() if line.strip()]
        self.stderr_tail = lines[-tail_lines:] if tail_lines > 0 else []
        message = f"{step} 失败 (退出码 {returncode})"
        if self.stderr_tail:
            message += ": " + " | ".join(self.stderr_tail)
        super().__init__(message)


class SubtitleParseError(SubsEnlargerError):
    """字幕文件缺少必要的结构标记（Format 行、[Events] 段落等）。"""


class FieldLookupError(SubsEnlargerError, KeyError):
    """Format 行中不存在所需的字段。"""

    def __init__(self, track_label: str, field: str, available: Sequence[str]) -> None:
        self.track_label = track_label
        self.field = field
        self.available = list(available)
        super().__init__(
            f"{track_label}: Format 行中没有字段 {field!r}（现有字段: {', '.join(self.available)}）"
        )

    def __str__(self) -> str:
        # KeyError 默认会给消息加引号
        return str(self.args[0])


class NumericFormatError(SubsEnlargerError, ValueError):
    """Fontsize / Outline 字段不是合法数字。"""

    def __init__(self, path: str | Path, line_no: int, field: str, value: str) -> None:
        self.path = Path(path)
        self.line_no = line_no
        self.field = field
        self.value = value
        super().__init__(
            f"{self.path.name} 第 {line_no} 行: 字段 {field} 的值 {value!r} 不是合法数字"
        )


class UnsupportedSubtitleError(SubsEnlargerError):
    """容器中包含无法转换为 ASS 文本的字幕（如 PGS / VobSub 图形字幕）。"""
