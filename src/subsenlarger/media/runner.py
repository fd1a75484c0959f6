from __future__ import annotations

import shlex
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence

from ..errors import ProcessInvocationError, ToolNotFoundError


@dataclass
class ToolResult:
    args: List[str]
    returncode: int
    stdout: str
    stderr: str


class ToolRunner:
    """
    ffmpeg / ffprobe 的同步调用封装。

    每次调用都阻塞到子进程退出；输出以 UTF-8 解码，无法解码的字节替换掉，
    避免文件名或元数据中的异常编码导致整个流程崩溃。
    """

    def __init__(self, ffmpeg: str = "ffmpeg", ffprobe: str = "ffprobe", verbose: bool = False) -> None:
        self.ffmpeg = ffmpeg
        self.ffprobe = ffprobe
        self.verbose = verbose

    @staticmethod
    def _resolve(executable: str) -> str | None:
        candidate = Path(executable).expanduser()
        if candidate.is_file():
            return str(candidate)
        return shutil.which(executable)

    def ensure_available(self) -> None:
        missing = [exe for exe in (self.ffmpeg, self.ffprobe) if self._resolve(exe) is None]
        if missing:
            raise ToolNotFoundError(
                f"未找到外部工具: {', '.join(missing)}。请安装 ffmpeg，"
                "或通过 --ffmpeg / --ffprobe 指定可执行文件路径。"
            )

    def run(self, args: Sequence[str]) -> ToolResult:
        argv = [str(a) for a in args]
        if self.verbose:
            print("$ " + " ".join(shlex.quote(a) for a in argv))
        try:
            proc = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                stdin=subprocess.DEVNULL,
            )
        except OSError as exc:
            # 不存在、没有执行权限等都视为工具不可用
            raise ToolNotFoundError(f"无法启动外部工具 {argv[0]}: {exc}") from exc
        return ToolResult(args=argv, returncode=proc.returncode, stdout=proc.stdout, stderr=proc.stderr)

    @staticmethod
    def check(result: ToolResult, step: str) -> ToolResult:
        if result.returncode != 0:
            raise ProcessInvocationError(step, result.args, result.returncode, result.stderr)
        return result

    def run_ffprobe(self, args: Sequence[str]) -> ToolResult:
        return self.run([self.ffprobe, *args])

    def run_ffmpeg(self, args: Sequence[str]) -> ToolResult:
        return self.run([self.ffmpeg, *args])
