from __future__ import annotations

import argparse
import sys
from decimal import Decimal
from typing import List

from .env import load_dotenv_if_present
from .config import SubsEnlargerConfig, parse_increment
from .errors import ToolNotFoundError
from .pipeline import STATUS_DONE, STATUS_FAILED, STATUS_SKIPPED, FileResult, SubsEnlargerPipeline


def _increment_arg(value: str) -> Decimal:
    try:
        return parse_increment(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="subsenlarger",
        description="subsenlarger: 放大 mkv 文件内嵌字幕的字号与描边，并重新封装为新文件。",
    )
    parser.add_argument(
        "inputs",
        nargs="+",
        type=str,
        help="一个或多个 mkv 文件路径，按顺序逐个处理。",
    )
    parser.add_argument(
        "--ffmpeg",
        type=str,
        default=None,
        help="ffmpeg 可执行文件路径（默认: PATH 中的 ffmpeg，可通过环境变量 SUBS_ENLARGER_FFMPEG 配置）。",
    )
    parser.add_argument(
        "--ffprobe",
        type=str,
        default=None,
        help="ffprobe 可执行文件路径（默认: PATH 中的 ffprobe，可通过环境变量 SUBS_ENLARGER_FFPROBE 配置）。",
    )
    parser.add_argument(
        "--fontsize-increment",
        type=int,
        default=None,
        help="字号增加量（默认: 20）。",
    )
    parser.add_argument(
        "--outline-increment",
        type=_increment_arg,
        default=None,
        help="描边宽度增加量，可为小数（默认: 5）。",
    )
    parser.add_argument(
        "--keep-intermediates",
        action="store_true",
        default=None,
        help="成功后保留提取与放大后的中间字幕文件（失败时总是保留）。",
    )
    parser.add_argument(
        "--overwrite",
        action="store_true",
        help="输出文件已存在时覆盖。",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="打印每一条 ffmpeg / ffprobe 命令。",
    )
    return parser


def _print_summary(results: List[FileResult]) -> None:
    done = [r for r in results if r.status == STATUS_DONE]
    failed = [r for r in results if r.status == STATUS_FAILED]
    skipped = [r for r in results if r.status == STATUS_SKIPPED]
    print(f"全部完成: 成功 {len(done)}，失败 {len(failed)}，跳过 {len(skipped)}")
    for result in failed:
        print(f"   失败: {result.source.name}: {result.error}")
    for result in skipped:
        print(f"   跳过: {result.source.name}: {result.error}")


def main(argv: list[str] | None = None) -> int:
    # 确保在解析参数和使用配置之前加载 .env 中的环境变量
    load_dotenv_if_present()
    if argv is None:
        argv = sys.argv[1:]

    parser = build_arg_parser()
    args = parser.parse_args(argv)

    try:
        config = SubsEnlargerConfig.from_args(
            ffmpeg_path=args.ffmpeg,
            ffprobe_path=args.ffprobe,
            fontsize_increment=args.fontsize_increment,
            outline_increment=args.outline_increment,
            keep_intermediates=args.keep_intermediates,
            overwrite=args.overwrite,
            verbose=args.verbose,
        )
        pipeline = SubsEnlargerPipeline(config)
        pipeline.runner.ensure_available()
        results = pipeline.run_batch(args.inputs)
        _print_summary(results)
        return 0 if all(r.status != STATUS_FAILED for r in results) else 1
    except ToolNotFoundError as exc:
        print(exc)
        return 1
    except KeyboardInterrupt:
        print("\n用户中断，中间文件已保留")
        return 1
    except Exception as exc:
        print(f"处理失败: {exc}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
