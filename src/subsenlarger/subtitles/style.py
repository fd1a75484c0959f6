from __future__ import annotations

from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Dict, List, Optional, TextIO

from ..errors import FieldLookupError, NumericFormatError, SubtitleParseError
from .types import StyleCapability, SubtitleTrack


FORMAT_PREFIX = "Format:"
STYLE_PREFIX = "Style:"
EVENTS_HEADER = "[Events]"

FONTSIZE_FIELD = "Fontsize"
OUTLINE_FIELD = "Outline"

DEFAULT_FONTSIZE_INCREMENT = 20
DEFAULT_OUTLINE_INCREMENT = Decimal("5")

# 与 ffmpeg 将 SRT 转为 ASS 时生成的默认样式同列序，字号 32、描边 3.7
DEFAULT_LARGE_STYLE = (
    "Style: Default,Arial,32,&Hffffff,&Hffffff,&H0,&H0,"
    "0,0,0,0,100,100,0,0,1,3.7,0,2,10,10,10,0"
)


def _split_line_ending(line: str) -> tuple[str, str]:
    body = line.rstrip("\r\n")
    return body, line[len(body):]


def parse_format_row(line: str) -> List[str]:
    """
    解析 "Format: Name, Fontname, Fontsize, ..." 行，返回按位置排列的字段名。
    """
    body, _ = _split_line_ending(line)
    if not body.startswith(FORMAT_PREFIX):
        raise SubtitleParseError(f"不是 Format 行: {body!r}")
    return [name.strip() for name in body[len(FORMAT_PREFIX):].split(",")]


def build_field_positions(field_names: List[str]) -> Dict[str, int]:
    positions: Dict[str, int] = {}
    for idx, name in enumerate(field_names):
        # 重名字段以第一次出现为准
        positions.setdefault(name, idx)
    return positions


def _lookup(positions: Dict[str, int], field: str, track: SubtitleTrack) -> int:
    try:
        return positions[field]
    except KeyError:
        raise FieldLookupError(track.label, field, list(positions)) from None


def _parse_int(value: str, path: Path, line_no: int, field: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise NumericFormatError(path, line_no, field, value) from None


def _parse_decimal(value: str, path: Path, line_no: int, field: str) -> Decimal:
    try:
        number = Decimal(value)
    except InvalidOperation:
        raise NumericFormatError(path, line_no, field, value) from None
    if not number.is_finite():
        raise NumericFormatError(path, line_no, field, value)
    return number


def enlarge_style_row(
    line: str,
    field_positions: Dict[str, int],
    track: SubtitleTrack,
    line_no: int = 0,
    field_count: Optional[int] = None,
    fontsize_increment: int = DEFAULT_FONTSIZE_INCREMENT,
    outline_increment: Decimal = DEFAULT_OUTLINE_INCREMENT,
) -> str:
    """
    放大单行 "Style:" 的字号与描边，其余字段原样保留。

    - Fontsize 按整数解析后加 fontsize_increment；
    - Outline 按十进制解析后加 outline_increment，保持原有的小数写法
      （"2" -> "7"，"1.5" -> "6.5"，不会凭空多出小数点）；
    - 纯文本来源（PLAIN_TEXT）的字幕直接替换为 DEFAULT_LARGE_STYLE。

    返回的行保留原始换行符。
    """
    body, ending = _split_line_ending(line)
    if track.capability is StyleCapability.PLAIN_TEXT:
        return DEFAULT_LARGE_STYLE + ending

    fields = [value.strip() for value in body[len(STYLE_PREFIX):].split(",")]
    if field_count is None:
        field_count = max(field_positions.values(), default=-1) + 1
    expected = field_count
    if len(fields) != expected:
        raise SubtitleParseError(
            f"{track.label} 第 {line_no} 行: Style 行有 {len(fields)} 个字段，"
            f"与 Format 行的 {expected} 个字段不一致"
        )

    path = track.extracted_path
    size_idx = _lookup(field_positions, FONTSIZE_FIELD, track)
    outline_idx = _lookup(field_positions, OUTLINE_FIELD, track)

    fontsize = _parse_int(fields[size_idx], path, line_no, FONTSIZE_FIELD)
    fields[size_idx] = str(fontsize + fontsize_increment)

    outline = _parse_decimal(fields[outline_idx], path, line_no, OUTLINE_FIELD)
    fields[outline_idx] = format(outline + outline_increment, "f")

    return "Style: " + ",".join(fields) + ending


def enlarge_stream(
    reader: TextIO,
    writer: TextIO,
    track: SubtitleTrack,
    fontsize_increment: int = DEFAULT_FONTSIZE_INCREMENT,
    outline_increment: Decimal = DEFAULT_OUTLINE_INCREMENT,
) -> int:
    """
    逐行扫描 ASS 文本并写出放大后的版本，返回被改写的 Style 行数。

    1. 第一条 "Format:" 行之前（含该行）原样复制，并解析出字段名；
    2. 直到 "[Events]" 行（含）为止，改写其中的 "Style:" 行；
    3. 其余内容（事件表、Dialogue 行）原样复制，不再解析。

    任一结构标记缺失导致读到文件末尾时抛出 SubtitleParseError。
    """
    line_no = 0
    field_names: Optional[List[str]] = None
    field_positions: Dict[str, int] = {}

    for line in reader:
        line_no += 1
        writer.write(line)
        if line.startswith(FORMAT_PREFIX):
            field_names = parse_format_row(line)
            field_positions = build_field_positions(field_names)
            break
    if field_names is None:
        raise SubtitleParseError(f"{track.label}: 文件中没有找到 Format 行")

    rewritten = 0
    found_events = False
    for line in reader:
        line_no += 1
        if line.startswith(STYLE_PREFIX):
            writer.write(
                enlarge_style_row(
                    line,
                    field_positions,
                    track,
                    line_no=line_no,
                    field_count=len(field_names),
                    fontsize_increment=fontsize_increment,
                    outline_increment=outline_increment,
                )
            )
            rewritten += 1
            continue
        writer.write(line)
        if _split_line_ending(line)[0] == EVENTS_HEADER:
            found_events = True
            break
    if not found_events:
        raise SubtitleParseError(f"{track.label}: 文件中没有找到 {EVENTS_HEADER} 段落")

    writer.write(reader.read())
    return rewritten


def enlarge_subtitle_file(
    track: SubtitleTrack,
    fontsize_increment: int = DEFAULT_FONTSIZE_INCREMENT,
    outline_increment: Decimal = DEFAULT_OUTLINE_INCREMENT,
) -> Path:
    """
    读取 track.extracted_path，写出放大后的 track.rewritten_path。

    失败时删除写了一半的输出文件，提取出的原始字幕保留用于排查。
    """
    src = track.extracted_path
    dst = track.rewritten_path
    if not src.is_file():
        raise SubtitleParseError(f"{track.label}: 提取出的字幕文件不存在: {src}")

    # newline="" 保证换行符原样写回
    try:
        with src.open("r", encoding="utf-8", newline="") as reader, dst.open(
            "w", encoding="utf-8", newline=""
        ) as writer:
            enlarge_stream(
                reader,
                writer,
                track,
                fontsize_increment=fontsize_increment,
                outline_increment=outline_increment,
            )
    except UnicodeDecodeError as exc:
        _remove_partial(dst)
        raise SubtitleParseError(f"{track.label}: 字幕文件不是 UTF-8 文本: {exc}") from exc
    except OSError as exc:
        _remove_partial(dst)
        raise SubtitleParseError(f"{track.label}: 无法读写字幕文件: {exc}") from exc
    except Exception:
        _remove_partial(dst)
        raise
    return dst


def _remove_partial(path: Path) -> None:
    # 只删除普通文件，删除失败时保留原始错误
    if path.is_file():
        try:
            path.unlink()
        except OSError:
            pass
