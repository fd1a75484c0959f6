# tests/conftest.py
from pathlib import Path

import pytest

from subsenlarger.config import SubsEnlargerConfig
from tests.fakes import FakeToolRunner


ASS_FORMAT_ROW = (
    "Format: Name, Fontname, Fontsize, PrimaryColour, SecondaryColour, OutlineColour, "
    "BackColour, Bold, Italic, Underline, StrikeOut, ScaleX, ScaleY, Spacing, Angle, "
    "BorderStyle, Outline, Shadow, Alignment, MarginL, MarginR, MarginV, Encoding"
)
ASS_STYLE_ROW = "Style: Default,Arial,20,&Hffffff,&Hffffff,&H0,&H0,0,0,0,0,100,100,0,0,1,1,0,2,10,10,10,0"
ASS_STYLE_ROW_LARGE = "Style: Default,Arial,40,&Hffffff,&Hffffff,&H0,&H0,0,0,0,0,100,100,0,0,1,6,0,2,10,10,10,0"

ASS_TEXT = "\n".join(
    [
        "[Script Info]",
        "; Script generated by FFmpeg/Lavc",
        "ScriptType: v4.00+",
        "PlayResX: 384",
        "PlayResY: 288",
        "",
        "[V4+ Styles]",
        ASS_FORMAT_ROW,
        ASS_STYLE_ROW,
        "Style: Signs,Times New Roman,36,&H00FFFF00,&H000000FF,&H00000000,&H80000000,-1,0,0,0,100,100,0,0,1,2.5,1,8,20,20,30,1",
        "",
        "[Events]",
        "Format: Layer, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text",
        "Dialogue: 0,0:00:01.00,0:00:02.50,Default,,0,0,0,,Hello, world!",
        "Style: not a style row, just dialogue text",
        "Dialogue: 0,0:00:03.00,0:00:04.00,Signs,,0,0,0,,{\\pos(100,200)}Sign",
        "",
    ]
)

PROBE_STDERR = """Input #0, matroska,webm, from 'Show.mkv':
  Metadata:
    title           : Show
  Duration: 00:23:40.02, start: 0.000000, bitrate: 2542 kb/s
  Chapters:
    Chapter #0:0: start 0.000000, end 90.000000
      Metadata:
        title           : Opening
  Stream #0:0: Video: hevc (Main 10), yuv420p10le(tv), 1920x1080, SAR 1:1 DAR 16:9, 23.98 fps, 23.98 tbr, 1k tbn (default)
  Stream #0:1(jpn): Audio: aac (LC), 48000 Hz, stereo, fltp (default)
    Metadata:
      title           : Japanese
  Stream #0:2(eng): Subtitle: ass (default)
  Stream #0:3(spa): Subtitle: subrip (forced)
  Stream #0:4: Attachment: ttf
    Metadata:
      filename        : Roboto.ttf
      mimetype        : application/x-truetype-font
  Stream #0:5: Video: mjpeg (Baseline), yuvj420p(pc, bt470bg/unknown/unknown), 600x600 [SAR 1:1 DAR 1:1], 90k tbr, 90k tbn (attached pic)
"""

NO_SUBS_PROBE_STDERR = """Input #0, matroska,webm, from 'Plain.mkv':
  Stream #0:0: Video: h264 (High), yuv420p(progressive), 1280x720, 25 fps, 1k tbn (default)
  Stream #0:1(eng): Audio: opus, 48000 Hz, stereo, fltp (default)
"""

SRT_AS_ASS_TEXT = "\n".join(
    [
        "[Script Info]",
        "; Script generated by FFmpeg/Lavc",
        "ScriptType: v4.00+",
        "PlayResX: 384",
        "PlayResY: 288",
        "ScaledBorderAndShadow: yes",
        "",
        "[V4+ Styles]",
        ASS_FORMAT_ROW,
        "Style: Default,Arial,16,&Hffffff,&Hffffff,&H0,&H0,0,0,0,0,100,100,0,0,1,1,0,2,10,10,10,0",
        "",
        "[Events]",
        "Format: Layer, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text",
        "Dialogue: 0,0:00:01.00,0:00:02.00,Default,,0,0,0,,Hola",
        "",
    ]
)


@pytest.fixture
def mkv_file(tmp_path: Path) -> Path:
    """空的 mkv 文件，FakeToolRunner 不会读取其内容。"""
    path = tmp_path / "Show.mkv"
    path.write_bytes(b"")
    return path


@pytest.fixture
def config() -> SubsEnlargerConfig:
    return SubsEnlargerConfig()


@pytest.fixture
def fake_runner() -> FakeToolRunner:
    return FakeToolRunner(
        probe_stderr=PROBE_STDERR,
        subtitles={2: ASS_TEXT, 3: SRT_AS_ASS_TEXT},
    )
