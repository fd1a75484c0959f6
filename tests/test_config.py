# tests/test_config.py
from decimal import Decimal
from pathlib import Path

import pytest

from subsenlarger.config import SubsEnlargerConfig
from subsenlarger.env import load_dotenv_if_present


def test_defaults(monkeypatch):
    for name in (
        "SUBS_ENLARGER_FFMPEG",
        "SUBS_ENLARGER_FFPROBE",
        "SUBS_ENLARGER_FONTSIZE_INCREMENT",
        "SUBS_ENLARGER_OUTLINE_INCREMENT",
        "SUBS_ENLARGER_KEEP_INTERMEDIATES",
    ):
        monkeypatch.delenv(name, raising=False)
    cfg = SubsEnlargerConfig.from_args()
    assert cfg.ffmpeg_path == "ffmpeg" and cfg.ffprobe_path == "ffprobe"
    assert cfg.fontsize_increment == 20
    assert cfg.outline_increment == Decimal("5")
    assert cfg.keep_intermediates is False


def test_env_values_are_used(monkeypatch):
    monkeypatch.setenv("SUBS_ENLARGER_FFMPEG", "/opt/ff/ffmpeg")
    monkeypatch.setenv("SUBS_ENLARGER_FONTSIZE_INCREMENT", "12")
    monkeypatch.setenv("SUBS_ENLARGER_OUTLINE_INCREMENT", "2.5")
    monkeypatch.setenv("SUBS_ENLARGER_KEEP_INTERMEDIATES", "yes")
    cfg = SubsEnlargerConfig.from_args()
    assert cfg.ffmpeg_path == "/opt/ff/ffmpeg"
    assert cfg.fontsize_increment == 12
    assert cfg.outline_increment == Decimal("2.5")
    assert cfg.keep_intermediates is True


def test_explicit_args_win_over_env(monkeypatch):
    monkeypatch.setenv("SUBS_ENLARGER_FONTSIZE_INCREMENT", "12")
    cfg = SubsEnlargerConfig.from_args(fontsize_increment=30, outline_increment="1", keep_intermediates=False)
    assert cfg.fontsize_increment == 30
    assert cfg.outline_increment == Decimal("1")
    assert cfg.keep_intermediates is False


def test_invalid_env_numbers_fall_back(monkeypatch):
    monkeypatch.setenv("SUBS_ENLARGER_FONTSIZE_INCREMENT", "big")
    monkeypatch.setenv("SUBS_ENLARGER_OUTLINE_INCREMENT", "wide")
    cfg = SubsEnlargerConfig.from_args()
    assert cfg.fontsize_increment == 20
    assert cfg.outline_increment == Decimal("5")


def test_explicit_invalid_outline_is_an_error(monkeypatch):
    monkeypatch.setenv("SUBS_ENLARGER_OUTLINE_INCREMENT", "2")
    with pytest.raises(ValueError):
        SubsEnlargerConfig.from_args(outline_increment="abc")
    with pytest.raises(ValueError):
        SubsEnlargerConfig.from_args(outline_increment="Infinity")


def test_output_path_sits_next_to_source():
    cfg = SubsEnlargerConfig()
    assert cfg.output_path_for(Path("/m/Ep 01.mkv")) == Path("/m/Ep 01 (enlarged subs).mkv")


def test_dotenv_file_is_loaded(tmp_path, monkeypatch):
    # 先登记到 monkeypatch，测试结束时会清除 load_dotenv 写入的变量
    monkeypatch.setenv("SUBS_ENLARGER_FFPROBE", "unused")
    monkeypatch.delenv("SUBS_ENLARGER_FFPROBE")
    env_file = tmp_path / ".env"
    env_file.write_text("SUBS_ENLARGER_FFPROBE=/custom/ffprobe\n", encoding="utf-8")
    assert load_dotenv_if_present(env_file) is True
    assert SubsEnlargerConfig.from_args().ffprobe_path == "/custom/ffprobe"


def test_missing_dotenv_file_is_ignored(tmp_path):
    assert load_dotenv_if_present(tmp_path / "absent.env") is False
