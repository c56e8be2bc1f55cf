"""
Tests for settings persistence.

Usage:
    pytest tests/test_settings.py
"""

import json

from rosterscan.settings import DEFAULT_SETTINGS, load_settings, save_settings


def test_missing_file_gives_defaults(tmp_path):
    assert load_settings(tmp_path / "absent.json") == DEFAULT_SETTINGS


def test_partial_file_is_merged_with_defaults(tmp_path):
    path = tmp_path / "rosterscan.json"
    path.write_text(json.dumps({"ocr_engine": "cached", "ocr_timeout_sec": 5}), encoding="utf-8")

    settings = load_settings(path)

    assert settings["ocr_engine"] == "cached"
    assert settings["ocr_timeout_sec"] == 5
    assert settings["download_timeout_sec"] == DEFAULT_SETTINGS["download_timeout_sec"]


def test_invalid_json_gives_defaults(tmp_path):
    path = tmp_path / "rosterscan.json"
    path.write_text("{not json", encoding="utf-8")
    assert load_settings(path) == DEFAULT_SETTINGS


def test_non_object_root_gives_defaults(tmp_path):
    path = tmp_path / "rosterscan.json"
    path.write_text("[1, 2]", encoding="utf-8")
    assert load_settings(path) == DEFAULT_SETTINGS


def test_save_then_load(tmp_path):
    path = tmp_path / "rosterscan.json"
    settings = dict(DEFAULT_SETTINGS, icons_dir="/opt/icons", debug_enabled=True)

    save_settings(settings, path)

    assert load_settings(path) == settings


def test_defaults_are_not_shared(tmp_path):
    settings = load_settings(tmp_path / "absent.json")
    settings["ocr_engine"] = "cached"
    assert DEFAULT_SETTINGS["ocr_engine"] == "easyocr"


def test_default_languages_list_is_not_shared(tmp_path):
    path = tmp_path / "rosterscan.json"
    path.write_text(json.dumps({"ocr_engine": "cached"}), encoding="utf-8")

    load_settings(tmp_path / "absent.json")["ocr_languages"].append("ja")
    load_settings(path)["ocr_languages"].append("ko")

    assert DEFAULT_SETTINGS["ocr_languages"] == ["en"]
