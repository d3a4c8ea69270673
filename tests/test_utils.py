"""
Tests for configuration loading and the JSON file helper.
"""

import json
import logging

import pytest

from coursegraph.utils import (
    EXPORT_FORMATS,
    CourseGraphConfig,
    CourseGraphLogger,
    FileManager,
    load_config,
)


def test_defaults_without_file(tmp_path, monkeypatch):
    monkeypatch.delenv("COURSEGRAPH_LOG_LEVEL", raising=False)
    monkeypatch.delenv("COURSEGRAPH_EXPORT_FORMATS", raising=False)
    config = load_config(tmp_path / "missing.json")
    assert config == CourseGraphConfig()
    assert config.export_formats == EXPORT_FORMATS


def test_file_values_and_unknown_keys(tmp_path, monkeypatch):
    monkeypatch.delenv("COURSEGRAPH_EXPORT_FORMATS", raising=False)
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"dot_rankdir": "TB", "colour": "red"}), encoding="utf-8")
    config = load_config(path)
    assert config.dot_rankdir == "TB"
    assert not hasattr(config, "colour")


def test_broken_file_falls_back_to_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")
    assert load_config(path).dot_rankdir == "LR"


def test_environment_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("COURSEGRAPH_LOG_LEVEL", "debug")
    monkeypatch.setenv("COURSEGRAPH_EXPORT_FORMATS", "dot, tsv,")
    config = load_config(None)
    assert config.log_level == "DEBUG"
    assert config.export_formats == ["dot", "tsv"]


def test_save_json_creates_parents(tmp_path):
    manager = FileManager(CourseGraphLogger("test_utils"))
    path = tmp_path / "a" / "b" / "data.json"
    assert manager.save_json({"classes": []}, path)
    assert json.loads(path.read_text(encoding="utf-8")) == {"classes": []}


def test_logger_timers():
    logger = CourseGraphLogger("test_utils_timer")
    assert logger.end_timer("never_started") == 0.0
    logger.start_timer("load")
    assert logger.end_timer("load") >= 0.0
    assert "load" in logger.performance_data


@pytest.mark.parametrize("key, value", [
    ("max_label_length", "10"),
    ("max_label_length", True),
    ("semester_colors", ["#000000"]),
    ("export_formats", "json"),
    ("dot_rankdir", 3),
])
def test_wrongly_typed_value_keeps_default(tmp_path, monkeypatch, caplog, key, value):
    monkeypatch.delenv("COURSEGRAPH_EXPORT_FORMATS", raising=False)
    path = tmp_path / "config.json"
    path.write_text(json.dumps({key: value, "unknown_color": "#000000"}), encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="coursegraph.utils"):
        config = load_config(path)
    assert getattr(config, key) == getattr(CourseGraphConfig(), key)
    assert config.unknown_color == "#000000"
    assert f"Ignoring config key '{key}'" in caplog.text
