"""Tests for the command-line scorer."""

import io
import json

import pytest
from rich.console import Console

from scoring_engine import launcher
from scoring_engine.modules.logger import get_logger

PROPERTIES = [
    {"id": 1, "name": "Maple House", "answers": {"tube_distance": "5_10"}},
    {"id": 2, "name": "Harbour View", "answers": {"tube_distance": "under_5", "area_safety": "very_safe"}},
    {"name": "No Id Flat", "answers": {}},
]


@pytest.fixture
def output(monkeypatch):
    buffer = io.StringIO()
    monkeypatch.setattr(launcher, "console", Console(file=buffer, width=300, color_system=None))
    return buffer


@pytest.fixture
def properties_file(tmp_path):
    path = tmp_path / "viewings.json"
    path.write_text(json.dumps(PROPERTIES), encoding="utf-8")
    return path


def test_score_properties(catalogue):
    entries = launcher.score_properties(PROPERTIES, None, catalogue)
    assert [e.property_id for e in entries] == [1, 2, 3]
    assert [e.score.overall_score for e in entries] == [80, 100, 0]
    assert entries[2].name == "No Id Flat"


def test_score_properties_with_weights(catalogue):
    entries = launcher.score_properties(
        [{"id": 1, "name": "A", "answers": {"tube_distance": "5_10", "area_safety": "unsafe"}}],
        {"safety": 0},
        catalogue,
    )
    assert entries[0].score.overall_score == 80


def test_main_prints_table_and_best(output, properties_file):
    assert launcher.main([str(properties_file)]) == 0

    text = output.getvalue()
    assert "Maple House" in text
    assert "Location & Transport" in text
    assert "Best Overall" in text
    assert "Harbour View" in text.split("Best Overall")[-1]


def test_main_with_weights_file(output, properties_file, tmp_path):
    weights = tmp_path / "weights.json"
    weights.write_text(json.dumps({"location": 0}), encoding="utf-8")
    assert launcher.main([str(properties_file), "--weights", str(weights)]) == 0
    assert "Best Overall" in output.getvalue()


def test_main_writes_log_file(output, properties_file, tmp_path):
    log_dir = tmp_path / "logs"
    assert launcher.main([str(properties_file), "--log-dir", str(log_dir)]) == 0

    logs = list(log_dir.glob("scoring_viewings_*.log"))
    assert len(logs) == 1
    assert "STEP END: Scoring" in logs[0].read_text(encoding="utf-8")


def test_main_missing_file(output, tmp_path):
    assert launcher.main([str(tmp_path / "nope.json")]) == 1
    assert "not found" in output.getvalue()


def test_main_rejects_non_list(output, tmp_path):
    path = tmp_path / "object.json"
    path.write_text(json.dumps({"name": "Not a list"}), encoding="utf-8")
    assert launcher.main([str(path)]) == 1
    assert "JSON list" in output.getvalue()


def test_main_rejects_non_object_records(output, tmp_path):
    path = tmp_path / "mixed.json"
    path.write_text(json.dumps([{"id": 1, "answers": {}}, "Maple House", 3]), encoding="utf-8")
    assert launcher.main([str(path)]) == 1
    assert "JSON object" in output.getvalue()


def test_main_closes_log_file_on_early_exit(output, tmp_path):
    path = tmp_path / "object.json"
    path.write_text(json.dumps({"name": "Not a list"}), encoding="utf-8")
    assert launcher.main([str(path), "--log-dir", str(tmp_path / "logs")]) == 1
    assert get_logger().file_handler is None


def test_main_closes_log_file_when_scoring_fails(output, properties_file, tmp_path, monkeypatch):
    def explode(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(launcher, "score_properties", explode)
    with pytest.raises(RuntimeError):
        launcher.main([str(properties_file), "--log-dir", str(tmp_path / "logs")])
    assert get_logger().file_handler is None


def test_table_shows_rating_label(output, properties_file):
    assert launcher.main([str(properties_file)]) == 0
    assert "Excellent" in output.getvalue()


def test_unknown_answer_keys_are_logged(catalogue, tmp_path):
    get_logger().setup_for_run(str(tmp_path), "stale")
    try:
        launcher.score_properties(
            [{"id": 1, "name": "Old Flat", "answers": {"helipad": True, "tube_distance": "5_10"}}],
            None,
            catalogue,
        )
        log_path = get_logger().get_log_path()
    finally:
        get_logger().close()
    text = open(log_path, encoding="utf-8").read()
    assert "Old Flat: ignoring unknown questions helipad" in text
    assert "tube_distance" not in text.split("ignoring unknown questions")[-1].splitlines()[0]
