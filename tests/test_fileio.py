"""Tests for balancer/fileio.py."""

from balancer.fileio import read_json, read_yaml, update_json, write_yaml_atomic


def test_missing_files_read_empty(tmp_path):
    assert read_json(tmp_path / "nope.json") == {}
    assert read_yaml(tmp_path / "nope.yaml") == {}


def test_read_yaml_non_mapping(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    assert read_yaml(path) == {}


def test_write_yaml_keeps_key_order(tmp_path):
    path = tmp_path / "sub" / "m.yaml"
    write_yaml_atomic(path, {"b": 1, "a": 2})
    assert list(read_yaml(path)) == ["b", "a"]
    assert not [p for p in path.parent.iterdir() if p.name.endswith(".tmp")]


def test_update_json_accumulates(tmp_path):
    path = tmp_path / "runs.json"
    update_json(path, lambda d: d.update(first=1))
    result = update_json(path, lambda d: d.update(second=2))
    assert result == {"first": 1, "second": 2}
    assert read_json(path) == {"first": 1, "second": 2}
