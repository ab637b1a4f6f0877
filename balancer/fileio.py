"""YAML/JSON storage for the balancer workspace.

Writes go to a temp file in the same directory and are renamed into place,
so a reader sees either the old document or the new one. update_json holds an
exclusive lock on a sidecar lock file across its whole read-modify-write;
file_lock covers longer sequences that touch several files.
"""

from __future__ import annotations

import fcntl
import json
import os
import tempfile
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import yaml


def read_text(path: Path) -> str:
    """File contents, or "" if the file does not exist."""
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return ""


def _load(path: Path, parse: Callable[[str], Any]) -> dict[str, Any]:
    text = read_text(path)
    if not text.strip():
        return {}
    data = parse(text)
    return data if isinstance(data, dict) else {}


def read_json(path: Path) -> dict[str, Any]:
    return _load(path, json.loads)


def read_yaml(path: Path) -> dict[str, Any]:
    """Top-level mapping of a YAML file; {} when missing, empty or a scalar/list."""
    return _load(path, yaml.safe_load)


def _dump_json(data: dict[str, Any]) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def _dump_yaml(data: dict[str, Any]) -> str:
    return yaml.dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False)


def _replace_file(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_path, path)
    except BaseException:
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise


@contextmanager
def file_lock(lock_path: Path) -> Iterator[None]:
    """Exclusive flock on lock_path, held for the duration of the block.

    Not reentrant: nesting two blocks on the same lock_path deadlocks.
    """
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    with open(lock_path, "a") as lock:
        fcntl.flock(lock.fileno(), fcntl.LOCK_EX)
        try:
            yield
        finally:
            fcntl.flock(lock.fileno(), fcntl.LOCK_UN)


def _locked(path: Path):
    return file_lock(path.with_name(f".{path.name}.lock"))


def write_json_atomic(path: Path, data: dict[str, Any]) -> None:
    with _locked(path):
        _replace_file(path, _dump_json(data))


def write_yaml_atomic(path: Path, data: dict[str, Any]) -> None:
    with _locked(path):
        _replace_file(path, _dump_yaml(data))


def update_json(path: Path, mutate: Callable[[dict[str, Any]], None]) -> dict[str, Any]:
    """Read, mutate in place and rewrite a JSON document under one lock."""
    with _locked(path):
        data = read_json(path)
        mutate(data)
        _replace_file(path, _dump_json(data))
    return data
