# utils/io.py
"""File IO helpers: atomic JSON/YAML report writes and text loading."""

from __future__ import annotations

import json
import tempfile
from pathlib import Path
from typing import Any, Final

import yaml

from utils.logger import get_logger

LOGGER = get_logger(__name__)

YAML_SUFFIXES: Final[frozenset] = frozenset({".yaml", ".yml"})


def ensure_directory(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def _atomic_write(path: Path, content: str) -> None:
    """Write ``content`` next to ``path`` and move it into place.

    The temporary file is removed when writing or the final rename fails,
    so a failed save leaves the directory as it was.
    """
    ensure_directory(path.parent)
    with tempfile.NamedTemporaryFile(
        "w", delete=False, dir=path.parent, prefix=f".{path.name}.", encoding="utf-8"
    ) as tmp:
        tmp_path = Path(tmp.name)
        try:
            tmp.write(content)
        except BaseException:
            tmp.close()
            tmp_path.unlink(missing_ok=True)
            raise
    try:
        tmp_path.replace(path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    LOGGER.debug("Wrote file {} atomically", path)


def atomic_write_json(path: Path, data: Any, *, indent: int = 2) -> None:
    payload = json.dumps(data, indent=indent, sort_keys=True)
    _atomic_write(path, payload)


def atomic_write_yaml(path: Path, data: Any) -> None:
    payload = yaml.safe_dump(data, sort_keys=True)
    _atomic_write(path, payload)


def is_yaml_path(path: Path) -> bool:
    return path.suffix.lower() in YAML_SUFFIXES


def atomic_write_report(path: Path, data: Any) -> None:
    """Write ``data`` as YAML for ``.yaml``/``.yml`` paths, JSON otherwise."""
    if is_yaml_path(path):
        atomic_write_yaml(path, data)
    else:
        atomic_write_json(path, data)


def read_text(path: Path) -> str:
    with path.open("r", encoding="utf-8") as handle:
        return handle.read()


def load_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def load_yaml(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle)


def load_report(path: Path) -> Any:
    """Read a report written by ``atomic_write_report``."""
    return load_yaml(path) if is_yaml_path(path) else load_json(path)


__all__ = [
    "YAML_SUFFIXES",
    "atomic_write_json",
    "atomic_write_report",
    "atomic_write_yaml",
    "ensure_directory",
    "is_yaml_path",
    "load_json",
    "load_report",
    "load_yaml",
    "read_text",
]
