"""Configuration loading for repoprobe (project root plus optional .repoprobe.yml)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Tuple

import yaml

ROOT_ENV_VAR = "REPOPROBE_PROJECT_ROOT"
CONFIG_FILENAME = ".repoprobe.yml"

DEFAULT_EXCLUDE_DIRS: Tuple[str, ...] = (
    "node_modules",
    "vendor",
    ".git",
    ".idea",
    "storage/framework",
    "storage/logs",
    "bootstrap/cache",
)

DEFAULT_EXTENSIONS: Tuple[str, ...] = (".php", ".blade.php", ".js", ".vue", ".json", ".env")

DEFAULT_SOURCE_EXTENSIONS: Tuple[str, ...] = (".php",)


class ConfigError(RuntimeError):
    """Raised when the project root or configuration file is unusable."""


@dataclass(frozen=True)
class ProbeConfig:
    """Read-only settings shared by every operation for the process lifetime."""

    root: Path
    exclude_dirs: Tuple[str, ...] = DEFAULT_EXCLUDE_DIRS
    extensions: Tuple[str, ...] = DEFAULT_EXTENSIONS
    source_extensions: Tuple[str, ...] = DEFAULT_SOURCE_EXTENSIONS
    max_line_length: int = 200
    max_result_files: int = 50
    tree_depth: int = 3
    max_workers: int = 8


def load_config(root: Path | str | None = None) -> ProbeConfig:
    """Resolve the project root and merge overrides from .repoprobe.yml."""
    root_path = _resolve_root(root)

    config_file = root_path / CONFIG_FILENAME
    if not config_file.exists():
        return ProbeConfig(root=root_path)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    defaults = ProbeConfig(root=root_path)

    return ProbeConfig(
        root=root_path,
        exclude_dirs=_as_str_tuple(data.get("exclude_dirs")) or defaults.exclude_dirs,
        extensions=_as_str_tuple(data.get("extensions")) or defaults.extensions,
        source_extensions=(
            _as_str_tuple(data.get("source_extensions")) or defaults.source_extensions
        ),
        max_line_length=_as_positive_int(data.get("max_line_length")) or defaults.max_line_length,
        max_result_files=(
            _as_positive_int(data.get("max_result_files")) or defaults.max_result_files
        ),
        tree_depth=_as_positive_int(data.get("tree_depth")) or defaults.tree_depth,
        max_workers=_as_positive_int(data.get("max_workers")) or defaults.max_workers,
    )


def _resolve_root(root: Path | str | None) -> Path:
    candidate = root if root is not None else os.environ.get(ROOT_ENV_VAR) or Path.cwd()
    root_path = Path(candidate).expanduser().resolve()
    if not root_path.exists():
        raise ConfigError(f"Project root not found: {candidate}")
    if not root_path.is_dir():
        raise ConfigError(f"Project root is not a directory: {candidate}")
    return root_path


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_positive_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, str):
        try:
            parsed = int(value)
        except ValueError:
            return None
        return parsed if parsed > 0 else None
    return None


def _as_str_tuple(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, Sequence):
        return tuple(str(item) for item in value if isinstance(item, (str, int, float)))
    return ()
