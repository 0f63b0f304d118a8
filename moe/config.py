from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from .boilerplate import DEFAULT_DIR, DEFAULT_LANG

DEFAULT_DEBOUNCE = 0.5


class ConfigError(ValueError):
    pass


class WatchConfig:
    """
    Settings for the live preview watcher, loaded from YAML.

    write_pairs: source file -> output HTML file
    watch_paths: extra files whose changes trigger a rebuild
    """

    def __init__(
        self,
        *,
        write_pairs: dict[Path, Path],
        watch_paths: set[Path],
        debounce: float = DEFAULT_DEBOUNCE,
        lang: str = DEFAULT_LANG,
        direction: str = DEFAULT_DIR,
    ):
        self.write_pairs = write_pairs
        self.watch_paths = watch_paths
        self.debounce = debounce
        self.lang = lang
        self.direction = direction


def _write_pairs(value: Any, base_path: Path) -> dict[Path, Path]:
    if not isinstance(value, list):
        raise TypeError("write must be a list of {src, dst} mappings")
    pairs: dict[Path, Path] = {}
    for entry in value:
        if not isinstance(entry, dict) or 'src' not in entry or 'dst' not in entry:
            raise TypeError(f"write entry must have src and dst: {entry!r}")
        pairs[base_path / str(entry['src'])] = base_path / str(entry['dst'])
    if not pairs:
        raise ConfigError("write must list at least one source")
    return pairs


def _watch_paths(value: Any, base_path: Path) -> set[Path]:
    if value is None:
        return set()
    if not isinstance(value, list):
        raise TypeError("watch must be a list of glob patterns")
    return {path for pattern in value for path in base_path.glob(str(pattern))}


def load_config(path: Path) -> WatchConfig:
    """
    Load YAML config and return a WatchConfig instance.
    Relative paths are resolved against the config file's directory.
    """
    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise TypeError("Config root must be a mapping")
    if 'write' not in raw:
        raise ConfigError("Config needs a 'write' list")

    base_path = path.parent
    debounce = float(raw.get('debounce', DEFAULT_DEBOUNCE))
    if debounce <= 0:
        raise ConfigError("debounce must be a positive number of seconds")

    return WatchConfig(
        write_pairs=_write_pairs(raw['write'], base_path),
        watch_paths=_watch_paths(raw.get('watch'), base_path),
        debounce=debounce,
        lang=str(raw.get('lang', DEFAULT_LANG)),
        direction=str(raw.get('dir', DEFAULT_DIR)),
    )
