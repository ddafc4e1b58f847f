"""Locate, read and write the ingest configuration file."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

import yaml

from .models import IngestConfig

CONFIG_STEM = "ingest_config"
CONFIG_EXTENSIONS = (".yaml", ".yml", ".json")
CONFIG_FILENAME = f"{CONFIG_STEM}{CONFIG_EXTENSIONS[0]}"
HOME_ENV_VAR = "GATHERER_INGEST_HOME"

_PARSERS: dict[str, Callable[[str], Any]] = {
    ".yaml": yaml.safe_load,
    ".yml": yaml.safe_load,
    ".json": json.loads,
}


def _load_mapping(path: Path) -> dict:
    parser = _PARSERS.get(path.suffix.lower())
    if parser is None:
        raise ValueError(f"Unsupported configuration format: {path.suffix or path.name}")
    data = parser(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file must contain a mapping: {path}")
    return data


def _dump_mapping(path: Path, payload: dict) -> None:
    if path.suffix.lower() == ".json":
        text = json.dumps(payload, indent=2, ensure_ascii=False) + "\n"
    else:
        text = yaml.safe_dump(payload, allow_unicode=True, sort_keys=False)
    path.write_text(text, encoding="utf-8")


def _project_root(explicit: Path | None) -> Path:
    if explicit is not None:
        return Path(explicit).expanduser().resolve()
    env_root = os.environ.get(HOME_ENV_VAR)
    if env_root:
        return Path(env_root).expanduser().resolve()
    # gatherer_ingest/config/loader.py -> repository root
    return Path(__file__).resolve().parents[2]


@dataclass(slots=True)
class ConfigLocator:
    """Project layout: ``data/`` holds config and database, ``logs/`` the log files."""

    project_root: Path | None = None
    data_dir: Path = field(init=False)
    logs_dir: Path = field(init=False)

    def __post_init__(self) -> None:
        self.project_root = _project_root(self.project_root)
        self.data_dir = self.project_root / "data"
        self.logs_dir = self.project_root / "logs"
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.logs_dir.mkdir(parents=True, exist_ok=True)

    def config_path(self) -> Path:
        """First existing ``ingest_config.{yaml,yml,json}``, else the YAML default."""

        for extension in CONFIG_EXTENSIONS:
            candidate = self.data_dir / f"{CONFIG_STEM}{extension}"
            if candidate.exists():
                return candidate
        return self.data_dir / CONFIG_FILENAME


class ConfigRepository:
    """Validated access to the ingest configuration with a per-instance cache."""

    def __init__(self, locator: ConfigLocator | None = None) -> None:
        self.locator = locator or ConfigLocator()
        self._cached: IngestConfig | None = None

    def load_config(self, path: Path | None = None) -> IngestConfig:
        if path is not None:
            if not path.exists():
                raise FileNotFoundError(f"Configuration not found: {path}")
            return IngestConfig.model_validate(_load_mapping(path))

        if self._cached is None:
            target = self.locator.config_path()
            if target.exists():
                self._cached = IngestConfig.model_validate(_load_mapping(target))
            else:
                # first run: materialise the defaults so they can be edited
                self.save_config(IngestConfig())
        return self._cached

    def save_config(self, config: IngestConfig) -> Path:
        path = self.locator.config_path()
        _dump_mapping(path, config.model_dump(mode="json"))
        self._cached = config
        return path

    def resolved_database_path(self, config: IngestConfig | None = None) -> Path:
        return (config or self.load_config()).resolved_database_path(self.locator.project_root)


__all__ = [
    "CONFIG_EXTENSIONS",
    "CONFIG_FILENAME",
    "ConfigLocator",
    "ConfigRepository",
    "HOME_ENV_VAR",
]
