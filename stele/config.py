"""Site configuration for Stele.

Options live in config.yaml at the project root and are loaded once per
invocation into a read-only SiteConfig. Keys are kebab-case; snake_case
spellings are accepted and normalized. Keys Stele does not know about are
kept and exposed to templates as ``site``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from .errors import ConfigError
from .utils import parse_bool

CONFIG_FILENAME = "config.yaml"

DEFAULT_CONFIG: dict[str, Any] = {
    "base-url": "/",
    "content-dir": "content",
    "templates-dir": "templates",
    "static-dir": "static",
    "output-dir": "public",
    "default-template": "default",
    "index-drafts": False,
    "host": "localhost",
    "port": 3000,
}


def _normalize_key(key: Any) -> str:
    return str(key).replace("_", "-")


@dataclass(frozen=True)
class SiteConfig:
    """Read-only site options with defaults applied.

    Attributes:
        root: Project root that relative directories are resolved against.
        options: Every option, including ones Stele does not interpret.
    """

    root: Path
    options: Mapping[str, Any]

    @classmethod
    def from_mapping(cls, root: Path, values: Mapping[str, Any] | None = None) -> SiteConfig:
        merged = dict(DEFAULT_CONFIG)
        for key, value in (values or {}).items():
            merged[_normalize_key(key)] = value
        return cls(root=root, options=MappingProxyType(merged))

    def get(self, key: str, default: Any = None) -> Any:
        return self.options.get(_normalize_key(key), default)

    def __getitem__(self, key: str) -> Any:
        return self.options[_normalize_key(key)]

    def replace(self, **overrides: Any) -> SiteConfig:
        """Return a copy with some options overridden.

        None values are ignored so CLI options that were not given leave the
        file's value in place.
        """
        merged = dict(self.options)
        for key, value in overrides.items():
            if value is not None:
                merged[_normalize_key(key)] = value
        return SiteConfig(root=self.root, options=MappingProxyType(merged))

    def _dir(self, key: str) -> Path:
        return self.root / str(self.options[key])

    @property
    def content_dir(self) -> Path:
        return self._dir("content-dir")

    @property
    def templates_dir(self) -> Path:
        return self._dir("templates-dir")

    @property
    def static_dir(self) -> Path:
        return self._dir("static-dir")

    @property
    def output_dir(self) -> Path:
        return self._dir("output-dir")

    @property
    def base_url(self) -> str:
        value = self.options.get("base-url")
        return "/" if value is None else str(value)

    @property
    def default_template(self) -> str:
        return str(self.options["default-template"])

    @property
    def index_drafts(self) -> bool:
        return parse_bool(self.options.get("index-drafts"))

    @property
    def host(self) -> str:
        return str(self.options["host"])

    @property
    def port(self) -> int:
        return int(self.options["port"])

    def validate(self) -> None:
        """Check options that would make a render or serve unsafe.

        Raises:
            ConfigError: If the port is not an integer in 0-65535, or if
                cleaning the output directory would delete the project or
                one of its source directories.
        """
        config_path = self.root / CONFIG_FILENAME
        try:
            port = int(self.options["port"])
        except (TypeError, ValueError) as exc:
            raise ConfigError(config_path, f"port must be an integer, got {self.get('port')!r}") from exc
        if not 0 <= port <= 65535:
            raise ConfigError(config_path, f"port must be between 0 and 65535, got {port}")

        output = self.output_dir.resolve()
        root = self.root.resolve()
        if output == root or output in root.parents:
            raise ConfigError(config_path, f"output-dir must not contain the project root: {output}")
        for key in ("content-dir", "templates-dir", "static-dir"):
            source = self._dir(key).resolve()
            if output == source or output in source.parents:
                raise ConfigError(config_path, f"output-dir must not contain {key}: {source}")


def load_config(project_root: Path) -> SiteConfig:
    """Load site configuration from config.yaml.

    Args:
        project_root: Root directory of the project.

    Returns:
        SiteConfig with defaults applied.

    Raises:
        ConfigError: If the file is not valid YAML, not a mapping, or
            fails SiteConfig.validate.
    """
    config_path = project_root / CONFIG_FILENAME
    if not config_path.exists():
        return SiteConfig.from_mapping(project_root)
    try:
        with open(config_path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f)
    except (yaml.YAMLError, ValueError) as exc:
        raise ConfigError(config_path, f"Invalid YAML: {exc}") from exc
    except OSError as exc:
        raise ConfigError(config_path, f"Could not read file: {exc}") from exc
    if loaded is None:
        loaded = {}
    if not isinstance(loaded, dict):
        raise ConfigError(config_path, "Top level must be a mapping of options")
    config = SiteConfig.from_mapping(project_root, loaded)
    config.validate()
    return config
