"""Configuration loading for pushmanifest (.pushmanifest.yml or polymer.json)."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".pushmanifest.yml"
POLYMER_CONFIG_FILENAME = "polymer.json"
DEFAULT_ENTRYPOINT = "index.html"
DEFAULT_OUT_PATH = "push-manifest.json"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ManifestSettings:
    """Where the manifest is written and how its URLs are prefixed."""

    out_path: str = DEFAULT_OUT_PATH
    base_path: str = ""


@dataclass
class ProjectConfig:
    """Project layout: root plus the entrypoint, shell and fragment paths.

    Entry paths are absolute filesystem paths under ``root``.
    """

    root: Path
    entrypoint: Path
    shell: Optional[Path] = None
    fragments: List[Path] = field(default_factory=list)
    exclude_paths: List[str] = field(default_factory=list)
    manifest: ManifestSettings = field(default_factory=ManifestSettings)

    @classmethod
    def for_root(
        cls,
        root: Path | str,
        *,
        entrypoint: str = DEFAULT_ENTRYPOINT,
        shell: Optional[str] = None,
        fragments: Sequence[str] = (),
    ) -> "ProjectConfig":
        root_path = Path(root)
        return cls(
            root=root_path,
            entrypoint=root_path / entrypoint,
            shell=root_path / shell if shell else None,
            fragments=[root_path / fragment for fragment in fragments],
        )

    @property
    def out_file(self) -> Path:
        return self.root / (self.manifest.out_path or DEFAULT_OUT_PATH)


def load_config(config_path: Path) -> ProjectConfig:
    """Load configuration from a project directory or an explicit config file."""
    config_path = Path(config_path).expanduser()
    config_file = _resolve_config_path(config_path)
    base_dir = config_file.parent.resolve() if config_file else config_path.resolve()

    data: Dict[str, Any] = {}
    if config_file is not None and config_file.exists():
        data = _read_config(config_file)

    root_value = _as_str(data.get("root"))
    root = (base_dir / root_value).resolve() if root_value else base_dir

    entrypoint = _as_str(data.get("entrypoint")) or DEFAULT_ENTRYPOINT
    shell = _as_str(data.get("shell"))
    fragments = _as_str_list(data.get("fragments"), key="fragments")

    config = ProjectConfig.for_root(
        root, entrypoint=entrypoint, shell=shell, fragments=fragments
    )
    config.exclude_paths = _as_str_list(data.get("exclude_paths"), key="exclude_paths")

    manifest_data = data.get("push_manifest")
    if manifest_data is not None and not isinstance(manifest_data, dict):
        raise ConfigError("push_manifest must be a mapping")
    if manifest_data:
        config.manifest = ManifestSettings(
            out_path=_as_str(manifest_data.get("out_path")) or DEFAULT_OUT_PATH,
            base_path=_as_str(manifest_data.get("base_path")) or "",
        )
    return config


def _resolve_config_path(config_path: Path) -> Optional[Path]:
    if config_path.is_dir():
        for name in (CONFIG_FILENAME, POLYMER_CONFIG_FILENAME):
            candidate = config_path / name
            if candidate.exists():
                return candidate.resolve()
        return None
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}

    try:
        if path.suffix == ".json":
            loaded = json.loads(text)
        else:
            loaded = yaml.safe_load(text)
    except (ValueError, yaml.YAMLError) as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the root")
    return loaded


def _as_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        return str(value)
    raise ConfigError(f"Expected a string value, got {type(value).__name__}")


def _as_str_list(value: Any, *, key: str) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        if not all(isinstance(item, str) for item in value):
            raise ConfigError(f"{key} must be a list of strings")
        return list(value)
    raise ConfigError(f"{key} must be a list of strings")


__all__ = [
    "ConfigError",
    "ManifestSettings",
    "ProjectConfig",
    "load_config",
]
