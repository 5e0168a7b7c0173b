"""Project-scoped restack configuration in .restack/config.yaml.

Example::

    restack:
      remote: upstream
      author: "@me"
      conflict_marker: could not apply

Resolution order, lowest to highest: defaults, config file, environment
(``GH_RESTACK_REMOTE``, ``GH_RESTACK_AUTHOR``), command-line options.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from restack_cli.core.exceptions import ConfigError

__all__ = [
    "ENV_AUTHOR",
    "ENV_REMOTE",
    "RestackSettings",
    "config_path",
    "load_settings",
    "resolve_settings",
]

ENV_REMOTE = "GH_RESTACK_REMOTE"
ENV_AUTHOR = "GH_RESTACK_AUTHOR"


@dataclass(frozen=True, slots=True)
class RestackSettings:
    """Settings for one restack run."""

    remote: str = "origin"
    author: str = "@me"
    conflict_marker: str = "could not apply"

    @classmethod
    def from_dict(cls, data: dict[str, object] | None) -> "RestackSettings":
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigError("Invalid 'restack' section: expected a mapping")

        defaults = cls()
        values: dict[str, str] = {}
        for key in ("remote", "author", "conflict_marker"):
            if key not in data:
                continue
            value = data[key]
            if not isinstance(value, str) or not value.strip():
                raise ConfigError(f"Invalid restack.{key}: expected a non-empty string")
            values[key] = value.strip()

        unknown = sorted(str(key) for key in data if key not in ("remote", "author", "conflict_marker"))
        if unknown:
            raise ConfigError(f"Unknown key(s) in restack section: {', '.join(unknown)}")

        return replace(defaults, **values)


def config_path(repo_root: Path) -> Path:
    return repo_root / ".restack" / "config.yaml"


def load_settings(repo_root: Path) -> RestackSettings:
    """Load settings from .restack/config.yaml (defaults if missing)."""
    path = config_path(repo_root)
    if not path.exists():
        return RestackSettings()

    yaml = YAML(typ="safe")
    try:
        with path.open("r", encoding="utf-8") as handle:
            payload = yaml.load(handle) or {}
    except YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(payload, dict):
        raise ConfigError(f"Invalid {path}: expected a mapping at the top level")

    return RestackSettings.from_dict(payload.get("restack"))


def resolve_settings(
    repo_root: Path,
    *,
    remote: str | None = None,
    author: str | None = None,
) -> RestackSettings:
    """Combine file, environment and explicit overrides."""
    settings = load_settings(repo_root)

    env_remote = os.environ.get(ENV_REMOTE, "").strip()
    env_author = os.environ.get(ENV_AUTHOR, "").strip()
    if env_remote:
        settings = replace(settings, remote=env_remote)
    if env_author:
        settings = replace(settings, author=env_author)

    if remote:
        settings = replace(settings, remote=remote)
    if author:
        settings = replace(settings, author=author)
    return settings
