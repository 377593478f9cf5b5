"""Lint configuration.

Precedence, lowest first: dataclass defaults, a YAML config file, then
``CHANGELOG_LINT_<FIELD>`` environment variables.  CLI flags are applied on
top by the caller via :func:`dataclasses.replace`.

Example ``.changelog-lint.yml``::

    changelog_lint:
      changelog: docs/CHANGELOG.md
      require_issue_refs: true
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

from changelog_lint.core.errors import ConfigError

DEFAULT_CONFIG_FILE = Path(".changelog-lint.yml")
ENV_PREFIX = "CHANGELOG_LINT_"

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off", "")


@dataclass(frozen=True)
class LintConfig:
    """Immutable lint configuration."""

    changelog: Path = Path("CHANGELOG.md")
    require_issue_refs: bool = False     # warn on items without "#ABC-123"
    require_unreleased: bool = False     # warn when the first release is dated
    require_version_order: bool = False  # warn when releases are not newest first
    strict: bool = False                 # warnings fail the check


def _coerce(name: str, value: Any) -> Any:
    if name == "changelog":
        if not isinstance(value, (str, Path)):
            raise ConfigError(f"{name} must be a path, got {value!r}")
        return Path(value)
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in _TRUE + _FALSE:
        return value.strip().lower() in _TRUE
    raise ConfigError(f"{name} must be a boolean, got {value!r}")


def config_from_mapping(data: Mapping[str, Any], base: LintConfig | None = None) -> LintConfig:
    known = {f.name for f in fields(LintConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown config key(s): {', '.join(unknown)}")
    return replace(base or LintConfig(), **{k: _coerce(k, v) for k, v in data.items()})


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Could not read config {path}: {exc}") from exc
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config {path} must contain a mapping")
    section = raw.get("changelog_lint", raw)
    if not isinstance(section, dict):
        raise ConfigError(f"Config {path}: 'changelog_lint' must be a mapping")
    return section


def load_config(
    path: Path | None = None,
    *,
    env: Mapping[str, str] | None = None,
) -> LintConfig:
    """Build a :class:`LintConfig` from *path* (if any) and the environment.

    When *path* is None, ``.changelog-lint.yml`` in the working directory is
    used if it exists.  An explicit *path* that does not exist is an error.
    """
    if path is None and DEFAULT_CONFIG_FILE.exists():
        path = DEFAULT_CONFIG_FILE
    elif path is not None and not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    config = LintConfig()
    if path is not None:
        config = config_from_mapping(_read_yaml(path), config)

    env = os.environ if env is None else env
    overrides = {}
    for f in fields(LintConfig):
        value = env.get(ENV_PREFIX + f.name.upper())
        if value is not None:
            overrides[f.name] = value
    return config_from_mapping(overrides, config)
