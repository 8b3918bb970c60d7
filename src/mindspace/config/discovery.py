"""Locating and reading ``mindspace.toml``.

The file is found the way git finds ``.git/``: the start directory first,
then each parent. ``MINDSPACE_CONFIG`` names a file directly and disables
the walk; if that file does not exist no config is used at all.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from mindspace.config.models import MindspaceConfig

CONFIG_FILENAME = "mindspace.toml"
CONFIG_ENV_VAR = "MINDSPACE_CONFIG"
KNOWN_SECTIONS = frozenset(MindspaceConfig.model_fields)

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when a config file exists but is not valid TOML."""


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file that applies to *start* (default: CWD), or None."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None

    directory = (start or Path.cwd()).resolve()
    for candidate_dir in (directory, *directory.parents):
        candidate = candidate_dir / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def read_toml(path: Path, known: frozenset[str] = KNOWN_SECTIONS) -> dict[str, Any]:
    """Parse *path*, dropping (and logging) top-level keys not in *known*.

    Raises:
        ConfigError: If the file is not valid TOML.
    """
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise ConfigError(msg) from exc
    unknown = sorted(set(data) - known)
    if unknown:
        logger.warning("Ignoring unknown config key(s) in %s: %s", path, ", ".join(unknown))
    return {key: value for key, value in data.items() if key in known}


def load_config(path: Path | None = None, cwd: Path | None = None) -> MindspaceConfig:
    """Validate the TOML sections alone, without env vars or CLI flags.

    *path* defaults to the file :func:`find_config` finds from *cwd*; with no
    file at all the defaults come back.
    """
    path = path or find_config(cwd)
    if path is None:
        return MindspaceConfig()
    return MindspaceConfig.model_validate(read_toml(path))
