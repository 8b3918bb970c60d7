"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, mindspace.toml only contains
overrides. A fresh install needs no config file at all.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

# --- mindspace.toml sections ---


class StorageConfig(BaseModel):
    """[storage] section."""

    model_config = {"frozen": True}

    path: Path = Path(".mindspace") / "mindspace.db"
    key: str = "mindspace-storage"


class ExportConfig(BaseModel):
    """[export] section."""

    model_config = {"frozen": True}

    indent: int = 2
    filename_prefix: str = "mindspace-backup"


class LayoutConfig(BaseModel):
    """[layout] section."""

    model_config = {"frozen": True}

    galaxy_radius: float = 15.0
    solar_radius: float = 10.0


class MindspaceConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    storage: StorageConfig = Field(default_factory=StorageConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
