"""MindspaceSettings — one frozen object for flags, environment, and TOML.

Sources, strongest first:

1. keyword arguments (the CLI's global flags)
2. ``MINDSPACE_*`` environment variables, ``__`` for nested sections
   (``MINDSPACE_STORAGE__KEY=work``)
3. ``mindspace.toml`` (see :mod:`mindspace.config.discovery`)
4. defaults from :mod:`mindspace.config.models`
"""

from __future__ import annotations

from contextvars import ContextVar
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from mindspace.config.discovery import ConfigError, find_config, read_toml
from mindspace.config.models import ExportConfig, LayoutConfig, StorageConfig

__all__ = ["ConfigError", "MindspaceSettings", "TomlSettingsSource"]

# TOML data read by from_cli(), handed to the source built during __init__.
_pending_toml: ContextVar[dict[str, Any] | None] = ContextVar("_pending_toml", default=None)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Settings source over an already-parsed TOML document."""

    def __init__(self, settings_cls: type[BaseSettings], data: dict[str, Any] | None) -> None:
        super().__init__(settings_cls)
        self._data = data or {}

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return dict(self._data)


class MindspaceSettings(BaseSettings):
    """Resolved configuration for one CLI invocation or workspace.

    Attributes:
        root: Directory that relative storage paths hang off: the config
            file's directory, else the CWD.
        config_path: The TOML file that was read, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "MINDSPACE_",
        "env_nested_delimiter": "__",
    }

    root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    storage: StorageConfig = Field(default_factory=StorageConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)

    @property
    def db_path(self) -> Path:
        """Where the SQLite store lives; relative paths resolve against ``root``."""
        path = self.storage.path.expanduser()
        return path if path.is_absolute() else self.root / path

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, _pending_toml.get()),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        root: Path | None = None,
        **cli_flags: Any,
    ) -> MindspaceSettings:
        """Build settings the way the CLI does.

        An explicit *config_path* must exist. Otherwise ``mindspace.toml``
        is looked up from *root* (or the CWD). Without an explicit *root*,
        the config file's directory becomes the root.

        Raises:
            ConfigError: If the config file is missing or not valid TOML.
        """
        if config_path:
            toml_path: Path | None = Path(config_path)
            if not toml_path.is_file():
                msg = f"Config file not found: {config_path}"
                raise ConfigError(msg)
        else:
            toml_path = find_config(root)

        data = read_toml(toml_path, frozenset(cls.model_fields)) if toml_path else None
        if root is None:
            root = toml_path.parent if toml_path else Path.cwd()

        token = _pending_toml.set(data)
        try:
            return cls(root=root, config_path=toml_path, **cli_flags)
        finally:
            _pending_toml.reset(token)
