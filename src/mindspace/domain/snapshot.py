"""Snapshot models — the durable subset and the export document.

The durable subset is what survives a restart: nodes, layout mode, and the
three user preferences. Selection, in-progress linking, and the undo log
are session-transient and never serialized.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from mindspace.domain.nodes import Node
from mindspace.domain.types import SpaceMode, Theme, ViewMode

CURRENT_SCHEMA_VERSION = 3

_CAMEL = ConfigDict(
    frozen=True,
    alias_generator=to_camel,
    populate_by_name=True,
    extra="ignore",
)


def _enum_or_default(enum: type[StrEnum], value: Any, default: StrEnum) -> Any:
    """Unknown values written by other releases fall back to *default*."""
    try:
        return enum(value)
    except (TypeError, ValueError):
        return default


class Preferences(BaseModel):
    """Durable user preferences stored alongside the graph."""

    model_config = _CAMEL

    has_seen_tutorial: bool = False
    theme: Theme = Theme.DEEP_SPACE
    view_mode: ViewMode = ViewMode.GALAXY

    @field_validator("theme", mode="before")
    @classmethod
    def _known_theme(cls, value: Any) -> Theme:
        return _enum_or_default(Theme, value, Theme.DEEP_SPACE)

    @field_validator("view_mode", mode="before")
    @classmethod
    def _known_view_mode(cls, value: Any) -> ViewMode:
        return _enum_or_default(ViewMode, value, ViewMode.GALAXY)


class Snapshot(Preferences):
    """The persisted durable subset, at the current schema version."""

    nodes: dict[str, Node] = Field(default_factory=dict)
    mode: SpaceMode = SpaceMode.GALAXY
    schema_version: int = CURRENT_SCHEMA_VERSION

    @field_validator("mode", mode="before")
    @classmethod
    def _known_mode(cls, value: Any) -> SpaceMode:
        return _enum_or_default(SpaceMode, value, SpaceMode.GALAXY)

    @property
    def preferences(self) -> Preferences:
        return Preferences(
            has_seen_tutorial=self.has_seen_tutorial,
            theme=self.theme,
            view_mode=self.view_mode,
        )

    def to_json_dict(self) -> dict[str, Any]:
        return {
            "nodes": {node_id: node.to_json_dict() for node_id, node in self.nodes.items()},
            "mode": self.mode.value,
            "hasSeenTutorial": self.has_seen_tutorial,
            "theme": self.theme.value,
            "viewMode": self.view_mode.value,
            "schemaVersion": self.schema_version,
        }


class ExportDocument(BaseModel):
    """User-initiated backup: nodes and mode plus provenance."""

    model_config = _CAMEL

    nodes: dict[str, Node]
    mode: SpaceMode = SpaceMode.GALAXY
    exported_at: str
    schema_version: str = str(CURRENT_SCHEMA_VERSION)

    def to_json_dict(self) -> dict[str, Any]:
        return {
            "nodes": {node_id: node.to_json_dict() for node_id, node in self.nodes.items()},
            "mode": self.mode.value,
            "exportedAt": self.exported_at,
            "schemaVersion": self.schema_version,
        }
