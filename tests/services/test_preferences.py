"""Tests for PreferencesService."""

from __future__ import annotations

import pytest

from mindspace.domain.types import Theme, ViewMode
from mindspace.infrastructure.workspace import Workspace
from mindspace.services.preferences import PreferencesService


@pytest.fixture
def svc(workspace: Workspace) -> PreferencesService:
    return PreferencesService(workspace)


class TestPreferencesService:
    def test_show_defaults(self, svc: PreferencesService) -> None:
        assert svc.show().data == {
            "has_seen_tutorial": False,
            "theme": "deep-space",
            "view_mode": "galaxy",
        }

    def test_update(self, svc: PreferencesService, workspace: Workspace) -> None:
        result = svc.update(theme="nebula", view_mode="solar-system", has_seen_tutorial=True)
        assert result.ok
        assert result.data["fields_changed"] == ["has_seen_tutorial", "theme", "view_mode"]
        assert workspace.preferences.theme is Theme.NEBULA
        assert workspace.preferences.view_mode is ViewMode.SOLAR_SYSTEM

    def test_update_nothing_shows(self, svc: PreferencesService) -> None:
        result = svc.update()
        assert result.ok
        assert "fields_changed" not in result.data

    @pytest.mark.parametrize(("field", "value"), [("theme", "vaporwave"), ("view_mode", "top")])
    def test_rejects_unknown(self, svc: PreferencesService, field: str, value: str) -> None:
        result = svc.update(**{field: value})
        assert result.error is not None
        assert result.error.code == "INVALID_PREFERENCE"
        assert result.error.detail == {"field": field}
