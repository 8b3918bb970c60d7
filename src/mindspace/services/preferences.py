"""PreferencesService — read and change the durable user preferences."""

from __future__ import annotations

from typing import Any

from mindspace.domain.types import Theme, ViewMode
from mindspace.services.base import BaseService
from mindspace.services.result import ServiceResult


class PreferencesService(BaseService):
    """Tutorial flag, theme, and camera view preference.

    Stored data with unknown values falls back to defaults on load, but an
    unknown value passed in here is rejected.
    """

    def show(self) -> ServiceResult:
        return ServiceResult(
            ok=True,
            op="preferences",
            data=self._workspace.preferences.model_dump(mode="json"),
        )

    def update(
        self,
        *,
        theme: str | None = None,
        view_mode: str | None = None,
        has_seen_tutorial: bool | None = None,
    ) -> ServiceResult:
        op = "preferences"
        changes: dict[str, Any] = {}
        if theme is not None:
            if theme not in {t.value for t in Theme}:
                return ServiceResult.failure(
                    op, "INVALID_PREFERENCE", f"Unknown theme {theme!r}", field="theme"
                )
            changes["theme"] = Theme(theme)
        if view_mode is not None:
            if view_mode not in {v.value for v in ViewMode}:
                return ServiceResult.failure(
                    op, "INVALID_PREFERENCE", f"Unknown view mode {view_mode!r}", field="view_mode"
                )
            changes["view_mode"] = ViewMode(view_mode)
        if has_seen_tutorial is not None:
            changes["has_seen_tutorial"] = has_seen_tutorial

        if not changes:
            return self.show()

        prefs = self._workspace.update_preferences(**changes)
        return ServiceResult(
            ok=True,
            op=op,
            data=prefs.model_dump(mode="json") | {"fields_changed": sorted(changes)},
            warnings=self._save_warnings(),
        )
