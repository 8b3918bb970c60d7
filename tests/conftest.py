"""Shared pytest fixtures and test helpers for mindspace tests."""

from __future__ import annotations

import random
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from click.testing import CliRunner

from mindspace.config.settings import MindspaceSettings
from mindspace.domain.graph import GraphStore
from mindspace.infrastructure.workspace import Workspace


class FakeClock:
    """Epoch-millisecond clock that only moves when told to."""

    def __init__(self, start: int = 1_700_000_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int = 1) -> int:
        self.now += ms
        return self.now


def sequential_ids(prefix: str = "n") -> Callable[[], str]:
    """ID factory yielding ``n1``, ``n2``, ... for readable assertions."""
    counter = 0

    def factory() -> str:
        nonlocal counter
        counter += 1
        return f"{prefix}{counter}"

    return factory


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def graph(clock: FakeClock, rng: random.Random) -> GraphStore:
    """Empty graph store with a fixed clock, seeded randomness, and ``n1..`` IDs."""
    return GraphStore(clock=clock, rng=rng, id_factory=sequential_ids())


@pytest.fixture
def settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> MindspaceSettings:
    """Settings rooted at a temp directory, ignoring the developer's env."""
    monkeypatch.delenv("MINDSPACE_CONFIG", raising=False)
    return MindspaceSettings.from_cli(root=tmp_path)


@pytest.fixture
def workspace(settings: MindspaceSettings, clock: FakeClock, rng: random.Random) -> Iterator[Workspace]:
    """Hydrated workspace on a temp SQLite file (seeded on first load)."""
    ws = Workspace(settings, clock=clock, rng=rng)
    try:
        yield ws
    finally:
        ws.close()


@pytest.fixture
def empty_workspace(
    settings: MindspaceSettings, clock: FakeClock, rng: random.Random
) -> Iterator[Workspace]:
    """Workspace that skipped hydration: empty graph, nothing stored."""
    ws = Workspace(settings, clock=clock, rng=rng, hydrate=False)
    try:
        yield ws
    finally:
        ws.close()


@pytest.fixture
def _isolated_workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp directory so the CLI creates an isolated store.

    Use via ``@pytest.mark.usefixtures("_isolated_workspace")`` on command
    test classes.
    """
    monkeypatch.delenv("MINDSPACE_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
