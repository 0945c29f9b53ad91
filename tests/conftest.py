from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from transtree.core.tree import Directory, File


@pytest.fixture(autouse=True)
def isolated_config(tmp_path_factory, monkeypatch) -> Path:
    """Point the application config at a throwaway file."""
    config_file = tmp_path_factory.mktemp("config") / "config.json"
    monkeypatch.setattr("transtree.config.CONFIG_FILE", config_file)
    return config_file


@pytest.fixture()
def no_sleep(monkeypatch) -> list[float]:
    """Record time.sleep calls made by the AI service instead of waiting."""
    calls: list[float] = []
    monkeypatch.setattr("transtree.ai.service.time.sleep", lambda seconds: calls.append(seconds))
    return calls


@pytest.fixture()
def write_files() -> Callable[[Path, dict[str, str]], None]:
    """Create files (relative path -> text) below a root."""

    def _write(root: Path, files: dict[str, str]) -> None:
        for relative, text in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")

    return _write


class FakeTranslator:
    """Translation collaborator returning a tagged copy of its input."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []

    def translate(self, text: str, target_language: str) -> str:
        self.calls.append((text, target_language))
        return f"[{target_language}] {text}"


@pytest.fixture()
def translator() -> FakeTranslator:
    return FakeTranslator()


def make_dir(path: str, files: dict[str, bool] | None = None, dirs: list[Directory] | None = None) -> Directory:
    """Build an in-memory Directory; files maps names to translatable flags."""
    root = Path(path)
    return Directory(
        name=root.name,
        path=root,
        dirs=list(dirs or []),
        files=[File(name=n, path=root / n, translatable=t) for n, t in (files or {}).items()],
    )
