"""Test module for the tree model."""

from __future__ import annotations

from pathlib import Path

import pytest

from conftest import make_dir
from transtree.core.exceptions import ManifestFormatError
from transtree.core.tree import Directory, File, LangDir, ProjectConfig


def _sample_tree() -> Directory:
    deep = make_dir("/p/src/sub/deep", {"d.txt": False})
    sub = make_dir("/p/src/sub", {"b.txt": True}, [deep])
    return make_dir("/p/src", {"a.txt": False, "c.txt": True}, [sub])


def test_iter_files_is_breadth_first() -> None:
    """Verify files of shallower levels come before deeper ones."""
    names = [f.name for f in _sample_tree().iter_files()]

    assert names == ["a.txt", "c.txt", "b.txt", "d.txt"]


def test_find_file_and_find_dir() -> None:
    """Verify lookups by absolute path and by child name."""
    tree = _sample_tree()

    assert tree.find_file(Path("/p/src/sub/deep/d.txt")).name == "d.txt"
    assert tree.find_file(Path("/p/src/missing.txt")) is None
    assert tree.find_dir("sub").path == Path("/p/src/sub")
    assert tree.find_dir("a.txt") is None


def test_file_flags_maps_paths_to_flags() -> None:
    """Verify file_flags covers the whole tree."""
    assert _sample_tree().file_flags() == {
        Path("/p/src/a.txt"): False,
        Path("/p/src/c.txt"): True,
        Path("/p/src/sub/b.txt"): True,
        Path("/p/src/sub/deep/d.txt"): False,
    }


def test_project_config_serializes_to_manifest_schema() -> None:
    """Verify the dictionary form uses the manifest field names."""
    config = ProjectConfig(
        name="demo",
        src_dir=LangDir(dir=make_dir("/p/src", {"a.txt": True}), language="English"),
        lang_dirs=[LangDir(dir=make_dir("/p/demo_fr"), language="French")],
    )

    data = config.to_dict()

    assert data["name"] == "demo"
    assert data["src_dir"]["language"] == "English"
    assert data["src_dir"]["dir"]["files"] == [
        {"name": "a.txt", "path": "/p/src/a.txt", "translatable": True}
    ]
    assert data["lang_dirs"][0]["dir"] == {"name": "demo_fr", "path": "/p/demo_fr", "dirs": [], "files": []}
    assert ProjectConfig.from_dict(data) == config


def test_project_config_accepts_null_source() -> None:
    """Verify a freshly initialized manifest loads."""
    config = ProjectConfig.from_dict({"name": "demo", "lang_dirs": [], "src_dir": None})

    assert config.src_dir is None
    assert config.languages() == []


@pytest.mark.parametrize(
    "data",
    [
        [],
        {"lang_dirs": [], "src_dir": None},
        {"name": "demo", "lang_dirs": {}, "src_dir": None},
        {"name": "demo", "lang_dirs": []},
        {"name": "demo", "lang_dirs": [], "src_dir": {"dir": {}, "language": "English"}},
        {"name": "demo", "lang_dirs": [{"dir": {"name": "x", "path": "/x", "dirs": [], "files": []},
                                        "language": "Klingon"}], "src_dir": None},
    ],
)
def test_from_dict_rejects_wrong_shape(data) -> None:
    """Verify valid JSON with the wrong shape raises ManifestFormatError."""
    with pytest.raises(ManifestFormatError):
        ProjectConfig.from_dict(data)


def test_file_from_dict_rejects_non_boolean_flag() -> None:
    """Verify translatable must be a real boolean."""
    with pytest.raises(ManifestFormatError):
        File.from_dict({"name": "a", "path": "/a", "translatable": 1})


def test_languages_and_find_target() -> None:
    """Verify the language listing puts the source first."""
    config = ProjectConfig(
        name="demo",
        src_dir=LangDir(dir=make_dir("/p/src"), language="English"),
        lang_dirs=[
            LangDir(dir=make_dir("/p/demo_fr"), language="French"),
            LangDir(dir=make_dir("/p/demo_de"), language="German"),
        ],
    )

    assert config.languages() == ["English", "French", "German"]
    assert config.find_target("German").dir.name == "demo_de"
    assert config.find_target("English") is None
