"""Test module for the merge engine."""

from __future__ import annotations

import copy
from pathlib import Path

from conftest import make_dir
from transtree.core.merge import merge


def _tree(a_flag: bool = False):
    sub = make_dir("/p/src/sub", {"s.txt": True})
    return make_dir("/p/src", {"a.txt": a_flag, "b.txt": False}, [sub])


def test_merge_with_itself_is_identity() -> None:
    """Verify merge(D, D) == D."""
    tree = _tree(a_flag=True)

    merged = merge(tree, tree)

    assert merged == tree
    assert merged.file_flags() == tree.file_flags()


def test_merge_preserves_flags_of_persisting_files() -> None:
    """Verify a file still present keeps its old translatable flag."""
    old = _tree(a_flag=True)
    new = _tree(a_flag=False)
    for file in new.dirs[0].files:
        file.translatable = False

    merged = merge(old, new)

    assert merged.find_file(Path("/p/src/a.txt")).translatable is True
    assert merged.find_file(Path("/p/src/sub/s.txt")).translatable is True


def test_merge_adds_and_drops_files() -> None:
    """Verify old {a, b} merged with new {b, c} yields exactly {b, c}."""
    old = make_dir("/p/src", {"a": True, "b": True})
    new = make_dir("/p/src", {"b": False, "c": False})

    merged = merge(old, new)

    assert merged.file_flags() == {Path("/p/src/b"): True, Path("/p/src/c"): False}


def test_merge_handles_directories() -> None:
    """Verify directories only in new are adopted and those only in old are dropped."""
    old = make_dir("/p/src", dirs=[make_dir("/p/src/gone", {"g": True}), make_dir("/p/src/kept", {"k": True})])
    fresh = make_dir("/p/src/fresh", {"f": False}, [make_dir("/p/src/fresh/inner", {"i": False})])
    new = make_dir("/p/src", dirs=[make_dir("/p/src/kept", {"k": False, "k2": False}), fresh])

    merged = merge(old, new)

    assert [d.name for d in merged.dirs] == ["kept", "fresh"]
    assert merged.dirs[1] == fresh
    assert merged.file_flags() == {
        Path("/p/src/kept/k"): True,
        Path("/p/src/kept/k2"): False,
        Path("/p/src/fresh/f"): False,
        Path("/p/src/fresh/inner/i"): False,
    }


def test_merge_is_stable_under_repetition() -> None:
    """Verify merge(merge(old, new), new) == merge(old, new)."""
    old = make_dir("/p/src", {"a": True, "b": True}, [make_dir("/p/src/d", {"x": True})])
    new = make_dir("/p/src", {"b": False, "c": False}, [make_dir("/p/src/d", {"x": False, "y": False})])

    once = merge(old, new)

    assert merge(once, new) == once


def test_merge_takes_name_and_path_from_new() -> None:
    """Verify the result describes the new scan's root."""
    merged = merge(make_dir("/old/src"), make_dir("/p/src"))

    assert merged.name == "src"
    assert merged.path == Path("/p/src")


def test_merge_does_not_modify_inputs() -> None:
    """Verify merging leaves both inputs untouched and shares no kept records."""
    old = _tree(a_flag=True)
    new = _tree(a_flag=False)
    old_copy, new_copy = copy.deepcopy(old), copy.deepcopy(new)

    merged = merge(old, new)
    merged.files[0].translatable = False

    assert old == old_copy
    assert new == new_copy
