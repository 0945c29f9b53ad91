"""
Pruner removing stale entries from a target tree.

The real target directory is walked, not a cached model: targets are written
by the translation step and may not have been rescanned. Entries are matched
by name against the source model because a target mirrors the source under a
different root. Matching is type-aware, so a directory on disk whose name is
a file in the model (or the reverse) counts as absent and is removed.

Symbolic links are never deleted and never followed. This holds inside stale
directories too: their regular entries are removed, but a stale directory that
still holds a symlink somewhere below it is kept with only those links left.
"""

from pathlib import Path
from typing import List

from transtree.core.tree import Directory
from transtree.logger import get_logger

logger = get_logger(__name__)


def prune(source_model: Directory, target_root: Path) -> List[Path]:
    """
    Delete files and directories under target_root that the source model lacks.

    Args:
        source_model: Reference model (normally the source tree)
        target_root: Real directory to clean up

    Returns:
        Paths removed, in walk order

    Raises:
        OSError: If listing or deleting fails. The walk stops there and
            entries already removed stay removed.
    """
    target_root = Path(target_root)
    logger.info(f"Pruning {target_root} against {source_model.path}")
    removed: List[Path] = []
    _prune_dir(source_model, target_root, removed)
    logger.info(f"Pruned {len(removed)} entries from {target_root}")
    return removed


def _prune_dir(model: Directory, target: Path, removed: List[Path]) -> None:
    model_files = {f.name for f in model.files}
    model_dirs = {d.name: d for d in model.dirs}

    for entry in list(target.iterdir()):
        if entry.is_symlink():
            continue

        if entry.is_dir():
            if entry.name in model_dirs:
                _prune_dir(model_dirs[entry.name], entry, removed)
                continue
            logger.debug(f"Removing directory absent from source: {entry}")
            try:
                emptied = _remove_tree(entry)
            except FileNotFoundError:
                continue
            if emptied:
                removed.append(entry)
            else:
                logger.debug(f"Keeping {entry}: it still holds symlinks")
        elif entry.name not in model_files:
            logger.debug(f"Removing file absent from source: {entry}")
            try:
                entry.unlink()
            except FileNotFoundError:
                continue
            removed.append(entry)


def _remove_tree(directory: Path) -> bool:
    """Delete everything under directory except symlinks; return True if directory itself went too."""
    kept = False
    for entry in list(directory.iterdir()):
        if entry.is_symlink():
            kept = True
        elif entry.is_dir():
            if not _remove_tree(entry):
                kept = True
        else:
            entry.unlink()
    if kept:
        return False
    directory.rmdir()
    return True
