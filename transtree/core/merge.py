"""
Merge engine reconciling a stale tree model with a fresh scan.

Nodes are matched by absolute path, one tree level at a time:
- file in both: the old record is kept, so its translatable flag survives
- file only in the new scan: adopted as scanned
- file only in the old model: dropped
- directory in both: merged recursively
- directory only in the new scan: adopted verbatim; only in the old model: dropped
"""

from dataclasses import replace

from transtree.core.tree import Directory
from transtree.logger import get_logger

logger = get_logger(__name__)


def merge(old: Directory, new: Directory) -> Directory:
    """
    Merge an old model into a new scan.

    Args:
        old: Previously known model, carrying operator-set flags
        new: Fresh scan of the same directory

    Returns:
        A new Directory with new's name, path and child order. Neither input is modified.
    """
    old_files = {f.path: f for f in old.files}
    old_dirs = {d.path: d for d in old.dirs}

    files = [replace(old_files[f.path]) if f.path in old_files else f for f in new.files]
    dirs = [merge(old_dirs[d.path], d) if d.path in old_dirs else d for d in new.dirs]

    new_paths = {f.path for f in new.files} | {d.path for d in new.dirs}
    dropped = [p for p in (*old_files, *old_dirs) if p not in new_paths]
    if dropped:
        logger.debug(f"Dropped from model under {new.path}: {[str(p) for p in dropped]}")

    return Directory(name=new.name, path=new.path, dirs=dirs, files=files)
