"""
Directory scanner building a fresh tree model from disk.

Symbolic links are skipped entirely: they are neither followed nor recorded.
Any OSError aborts the scan, so callers never see a partial tree.
"""

from pathlib import Path

from transtree.core.tree import Directory, File
from transtree.logger import get_logger

logger = get_logger(__name__)


def scan(root: Path) -> Directory:
    """
    Scan a directory recursively.

    Args:
        root: Directory to scan

    Returns:
        Directory snapshot of root, every file marked untranslatable

    Raises:
        OSError: If listing a directory or reading an entry's metadata fails
    """
    root = Path(root)
    logger.debug(f"Scanning directory: {root}")
    directory = _scan_dir(root)
    logger.debug(f"Scan of {root} complete: {sum(1 for _ in directory.iter_files())} files")
    return directory


def _scan_dir(path: Path) -> Directory:
    directory = Directory(name=path.name or "/", path=path)

    for entry in path.iterdir():
        if entry.is_symlink():
            logger.debug(f"Skipping symlink: {entry}")
            continue

        if entry.is_dir():
            directory.dirs.append(_scan_dir(entry))
        elif entry.is_file():
            directory.files.append(File(name=entry.name, path=entry))

    return directory
