"""
Distributor copying untranslatable source files into a target tree.

Translatable files are left alone: their target versions come from the
translation step. A failure to create a directory aborts the call, while a
failed copy of a single file is recorded in the result and the remaining
files are still copied.

Symbolic links in the target tree are never written through: a destination
that is a link, or that sits below a linked directory, is recorded as a
failure and left untouched.
"""

import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from transtree.core.exceptions import DistributionError
from transtree.core.tree import Directory
from transtree.logger import get_logger

logger = get_logger(__name__)


@dataclass
class CopyFailure:
    """A source file that could not be copied."""
    path: Path
    error: str

    def to_dict(self) -> Dict[str, str]:
        return {'path': str(self.path), 'error': self.error}


@dataclass
class DistributionResult:
    """Outcome of distributing one source tree into one target tree."""
    target_root: Path
    copied: List[Path] = field(default_factory=list)
    failures: List[CopyFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def to_dict(self) -> Dict:
        return {
            'target_root': str(self.target_root),
            'copied': [str(p) for p in self.copied],
            'failures': [f.to_dict() for f in self.failures],
        }


def distribute(source_root: Path, source_model: Directory, target_root: Path) -> DistributionResult:
    """
    Copy every untranslatable file of source_model to the same relative path under target_root.

    Args:
        source_root: Root the model's paths are relative to
        source_model: Source tree model
        target_root: Root of the target tree

    Returns:
        DistributionResult listing copied files and per-file failures

    Raises:
        DistributionError: If a relative path cannot be computed or a directory
            cannot be created
    """
    source_root = Path(source_root)
    target_root = Path(target_root)
    result = DistributionResult(target_root=target_root)

    logger.info(f"Distributing untranslatable files from {source_root} to {target_root}")

    for file in source_model.iter_files():
        if file.translatable:
            continue

        try:
            relative = file.path.relative_to(source_root)
        except ValueError as e:
            raise DistributionError(
                f"File {file.path} is not inside {source_root}",
                details={'path': str(file.path)}
            ) from e

        destination = target_root / relative
        link = find_symlink(target_root, relative)
        if link is not None:
            logger.warning(f"Not copying {file.path}: {link} in the target is a symlink")
            result.failures.append(CopyFailure(path=file.path, error=f"{link} is a symlink"))
            continue

        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DistributionError(
                f"Could not create directory {destination.parent}: {e}",
                details={'path': str(destination.parent)}
            ) from e

        try:
            shutil.copyfile(file.path, destination)
        except OSError as e:
            logger.warning(f"Failed to copy {file.path} to {destination}: {e}")
            result.failures.append(CopyFailure(path=file.path, error=str(e)))
            continue

        logger.debug(f"Copied {relative}")
        result.copied.append(destination)

    logger.info(
        f"Distribution to {target_root} done: "
        f"{len(result.copied)} copied, {len(result.failures)} failed"
    )
    return result


def find_symlink(target_root: Path, relative: Path) -> Optional[Path]:
    """Return the first symlink on the way from target_root to target_root / relative, if any."""
    for part in reversed(relative.parents):
        if part == Path('.'):
            continue
        if (target_root / part).is_symlink():
            return target_root / part
    destination = target_root / relative
    if destination.is_symlink():
        return destination
    return None
