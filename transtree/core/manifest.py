"""
Manifest persistence.

The manifest (trans_conf.json at the project root) is the only persisted
state of a project. It is rewritten in full after every mutation.
"""

import json
from pathlib import Path
from typing import Optional

from transtree.core.exceptions import ManifestFormatError, ProjectIOError
from transtree.core.tree import ProjectConfig
from transtree.logger import get_logger

logger = get_logger(__name__)

MANIFEST_FILENAME = "trans_conf.json"


def find_manifest(start: Path, file_name: str = MANIFEST_FILENAME) -> Optional[Path]:
    """
    Search start and each of its parents for the manifest.

    Args:
        start: Directory (or file, whose parent is used) to start from
        file_name: Manifest file name

    Returns:
        Absolute path of the first manifest found, or None
    """
    try:
        directory = Path(start).resolve(strict=True)
    except OSError:
        return None
    if not directory.is_dir():
        directory = directory.parent

    for candidate_dir in (directory, *directory.parents):
        candidate = candidate_dir / file_name
        if candidate.is_file():
            logger.debug(f"Manifest found: {candidate}")
            return candidate
    return None


def load_manifest(path: Path) -> ProjectConfig:
    """
    Read a manifest.

    Raises:
        ProjectIOError: If the file cannot be read
        ManifestFormatError: If it is not JSON or not shaped like a manifest
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            contents = f.read()
    except OSError as e:
        raise ProjectIOError(f"Cannot read manifest {path}: {e}", details={'path': str(path)}) from e

    try:
        data = json.loads(contents)
    except json.JSONDecodeError as e:
        raise ManifestFormatError(f"Manifest {path} is not valid JSON: {e}", details={'path': str(path)}) from e

    config = ProjectConfig.from_dict(data)
    logger.debug(f"Loaded manifest {path}: project '{config.name}'")
    return config


def save_manifest(path: Path, config: ProjectConfig) -> None:
    """
    Write a manifest, replacing any previous one.

    Raises:
        ProjectIOError: If the file cannot be written
    """
    try:
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(config.to_dict(), f, indent=4, ensure_ascii=False)
    except OSError as e:
        raise ProjectIOError(f"Cannot write manifest {path}: {e}", details={'path': str(path)}) from e
    logger.debug(f"Manifest saved: {path}")
