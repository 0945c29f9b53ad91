"""
Core module - Tree model and filesystem engine

This module provides:
- tree: File, Directory, LangDir and ProjectConfig model types
- scanner: Build a model from a real directory
- merge: Reconcile a stale model with a fresh scan
- prune: Remove stale entries from a target tree
- distribute: Copy untranslatable files into a target tree
- manifest: Read and write trans_conf.json
- exceptions: Project error families
"""

from transtree.core.tree import (
    File,
    Directory,
    LangDir,
    ProjectConfig,
)

from transtree.core.scanner import scan
from transtree.core.merge import merge
from transtree.core.prune import prune

from transtree.core.distribute import (
    CopyFailure,
    DistributionResult,
    distribute,
)

from transtree.core.manifest import (
    MANIFEST_FILENAME,
    find_manifest,
    load_manifest,
    save_manifest,
)
