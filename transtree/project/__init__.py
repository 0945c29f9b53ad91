"""
Project module - Project lifecycle

This module provides:
- manager: Project (init/load/set-source/add-lang/remove-lang/mark/sync/translate)
"""

from transtree.project.manager import (
    Project,
    SyncReport,
    load_project,
)
