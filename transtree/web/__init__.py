"""Web application package for transtree."""

from pathlib import Path
from typing import Optional

from flask import Flask

from transtree.config import initialize_app


def create_app(project_path: Optional[Path] = None, translator=None) -> Flask:
    """Application factory for the web interface."""
    initialize_app()

    from .app import build_app  # Import here to avoid circular imports

    return build_app(project_path=project_path, translator=translator)


__all__ = ["create_app"]
