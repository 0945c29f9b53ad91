"""Route blueprints for the web application."""

from .projects import projects_bp

__all__ = [
    "projects_bp",
]
