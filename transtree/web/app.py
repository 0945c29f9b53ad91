"""Flask application configuration and blueprint registration."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from flask import Flask, jsonify

from transtree.logger import get_logger

from .routes.projects import projects_bp

logger = get_logger(__name__)


def build_app(project_path: Optional[Path] = None, translator=None) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)

    # Ensure JSON responses keep Unicode data.
    app.json.ensure_ascii = False

    # Directory the project is looked up from; requests may override it with ?path=
    app.config["PROJECT_PATH"] = str(Path(project_path) if project_path else Path.cwd())
    # Translation collaborator handed to every Project; None means AIService
    app.config["TRANSLATOR"] = translator

    register_blueprints(app)
    register_default_routes(app)

    return app


def register_blueprints(app: Flask) -> None:
    """Register Flask blueprints."""
    app.register_blueprint(projects_bp, url_prefix="/api/project")


def register_default_routes(app: Flask) -> None:
    """Register default health route and error handlers."""

    @app.get("/health")
    def health_check():
        logger.debug("Health check requested")
        return jsonify({"status": "ok"})

    @app.errorhandler(404)
    def page_not_found(e):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(500)
    def internal_error(e):
        logger.exception("Internal server error: %s", e)
        return jsonify({"error": "Unexpected error occurred"}), 500
