"""Project API routes - lifecycle operations on the project found from the configured path."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request

from transtree.ai.exceptions import TranslationError
from transtree.core.exceptions import (
    LanguageConflictError,
    LanguageDirExistsError,
    ManifestFormatError,
    NoManifestError,
    PreconditionError,
    ProjectAlreadyInitializedError,
    ProjectError,
    ProjectIOError,
)
from transtree.logger import get_logger
from transtree.project.manager import Project

projects_bp = Blueprint("projects", __name__)
logger = get_logger(__name__)

# Most specific first
_STATUS_CODES = [
    (NoManifestError, 404),
    (ManifestFormatError, 422),
    (ProjectAlreadyInitializedError, 409),
    (LanguageConflictError, 409),
    (LanguageDirExistsError, 409),
    (PreconditionError, 400),
    (ProjectIOError, 500),
]


@projects_bp.errorhandler(ProjectError)
def handle_project_error(exc: ProjectError):
    status = next((code for kind, code in _STATUS_CODES if isinstance(exc, kind)), 500)
    if status >= 500:
        logger.exception("Project operation failed: %s", exc)
    else:
        logger.warning("Project operation refused: %s", exc)
    return jsonify({"error": str(exc), "code": exc.code, "details": exc.details}), status


@projects_bp.errorhandler(TranslationError)
def handle_translation_error(exc: TranslationError):
    logger.error("Translation failed: %s", exc)
    return jsonify({"error": str(exc), "code": exc.code, "details": exc.details}), 502


def _project_path() -> Path:
    return Path(request.args.get("path") or current_app.config["PROJECT_PATH"])


def _load_project() -> Project:
    return Project.load(_project_path(), translator=current_app.config.get("TRANSLATOR"))


def _payload() -> Dict[str, Any]:
    return request.get_json(silent=True) or {}


def _required(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise PreconditionError(f"Missing required field '{key}'", code="missing_field",
                                details={"field": key})
    return value.strip()


def _project_response(project: Project, status: int = 200, **extra):
    body = {
        "root": str(project.root),
        "manifest": str(project.manifest_path),
        "project": project.config.to_dict(),
    }
    body.update(extra)
    return jsonify(body), status


@projects_bp.get("/")
def get_project():
    """Return the project state as stored in the manifest."""
    project = _load_project()
    return _project_response(project, languages=project.config.languages())


@projects_bp.post("/init")
def init_project():
    """Create a project; the JSON body gives its name and optionally its root path."""
    data = _payload()
    name = _required(data, "name")
    path = Path(data.get("path") or _project_path())
    project = Project.init(name, path, translator=current_app.config.get("TRANSLATOR"))
    return _project_response(project, 201)


@projects_bp.post("/source")
def set_source():
    """Scan a directory of the project root and make it the source tree."""
    data = _payload()
    project = _load_project()
    project.set_source_dir(_required(data, "dir"), _required(data, "language"))
    return _project_response(project)


@projects_bp.post("/languages")
def add_language():
    """Add a target language."""
    data = _payload()
    project = _load_project()
    lang_dir = project.add_lang(_required(data, "language"))
    return _project_response(project, 201, added=lang_dir.language, path=str(lang_dir.dir.path))


@projects_bp.delete("/languages/<language>")
def remove_language(language: str):
    """Remove a target language and delete its tree."""
    project = _load_project()
    project.remove_lang(language)
    return _project_response(project, removed=language)


@projects_bp.get("/files/translatable")
def list_translatable_files():
    """Return the translatable source files, breadth-first."""
    project = _load_project()
    files = [str(p) for p in project.get_translatable_files()]
    return jsonify({"files": files, "count": len(files)})


@projects_bp.post("/files/translatable")
def set_translatable():
    """Flag a source file; body: {"path": ..., "translatable": true|false}."""
    data = _payload()
    path = _required(data, "path")
    translatable = data.get("translatable", True)
    if not isinstance(translatable, bool):
        raise PreconditionError("Field 'translatable' must be a boolean", code="invalid_field",
                                details={"field": "translatable"})

    project = _load_project()
    if translatable:
        resolved = project.mark_translatable(path)
    else:
        resolved = project.mark_untranslatable(path)
    return jsonify({"path": str(resolved), "translatable": translatable})


@projects_bp.post("/sync")
def sync_project():
    """Rescan the source and bring every target tree up to date."""
    project = _load_project()
    report = project.sync_files()
    logger.info("Sync done for project '%s' (%s copy failures)", project.name, len(report.failures))
    return jsonify({"report": report.to_dict(), "project": project.config.to_dict()})


@projects_bp.post("/translate")
def translate():
    """Translate one file ({"language", "path"}) or every translatable file ({"language"})."""
    data = _payload()
    language = _required(data, "language")
    project = _load_project()

    if data.get("path"):
        written = [project.translate_file(_required(data, "path"), language)]
    else:
        written = project.translate_all(language)
    return jsonify({"written": [str(p) for p in written], "count": len(written)})
