"""
Project Exceptions

Errors raised by the tree engine and the project lifecycle. Three families:
- PreconditionError: the operation was refused before touching anything
- ProjectIOError: a filesystem step failed; the OSError is chained as __cause__
- ManifestError: the manifest is missing or does not have the expected shape
"""


class ProjectError(Exception):
    """Project error with optional code and details."""

    code = "project_error"

    def __init__(self, message: str, code: str = None, details: dict = None):
        super().__init__(message)
        if code:
            self.code = code
        self.details = details or {}


class PreconditionError(ProjectError):
    code = "precondition_failed"


class InvalidPathError(PreconditionError):
    code = "invalid_path"


class NotDirectoryError(PreconditionError):
    code = "not_directory"


class ProjectAlreadyInitializedError(PreconditionError):
    code = "already_initialized"


class UnsupportedLanguageError(PreconditionError):
    code = "unsupported_language"


class LanguageConflictError(PreconditionError):
    code = "language_in_project"


class LanguageDirExistsError(PreconditionError):
    code = "language_dir_exists"


class NoSourceError(PreconditionError):
    code = "no_source"


class NoTargetError(PreconditionError):
    code = "no_target"


class UnknownTargetError(PreconditionError):
    code = "unknown_target"


class FileNotInSourceError(PreconditionError):
    code = "file_not_in_source"


class NotTranslatableError(PreconditionError):
    code = "not_translatable"


class ProjectIOError(ProjectError):
    code = "io_error"


class DistributionError(ProjectIOError):
    code = "distribution_error"


class ManifestError(ProjectError):
    code = "manifest_error"


class NoManifestError(ManifestError):
    code = "no_manifest"


class ManifestFormatError(ManifestError):
    code = "incorrect_format"
