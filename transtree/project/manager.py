"""
Project lifecycle management.

A Project couples a root directory with its ProjectConfig. Every mutating
operation first checks its preconditions, then updates the in-memory model,
then persists the manifest with save(). Nothing is committed until that write
succeeds.

Typical workflow:
1. Project.init(name, root) creates trans_conf.json
2. set_source_dir() scans the source tree
3. add_lang() creates one target tree per language
4. mark_translatable() flags files produced by the translation step
5. sync_files() brings every target tree in line with the source
6. translate_file() / translate_all() fill in the translatable files
"""

import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import transtree.language_codes as lc
from transtree.core.distribute import CopyFailure, DistributionResult, distribute, find_symlink
from transtree.core.exceptions import (
    FileNotInSourceError,
    InvalidPathError,
    LanguageConflictError,
    LanguageDirExistsError,
    NoManifestError,
    NoSourceError,
    NoTargetError,
    NotDirectoryError,
    NotTranslatableError,
    ProjectAlreadyInitializedError,
    ProjectIOError,
    UnknownTargetError,
    UnsupportedLanguageError,
)
from transtree.core.manifest import MANIFEST_FILENAME, find_manifest, load_manifest, save_manifest
from transtree.core.merge import merge
from transtree.core.prune import prune
from transtree.core.scanner import scan
from transtree.core.tree import LangDir, ProjectConfig
from transtree.logger import get_logger

logger = get_logger(__name__)


@dataclass
class SyncReport:
    """What sync_files() did to every target tree."""
    pruned: Dict[str, List[Path]] = field(default_factory=dict)
    distributed: Dict[str, DistributionResult] = field(default_factory=dict)

    @property
    def failures(self) -> List[CopyFailure]:
        return [failure for result in self.distributed.values() for failure in result.failures]

    def to_dict(self) -> Dict:
        return {
            'pruned': {lang: [str(p) for p in paths] for lang, paths in self.pruned.items()},
            'distributed': {lang: result.to_dict() for lang, result in self.distributed.items()},
            'failure_count': len(self.failures),
        }


def _io_error(action: str, error: OSError) -> ProjectIOError:
    return ProjectIOError(f"{action}: {error}", details={'path': getattr(error, 'filename', None)})


class Project:
    """A translation project rooted at the directory holding its manifest."""

    def __init__(self, root: Path, config: ProjectConfig, translator=None):
        self.root = Path(root)
        self.config = config
        self._translator = translator

    def __repr__(self):
        return f"Project(name={self.config.name!r}, root={str(self.root)!r})"

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def manifest_path(self) -> Path:
        return self.root / MANIFEST_FILENAME

    @property
    def translator(self):
        """The translation collaborator, an AIService unless one was injected."""
        if self._translator is None:
            from transtree.ai import AIService
            self._translator = AIService()
        return self._translator

    # ------------------------------------------------------------
    # Creation and loading
    # ------------------------------------------------------------

    @classmethod
    def init(cls, name: str, path: Path, translator=None) -> "Project":
        """
        Create an empty project in an existing directory.

        Raises:
            InvalidPathError: If path is not an existing directory
            ProjectAlreadyInitializedError: If a manifest is already there
            ProjectIOError: If the manifest cannot be written
        """
        path = Path(path)
        if not path.is_dir():
            raise InvalidPathError(f"Invalid project path: {path}", details={'path': str(path)})

        root = path.resolve()
        if (root / MANIFEST_FILENAME).exists():
            raise ProjectAlreadyInitializedError(
                f"Project is already initialized at {root}", details={'path': str(root)}
            )

        project = cls(root, ProjectConfig(name=name), translator=translator)
        project.save()
        logger.info(f"Initialized project '{name}' at {root}")
        return project

    @classmethod
    def load(cls, path: Path, translator=None) -> "Project":
        """
        Load the project whose manifest is found in path or one of its parents.

        Raises:
            NoManifestError: If no manifest exists up to the filesystem root
            ManifestFormatError: If the manifest is malformed
            ProjectIOError: If the manifest cannot be read
        """
        manifest = find_manifest(Path(path))
        if manifest is None:
            raise NoManifestError(f"No {MANIFEST_FILENAME} found from {path} upwards",
                                  details={'path': str(path)})

        config = load_manifest(manifest)
        logger.info(f"Loaded project '{config.name}' from {manifest}")
        return cls(manifest.parent, config, translator=translator)

    def save(self) -> None:
        """Persist the manifest."""
        save_manifest(self.manifest_path, self.config)

    # ------------------------------------------------------------
    # Languages
    # ------------------------------------------------------------

    def _require_language(self, language: str) -> str:
        tag = lc.normalize_language(language)
        if tag is None:
            raise UnsupportedLanguageError(
                f"Unsupported language: {language}",
                details={'language': language, 'supported': list(lc.get_all_languages())}
            )
        return tag

    def _require_source(self) -> LangDir:
        if self.config.src_dir is None:
            raise NoSourceError("No source directory is set for this project")
        return self.config.src_dir

    def _require_target(self, language: str) -> LangDir:
        tag = self._require_language(language)
        lang_dir = self.config.find_target(tag)
        if lang_dir is None:
            raise UnknownTargetError(f"{tag} is not a target language of this project",
                                     details={'language': tag})
        return lang_dir

    def set_source_dir(self, dir_name: str, language: str) -> LangDir:
        """
        Scan root/dir_name and make it the source tree.

        Raises:
            InvalidPathError: If the directory does not exist
            NotDirectoryError: If the path is not a directory
            UnsupportedLanguageError: If the language is unknown
            LanguageConflictError: If the language is already used in the project
            ProjectIOError: If scanning or saving fails
        """
        tag = self._require_language(language)
        source_path = Path(os.path.normpath(self.root / dir_name))

        if not source_path.exists():
            raise InvalidPathError(f"Directory doesn't exist: {source_path}",
                                   details={'path': str(source_path)})
        if not source_path.is_dir():
            raise NotDirectoryError(f"Provided path is not a directory: {source_path}",
                                    details={'path': str(source_path)})
        if tag in self.config.languages():
            raise LanguageConflictError(f"{tag} is already in the project", details={'language': tag})

        try:
            tree = scan(source_path)
        except OSError as e:
            raise _io_error(f"Couldn't analyze directory {source_path}", e) from e

        self.config.src_dir = LangDir(dir=tree, language=tag)
        self.save()
        logger.info(f"Source set to {source_path} ({tag}), {len(tree.file_flags())} files")
        return self.config.src_dir

    def lang_dir_path(self, language: str) -> Path:
        """Path of the target tree for a language: root/<name><suffix>."""
        return self.root / lc.get_language_dir_name(self.config.name, self._require_language(language))

    def add_lang(self, language: str) -> LangDir:
        """
        Add a target language and create its empty directory.

        Raises:
            NoSourceError: If no source is set
            LanguageConflictError: If the language is the source or already a target
            LanguageDirExistsError: If the target directory already exists
            ProjectIOError: If the directory cannot be created or the manifest saved
        """
        tag = self._require_language(language)
        self._require_source()
        if tag in self.config.languages():
            raise LanguageConflictError(f"{tag} is already in the project", details={'language': tag})

        target_path = self.lang_dir_path(tag)
        if target_path.exists():
            raise LanguageDirExistsError(f"Language directory already exists: {target_path}",
                                         details={'path': str(target_path)})

        try:
            target_path.mkdir()
            tree = scan(target_path)
        except OSError as e:
            raise _io_error(f"Couldn't create language directory {target_path}", e) from e

        lang_dir = LangDir(dir=tree, language=tag)
        self.config.lang_dirs.append(lang_dir)
        self.save()
        logger.info(f"Added target language {tag} at {target_path}")
        return lang_dir

    def remove_lang(self, language: str) -> None:
        """
        Drop a target language and delete its directory tree.

        Raises:
            UnknownTargetError: If the language is not a target
            InvalidPathError: If its directory is already gone
            ProjectIOError: If saving or deleting fails
        """
        lang_dir = self._require_target(language)
        target_path = lang_dir.dir.path
        if not target_path.is_dir():
            raise InvalidPathError(f"Language directory is missing: {target_path}",
                                   details={'path': str(target_path)})

        self.config.lang_dirs.remove(lang_dir)
        self.save()

        try:
            shutil.rmtree(target_path)
        except OSError as e:
            raise _io_error(f"Couldn't remove language directory {target_path}", e) from e
        logger.info(f"Removed target language {lang_dir.language} ({target_path})")

    # ------------------------------------------------------------
    # Translatable flags
    # ------------------------------------------------------------

    def _resolve(self, path: Path) -> Path:
        """Absolute, normalized form of a path given absolute or relative to the root."""
        return Path(os.path.normpath(self.root / path))

    def _set_translatable(self, path: Path, translatable: bool) -> Path:
        source = self._require_source()
        resolved = self._resolve(path)
        file = source.dir.find_file(resolved)
        if file is None:
            raise FileNotInSourceError(f"File not found in source tree: {path}",
                                       details={'path': str(resolved)})
        file.translatable = translatable
        self.save()
        logger.info(f"Marked {resolved} as {'translatable' if translatable else 'untranslatable'}")
        return resolved

    def mark_translatable(self, path: Path) -> Path:
        """Flag a source file as produced by translation."""
        return self._set_translatable(path, True)

    def mark_untranslatable(self, path: Path) -> Path:
        """Flag a source file as copied verbatim to every target."""
        return self._set_translatable(path, False)

    def get_translatable_files(self) -> List[Path]:
        """Paths of translatable source files, breadth-first."""
        source = self._require_source()
        return [file.path for file in source.dir.iter_files() if file.translatable]

    # ------------------------------------------------------------
    # Synchronization
    # ------------------------------------------------------------

    def sync_files(self) -> SyncReport:
        """
        Bring the source model and every target tree up to date.

        The source is rescanned and merged into the model (keeping flags),
        each target is pruned and receives the untranslatable files, then
        every target model is rebuilt from a fresh scan and the manifest is saved.

        Raises:
            NoSourceError: If no source is set
            NoTargetError: If there is no target language
            ProjectIOError: If any filesystem step fails; later steps are skipped
        """
        source = self._require_source()
        if not self.config.lang_dirs:
            raise NoTargetError("The project has no target language to sync")

        source_root = source.dir.path
        logger.info(f"Syncing project '{self.name}' from {source_root}")
        report = SyncReport()

        try:
            source.dir = merge(source.dir, scan(source_root))

            for lang_dir in self.config.lang_dirs:
                target_root = lang_dir.dir.path
                if not target_root.is_dir():
                    logger.warning(f"Target directory {target_root} is missing, recreating it")
                    target_root.mkdir(parents=True)
                report.pruned[lang_dir.language] = prune(source.dir, target_root)
                report.distributed[lang_dir.language] = distribute(source_root, source.dir, target_root)

            for lang_dir in self.config.lang_dirs:
                lang_dir.dir = scan(lang_dir.dir.path)
        except OSError as e:
            raise _io_error("Sync failed", e) from e

        self.save()

        if report.failures:
            logger.warning(f"Sync finished with {len(report.failures)} file(s) not copied")
        else:
            logger.info(f"Sync of project '{self.name}' complete")
        return report

    # ------------------------------------------------------------
    # Translation
    # ------------------------------------------------------------

    def translate_file(self, path: Path, language: str) -> Path:
        """
        Translate one translatable source file into a target tree.

        Returns:
            Path of the written translation

        Raises:
            NoSourceError: If no source is set
            UnknownTargetError: If the language is not a target
            NotTranslatableError: If the file is not in the translatable set
            TranslationError: If the translation collaborator fails
            ProjectIOError: If reading the source or writing the result fails,
                or the destination goes through a symlink
        """
        source = self._require_source()
        lang_dir = self._require_target(language)
        resolved = self._resolve(path)

        if resolved not in self.get_translatable_files():
            raise NotTranslatableError(f"File is not marked translatable: {path}",
                                       details={'path': str(resolved)})

        relative = resolved.relative_to(source.dir.path)
        destination = lang_dir.dir.path / relative
        link = find_symlink(lang_dir.dir.path, relative)
        if link is not None:
            raise ProjectIOError(f"Refusing to write through symlink {link}",
                                 details={'path': str(link)})

        try:
            text = resolved.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            raise _io_error(f"Couldn't read {resolved}", e) from e

        logger.info(f"Translating {relative} to {lang_dir.language}")
        translated = self.translator.translate(text, lang_dir.language)

        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_text(translated, encoding='utf-8')
        except OSError as e:
            raise _io_error(f"Couldn't write {destination}", e) from e

        logger.info(f"Wrote {destination}")
        return destination

    def translate_all(self, language: str) -> List[Path]:
        """Translate every translatable file into one target tree, breadth-first."""
        self._require_target(language)
        written = [self.translate_file(path, language) for path in self.get_translatable_files()]
        logger.info(f"Translated {len(written)} file(s) to {language}")
        return written


def load_project(path: Optional[Path] = None) -> Project:
    """Load the project containing path (default: the current directory)."""
    return Project.load(Path(path) if path else Path.cwd())
