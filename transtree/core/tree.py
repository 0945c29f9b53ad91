"""
Tree model of a translation project.

A Directory is a snapshot of a real directory at scan time: it owns its child
directories and files and is never updated behind the caller's back. The
model serializes to the manifest schema:

    DirectoryEntry = {name, path, dirs: [DirectoryEntry], files: [FileEntry]}
    FileEntry = {name, path, translatable}
    LangDirEntry = {dir: DirectoryEntry, language}
    ProjectConfig = {name, lang_dirs: [LangDirEntry], src_dir: LangDirEntry | null}
"""

from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

import transtree.language_codes as lc
from transtree.core.exceptions import ManifestFormatError


def _require(data: Any, key: str, kind: type, what: str) -> Any:
    """Fetch data[key] and check its type, raising ManifestFormatError otherwise."""
    if not isinstance(data, dict):
        raise ManifestFormatError(f"{what} must be an object, got {type(data).__name__}")
    if key not in data:
        raise ManifestFormatError(f"{what} is missing '{key}'")
    value = data[key]
    # bool is a subclass of int, but the schema never mixes the two
    if not isinstance(value, kind) or (kind is not bool and isinstance(value, bool)):
        raise ManifestFormatError(f"{what} field '{key}' must be {kind.__name__}")
    return value


@dataclass
class File:
    """A file leaf. Its path is its identity."""
    name: str
    path: Path
    translatable: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'path': str(self.path), 'translatable': self.translatable}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "File":
        return cls(
            name=_require(data, 'name', str, "FileEntry"),
            path=Path(_require(data, 'path', str, "FileEntry")),
            translatable=_require(data, 'translatable', bool, "FileEntry"),
        )


@dataclass
class Directory:
    """A directory node with its child directories and files."""
    name: str
    path: Path
    dirs: List["Directory"] = field(default_factory=list)
    files: List[File] = field(default_factory=list)

    def iter_files(self) -> Iterator[File]:
        """Yield every file of the tree, breadth-first."""
        queue = deque([self])
        while queue:
            directory = queue.popleft()
            yield from directory.files
            queue.extend(directory.dirs)

    def find_file(self, path: Path) -> Optional[File]:
        """Return the file recorded at path, or None."""
        path = Path(path)
        for file in self.iter_files():
            if file.path == path:
                return file
        return None

    def find_dir(self, name: str) -> Optional["Directory"]:
        """Return the direct child directory called name, or None."""
        for directory in self.dirs:
            if directory.name == name:
                return directory
        return None

    def file_flags(self) -> Dict[Path, bool]:
        """Map every file path of the tree to its translatable flag."""
        return {file.path: file.translatable for file in self.iter_files()}

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'path': str(self.path),
            'dirs': [d.to_dict() for d in self.dirs],
            'files': [f.to_dict() for f in self.files],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Directory":
        return cls(
            name=_require(data, 'name', str, "DirectoryEntry"),
            path=Path(_require(data, 'path', str, "DirectoryEntry")),
            dirs=[cls.from_dict(d) for d in _require(data, 'dirs', list, "DirectoryEntry")],
            files=[File.from_dict(f) for f in _require(data, 'files', list, "DirectoryEntry")],
        )


@dataclass
class LangDir:
    """A directory tree holding the content of one language."""
    dir: Directory
    language: str

    def to_dict(self) -> Dict[str, Any]:
        return {'dir': self.dir.to_dict(), 'language': self.language}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LangDir":
        language = _require(data, 'language', str, "LangDirEntry")
        if not lc.is_supported_language(language):
            raise ManifestFormatError(f"Unsupported language in manifest: {language}")
        return cls(
            dir=Directory.from_dict(_require(data, 'dir', dict, "LangDirEntry")),
            language=language,
        )


@dataclass
class ProjectConfig:
    """The logical state of a project, persisted as the manifest."""
    name: str
    lang_dirs: List[LangDir] = field(default_factory=list)
    src_dir: Optional[LangDir] = None

    def languages(self) -> List[str]:
        """All languages of the project, source first."""
        languages = [self.src_dir.language] if self.src_dir else []
        languages.extend(lang_dir.language for lang_dir in self.lang_dirs)
        return languages

    def find_target(self, language: str) -> Optional[LangDir]:
        for lang_dir in self.lang_dirs:
            if lang_dir.language == language:
                return lang_dir
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'lang_dirs': [ld.to_dict() for ld in self.lang_dirs],
            'src_dir': self.src_dir.to_dict() if self.src_dir else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProjectConfig":
        name = _require(data, 'name', str, "Manifest")
        lang_dirs = [LangDir.from_dict(ld) for ld in _require(data, 'lang_dirs', list, "Manifest")]
        if 'src_dir' not in data:
            raise ManifestFormatError("Manifest is missing 'src_dir'")
        src_dir = LangDir.from_dict(data['src_dir']) if data['src_dir'] is not None else None
        return cls(name=name, lang_dirs=lang_dirs, src_dir=src_dir)
