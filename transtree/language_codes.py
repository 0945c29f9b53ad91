"""
Supported project languages and their naming conventions.

A language is identified in the manifest by its tag (the English name, e.g.
'French'). Each tag has:
- an ISO 639-1 code used when talking to AI providers ('fr')
- a directory suffix used to name the target tree of a project

Target Directory Naming Convention:
The tree for a target language is named <project-name><suffix>.
For example, project 'demo':
- French maps to directory 'demo_fr'
- Ukrainian maps to directory 'demo_ua'
The get_language_dir_name() function handles this mapping.
"""

from typing import Optional, Dict

# Tag -> ISO 639-1 code
LANGUAGE_CODES = {
    'French': 'fr',
    'English': 'en',
    'German': 'de',
    'Spanish': 'es',
    'Ukrainian': 'uk',
}

# Tag -> target directory suffix
LANGUAGE_DIR_SUFFIXES = {
    'French': '_fr',
    'English': '_en',
    'German': '_de',
    'Spanish': '_sp',
    'Ukrainian': '_ua',
}


def is_supported_language(tag: str) -> bool:
    """
    Check if a language tag is supported.

    Examples:
        >>> is_supported_language('French')
        True
        >>> is_supported_language('fr')
        False
    """
    return tag in LANGUAGE_CODES


def normalize_language(value: str) -> Optional[str]:
    """
    Resolve a tag or ISO code, case-insensitively, to a language tag.

    Examples:
        >>> normalize_language('french')
        'French'
        >>> normalize_language('UK')
        'Ukrainian'
        >>> normalize_language('klingon') is None
        True
    """
    if not value:
        return None
    wanted = value.strip().lower()
    for tag, code in LANGUAGE_CODES.items():
        if wanted in (tag.lower(), code):
            return tag
    return None


def get_language_code(tag: str) -> Optional[str]:
    """Get the ISO 639-1 code for a tag."""
    return LANGUAGE_CODES.get(tag)


def get_dir_suffix(tag: str) -> str:
    """Get the directory suffix for a tag. Raises KeyError for unknown tags."""
    return LANGUAGE_DIR_SUFFIXES[tag]


def get_language_dir_name(project_name: str, tag: str) -> str:
    """
    Get the directory name of a target tree.

    Examples:
        >>> get_language_dir_name('demo', 'French')
        'demo_fr'
    """
    return f"{project_name}{get_dir_suffix(tag)}"


def get_all_languages() -> Dict[str, str]:
    """Get all supported tags with their ISO codes."""
    return LANGUAGE_CODES.copy()
