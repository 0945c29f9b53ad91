"""
Translation module - Document chunking helpers

This module provides:
- Line-based chunking of documents sent to the AI provider
- Delimiter wrapping of chunks and extraction of the translated output
"""

from transtree.translation.utils import (
    divide_into_chunks,
    wrap_document,
    extract_translated_from_response,
)
