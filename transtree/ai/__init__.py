"""
AI Module

This module provides the AI translation service used to produce the
target-language versions of translatable files.
"""

from transtree.ai.exceptions import TranslationError
from transtree.ai.service import AIService, validate_ai_config

__all__ = ['TranslationError', 'AIService', 'validate_ai_config']
