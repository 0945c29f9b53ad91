"""
AI Translation Service Module

This module provides the main AI service for translation:
- AIService class turning a whole document into its translation
- Configuration validation
- Error handling, retry logic and the fixed pause between provider calls

For provider-specific API implementations, see ai/providers.py
"""

import os
import time
from typing import Dict, Any, Tuple, Optional

from transtree.config import (
    load_config,
    get_prompt,
    BUILTIN_PROVIDERS,
    DEFAULT_LINES_PER_CHUNK,
    DEFAULT_REQUEST_INTERVAL,
    DEFAULT_SYSTEM_MESSAGE,
)
from transtree.logger import get_logger
from transtree import language_codes as lc
from transtree.ai.exceptions import TranslationError
from transtree.translation.utils import (
    divide_into_chunks,
    extract_translated_from_response,
    wrap_document,
)

logger = get_logger(__name__)

# Environment variables consulted when a provider's api_key is not configured
API_KEY_ENV_VARS = {
    'gemini': 'GOOGLE_API_KEY',
    'openai': 'OPENAI_API_KEY',
    'deepseek': 'DEEPSEEK_API_KEY',
}


def _display_name(provider: str) -> str:
    if provider in BUILTIN_PROVIDERS:
        return provider.capitalize()
    return provider.replace('-', ' ').title()


def resolve_api_key(provider: str, provider_config: Dict[str, Any]) -> str:
    """Return the configured API key, falling back to the provider's environment variable."""
    api_key = provider_config.get('api_key', '')
    if api_key and api_key != "YOUR_API_KEY_HERE":
        return api_key
    env_var = API_KEY_ENV_VARS.get(provider)
    return os.environ.get(env_var, '') if env_var else ''


def validate_ai_config(provider_override: Optional[str] = None) -> None:
    """
    Validate that AI provider configuration is properly set up.

    Args:
        provider_override: Optional provider to validate instead of the default.

    Raises:
        TranslationError: If configuration is invalid or missing, with code and details.
    """
    config = load_config()
    provider = provider_override if provider_override else config.get('ai_provider', 'gemini')

    provider_config = config.get(provider)
    if not isinstance(provider_config, dict) or not provider_config:
        raise TranslationError(
            f"AI provider '{provider}' configuration not found",
            code="ai_config_missing",
            details={"provider": provider}
        )

    if not resolve_api_key(provider, provider_config):
        raise TranslationError(
            f"{_display_name(provider)} API key not configured",
            code="ai_config_missing",
            details={"provider": provider, "missing_field": "api_key"}
        )

    models = provider_config.get('models', [])
    valid_models = [m for m in models if m and isinstance(m, str)] if isinstance(models, list) else []
    if not valid_models and not provider_config.get('model'):
        raise TranslationError(
            f"{_display_name(provider)} model not configured",
            code="ai_config_missing",
            details={"provider": provider, "missing_field": "models"}
        )

    if provider not in BUILTIN_PROVIDERS and not provider_config.get('api_url'):
        raise TranslationError(
            f"{_display_name(provider)} API URL not configured",
            code="ai_config_missing",
            details={"provider": provider, "missing_field": "api_url"}
        )


class AIService:
    """AI service for document translation."""

    def __init__(self, model_override: Optional[str] = None, provider_override: Optional[str] = None):
        self.config = load_config()
        self.provider = provider_override if provider_override else self.config.get('ai_provider', 'gemini')
        self.model_override = model_override
        self.translation_config = self.config.get('translation', {})
        self.lines_per_chunk = int(self.translation_config.get('lines_per_chunk', DEFAULT_LINES_PER_CHUNK))
        self.request_interval = float(self.translation_config.get('request_interval', DEFAULT_REQUEST_INTERVAL))
        logger.info(f"Initialized AI service with provider: {self.provider}, model override: {model_override}")

    def _get_model(self, provider_config: Dict[str, Any], default_model: str = "") -> str:
        """
        Get the model to use for translation.

        Priority:
        1. model_override (if set)
        2. First model from 'models' array
        3. 'model' field
        4. default_model
        """
        if self.model_override:
            return self.model_override

        models = provider_config.get('models', [])
        if models and isinstance(models, list) and models[0]:
            return models[0]

        return provider_config.get('model', default_model)

    def _get_system_message(self, default: str = DEFAULT_SYSTEM_MESSAGE) -> str:
        """Get system message from config or use default."""
        return self.translation_config.get('system_message', default)

    def translate(self, text: str, target_language: str) -> str:
        """
        Translate a whole document.

        The text is split into chunks of at most lines_per_chunk lines, every
        chunk is translated on its own and the results are concatenated.

        Args:
            text: Plain text to translate
            target_language: Language tag (e.g. 'French')

        Returns:
            Translated text

        Raises:
            TranslationError: If a chunk cannot be translated
        """
        chunks = divide_into_chunks(text, self.lines_per_chunk)
        logger.info(f"Translating {len(chunks)} chunk(s) to {target_language}")
        return "".join(
            self.translate_chunk(chunk, target_language, index + 1, len(chunks))
            for index, chunk in enumerate(chunks)
        )

    def translate_chunk(self, chunk: str, target_language: str, index: int = 1, total: int = 1) -> str:
        """Translate a single chunk. A response without an output section gives ''."""
        prompt = self._build_document_prompt(chunk, target_language)
        logger.debug(f"  Chunk {index}/{total} input to AI:\n{prompt}")

        response_text = self._call_with_retries(prompt)
        logger.debug(f"  Chunk {index}/{total} output from AI:\n{response_text}")

        translated = extract_translated_from_response(response_text)
        if not translated:
            logger.warning(f"  Chunk {index}/{total}: no <output> section in response")
        return translated

    def _build_document_prompt(self, chunk: str, target_language: str) -> str:
        """Build the prompt for one chunk using the configured template."""
        template = get_prompt('document_translation_prompt')['prompt']
        prompt = template.format(
            target_language_name=target_language,
            target_language_code=lc.get_language_code(target_language) or target_language,
        )
        return wrap_document(prompt, chunk)

    def _call_with_retries(self, prompt: str) -> str:
        max_retries = self.config.get(self.provider, {}).get('max_retries', 3)
        last_error = None

        for attempt in range(max_retries):
            try:
                if attempt > 0:
                    logger.info(f"  Retry attempt {attempt + 1}/{max_retries}")
                return self._call_ai_api_text(prompt)
            except TranslationError as e:
                last_error = e
                should_retry, wait_time = self._categorize_error(e, attempt)

                if should_retry and attempt < max_retries - 1:
                    logger.warning(f"  Attempt {attempt + 1} failed: {e}. Waiting {wait_time}s before retry...")
                    time.sleep(wait_time)
                elif not should_retry:
                    logger.error(f"  Non-recoverable error: {e}")
                    break
            finally:
                # Fixed pause after every provider call
                if self.request_interval > 0:
                    time.sleep(self.request_interval)

        raise TranslationError(
            f"Translation failed after {max_retries} attempt(s): {last_error}",
            code="translation_failed",
            details={"provider": self.provider}
        ) from last_error

    def _call_ai_api_text(self, prompt: str) -> str:
        """
        Call AI API and return raw text response.
        """
        from transtree.ai.providers import (
            call_gemini_api,
            call_openai_api_text,
            call_deepseek_api_text,
            call_custom_provider_api_text,
        )

        if self.provider == 'gemini':
            return call_gemini_api(self, prompt)
        elif self.provider == 'openai':
            return call_openai_api_text(self, prompt)
        elif self.provider == 'deepseek':
            return call_deepseek_api_text(self, prompt)
        else:
            # Custom provider - use OpenAI-compatible API format
            return call_custom_provider_api_text(self, prompt)

    def _categorize_error(self, error: Exception, attempt: int) -> Tuple[bool, float]:
        """
        Categorize an error and determine retry strategy.

        Returns:
            Tuple of (should_retry, wait_time_seconds)
        """
        error_str = str(error).lower()

        # Missing configuration never fixes itself
        if getattr(error, 'code', None) == 'ai_config_missing':
            return False, 0

        # Rate limiting (429) - long backoff
        if '429' in error_str or 'rate limit' in error_str or 'too many requests' in error_str:
            wait_time = 30 * (2 ** attempt)  # 30s, 60s, 120s
            return True, min(wait_time, 300)

        # Authentication errors (401, 403) - don't retry
        if '401' in error_str or '403' in error_str or 'unauthorized' in error_str or 'forbidden' in error_str:
            return False, 0

        # Invalid request (400) - don't retry
        if '400' in error_str:
            return False, 0

        # Server errors (5xx) - standard backoff
        if any(code in error_str for code in ['500', '502', '503', '504']):
            return True, 2 ** attempt

        # Timeout - retry with backoff
        if 'timeout' in error_str:
            return True, 5 * (2 ** attempt)  # 5s, 10s, 20s

        # Unknown errors - standard backoff
        return True, 2 ** attempt
