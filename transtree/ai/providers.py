"""
AI Provider API Implementations

This module contains the API call implementations for each AI provider:
- Gemini (generateContent API)
- OpenAI, DeepSeek and custom providers (OpenAI-compatible chat completions)

Each function takes an AIService instance and a prompt, returns the text response.
"""

from typing import Any
import httpx

from transtree.logger import get_logger
from transtree.ai.exceptions import TranslationError

logger = get_logger(__name__)

GEMINI_API_URL = "https://generativelanguage.googleapis.com/v1beta/models"


def get_httpx_timeout(timeout_config: Any) -> httpx.Timeout:
    """
    Convert timeout configuration to httpx.Timeout object.

    Args:
        timeout_config: Either a number (read timeout) or a dict with
            connect, write, read, pool keys
    """
    if isinstance(timeout_config, dict):
        return httpx.Timeout(
            connect=timeout_config.get('connect', 10.0),
            write=timeout_config.get('write', 60.0),
            read=timeout_config.get('read', 120.0),
            pool=timeout_config.get('pool', 10.0),
        )
    timeout_value = float(timeout_config) if timeout_config else 120.0
    return httpx.Timeout(connect=10.0, write=60.0, read=timeout_value, pool=10.0)


def handle_http_error(e: httpx.HTTPStatusError, provider: str):
    """Raise a TranslationError carrying the provider's error message."""
    status_code = e.response.status_code
    try:
        error_json = e.response.json()
        error_detail = error_json.get("error", error_json) if isinstance(error_json, dict) else error_json
        if isinstance(error_detail, dict):
            error_text = error_detail.get("message", str(error_detail))
        else:
            error_text = str(error_detail)
    except ValueError:
        error_text = e.response.text[:500]

    raise TranslationError(
        f"{provider} API error ({status_code}): {error_text}",
        code="provider_http_error",
        details={"provider": provider, "status_code": status_code}
    ) from e


def _require_api_key(provider: str, provider_config: dict, label: str) -> str:
    from transtree.ai.service import resolve_api_key

    api_key = resolve_api_key(provider, provider_config)
    if not api_key:
        raise TranslationError(f"{label} API key not configured", code="ai_config_missing",
                               details={"provider": provider, "missing_field": "api_key"})
    return api_key


def call_gemini_api(service, prompt: str) -> str:
    """Call Gemini API."""
    provider_config = service.config.get('gemini', {})
    api_key = _require_api_key('gemini', provider_config, "Gemini")
    model = service._get_model(provider_config, 'gemini-2.0-flash')
    timeout = provider_config.get('timeout', 120)
    base_url = provider_config.get('api_url', GEMINI_API_URL).rstrip('/')

    url = f"{base_url}/{model}:generateContent"
    body = {
        "systemInstruction": {"parts": [{"text": service._get_system_message()}]},
        "contents": [{
            "role": "user",
            "parts": [{"text": prompt}]
        }],
    }

    logger.debug(f"  Calling Gemini API (model: {model})...")

    try:
        with httpx.Client(timeout=get_httpx_timeout(timeout)) as client:
            response = client.post(url, params={"key": api_key}, json=body)
            response.raise_for_status()
            result = response.json()
    except httpx.HTTPStatusError as e:
        handle_http_error(e, "Gemini")
    except httpx.TimeoutException as e:
        raise TranslationError("Gemini API request timeout") from e
    except (httpx.HTTPError, ValueError) as e:
        raise TranslationError(f"Gemini API call failed: {e}") from e

    candidates = result.get('candidates') or []
    if candidates:
        parts = (candidates[0].get('content') or {}).get('parts') or []
        if parts:
            text = parts[0].get('text', '')
            logger.debug(f"  Received {len(text)} chars from Gemini")
            return text

    raise TranslationError(f"Unexpected Gemini API response format: {list(result.keys())}")


def _call_chat_completions(service, prompt: str, provider: str, label: str,
                           default_url: str, default_model: str) -> str:
    """Call an OpenAI-compatible chat completions endpoint."""
    provider_config = service.config.get(provider, {})
    api_key = _require_api_key(provider, provider_config, label)
    model = service._get_model(provider_config, default_model)
    timeout = provider_config.get('timeout', 120)
    api_url = provider_config.get('api_url', default_url)

    if not api_url:
        raise TranslationError(f"{label} API URL not configured", code="ai_config_missing",
                               details={"provider": provider, "missing_field": "api_url"})
    if not model:
        raise TranslationError(f"{label} model not configured", code="ai_config_missing",
                               details={"provider": provider, "missing_field": "models"})

    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json"
    }

    body = {
        "model": model,
        "messages": [
            {"role": "system", "content": service._get_system_message()},
            {"role": "user", "content": prompt},
        ],
    }

    logger.debug(f"  Calling {label} API (model: {model}, url: {api_url})...")

    try:
        with httpx.Client(timeout=get_httpx_timeout(timeout)) as client:
            response = client.post(api_url, headers=headers, json=body)
            response.raise_for_status()
            result = response.json()
    except httpx.HTTPStatusError as e:
        handle_http_error(e, label)
    except httpx.TimeoutException as e:
        raise TranslationError(f"{label} API request timeout") from e
    except (httpx.HTTPError, ValueError) as e:
        raise TranslationError(f"{label} API call failed: {e}") from e

    choices = result.get('choices') or []
    if choices:
        content = choices[0].get('message', {}).get('content') or ''
        logger.debug(f"  Received {len(content)} chars from {label}")
        return content

    raise TranslationError(f"No content in {label} response")


def call_openai_api_text(service, prompt: str) -> str:
    """Call OpenAI API and return text response."""
    return _call_chat_completions(
        service, prompt, 'openai', "OpenAI",
        'https://api.openai.com/v1/chat/completions', 'gpt-4o-mini'
    )


def call_deepseek_api_text(service, prompt: str) -> str:
    """Call DeepSeek API and return text response."""
    return _call_chat_completions(
        service, prompt, 'deepseek', "DeepSeek",
        'https://api.deepseek.com/chat/completions', 'deepseek-chat'
    )


def call_custom_provider_api_text(service, prompt: str) -> str:
    """Call custom provider API using OpenAI-compatible format."""
    provider = service.provider
    return _call_chat_completions(service, prompt, provider, f"Custom provider '{provider}'", '', '')
