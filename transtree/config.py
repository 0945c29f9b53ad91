import copy
import json
import os
from pathlib import Path
from typing import Dict, Any

from transtree.logger import get_logger

logger = get_logger(__name__)

# Translation configuration constants
DEFAULT_LINES_PER_CHUNK = 100  # Maximum lines per request to the AI provider
DEFAULT_REQUEST_INTERVAL = 4.0  # Seconds to wait after every provider call
DEFAULT_SYSTEM_MESSAGE = "You are a professional translator of technical documents."

# Provider configuration constants
BUILTIN_PROVIDERS = ["openai", "deepseek", "gemini"]

PROVIDER_DEFAULTS = {
    "max_retries": 3,
    "timeout": 120
}

# Get base directory (project root)
BASE_DIR = Path(__file__).parent.parent
CONFIG_DIR = BASE_DIR / "config"
CONFIG_FILE = Path(os.environ.get("TRANSTREE_CONFIG", CONFIG_DIR / "config.json"))

# Default prompts
DEFAULT_PROMPTS = {
    "document_translation_prompt": {
        "version": "1.0",
        "description": "Whole-document translation prompt used for every chunk of a file",
        "prompt": """You are a professional translator. Translate the document below into {target_language_name} ({target_language_code}).

CRITICAL REQUIREMENTS:
- Keep the document structure exactly: line breaks, indentation, markup, code blocks and links
- Do not translate code, identifiers, file paths or URLs
- Do not add explanations or comments of your own
- Put the translated document between <output> and </output> tags and nothing else inside them

The document to translate is between <document> and </document> tags.
"""
    }
}

# Default configuration templates
DEFAULT_CONFIG = {
    "ai_provider": "gemini",
    "gemini": {
        "api_key": "YOUR_API_KEY_HERE",
        "models": ["gemini-2.0-flash"],  # Up to 5 models, first is default
        "max_retries": 3,
        "timeout": 120,
        "api_url": "https://generativelanguage.googleapis.com/v1beta/models"
    },
    "openai": {
        "api_key": "YOUR_API_KEY_HERE",
        "models": ["gpt-4o-mini", "gpt-4o"],
        "max_retries": 3,
        "timeout": 120,
        "api_url": "https://api.openai.com/v1/chat/completions"
    },
    "deepseek": {
        "api_key": "YOUR_API_KEY_HERE",
        "models": ["deepseek-chat"],
        "max_retries": 3,
        "timeout": 120,
        "api_url": "https://api.deepseek.com/chat/completions"
    },
    "translation": {
        "lines_per_chunk": DEFAULT_LINES_PER_CHUNK,
        "request_interval": DEFAULT_REQUEST_INTERVAL,
        "system_message": DEFAULT_SYSTEM_MESSAGE
    },
    "log_mode": "off"
}


def ensure_config_directory():
    """Ensure the config directory exists."""
    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    logger.debug(f"Config directory ensured: {CONFIG_FILE.parent}")


def create_default_config():
    """Create the default config.json file."""
    ensure_config_directory()
    with open(CONFIG_FILE, 'w', encoding='utf-8') as f:
        json.dump(DEFAULT_CONFIG, f, indent=4, ensure_ascii=False)
    logger.info(f"Created default config file: {CONFIG_FILE}")


def initialize_app():
    """
    Initialize the application.
    Called on first run; writes the default configuration if none exists yet.
    """
    logger.info("Initializing application...")

    if not CONFIG_FILE.exists():
        try:
            create_default_config()
        except OSError as e:
            logger.error(f"Failed to create default config: {e}")
            logger.warning("Application will use in-memory default configuration")
    else:
        logger.debug("Config file already exists")

    logger.info("Application initialization complete")


def _merge_with_defaults(stored: Dict[str, Any]) -> Dict[str, Any]:
    """Overlay a stored config on the defaults, one section deep."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    for key, value in stored.items():
        if isinstance(value, dict) and isinstance(config.get(key), dict):
            config[key].update(value)
        else:
            config[key] = value
    return config


def load_config() -> Dict[str, Any]:
    """Load the configuration from the config file."""
    if not CONFIG_FILE.exists():
        return copy.deepcopy(DEFAULT_CONFIG)

    try:
        with open(CONFIG_FILE, 'r', encoding='utf-8') as f:
            stored = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse config file {CONFIG_FILE}: {e}")
        logger.warning("Using default configuration")
        return copy.deepcopy(DEFAULT_CONFIG)
    except OSError as e:
        logger.error(f"Failed to read config file {CONFIG_FILE}: {e}")
        logger.warning("Using default configuration")
        return copy.deepcopy(DEFAULT_CONFIG)

    if not isinstance(stored, dict):
        logger.warning(f"Config file {CONFIG_FILE} does not hold an object, using defaults")
        return copy.deepcopy(DEFAULT_CONFIG)

    logger.debug("Configuration loaded from file")
    return _merge_with_defaults(stored)


def save_config(config: Dict[str, Any]):
    """Save the configuration to the config file."""
    from transtree.logger import _clear_log_mode_cache

    try:
        ensure_config_directory()
        with open(CONFIG_FILE, 'w', encoding='utf-8') as f:
            json.dump(config, f, indent=4, ensure_ascii=False)
        logger.info("Configuration saved")
    except OSError as e:
        logger.error(f"Failed to save config: {e}")
        raise
    _clear_log_mode_cache()


def load_prompts() -> Dict[str, Any]:
    """Load the prompts from default configuration.

    Note: Prompts are hardcoded in the codebase and are never written to the config file.
    """
    return copy.deepcopy(DEFAULT_PROMPTS)


def get_prompt(prompt_name: str = "document_translation_prompt") -> Dict[str, Any]:
    """Get a specific prompt by name."""
    prompts = load_prompts()
    return prompts.get(prompt_name, prompts["document_translation_prompt"])
