"""Test module for application config and language naming."""

from __future__ import annotations

import json
from pathlib import Path

import transtree.language_codes as lc
from transtree.config import DEFAULT_CONFIG, get_prompt, initialize_app, load_config, save_config


def test_load_config_defaults_without_file(isolated_config: Path) -> None:
    """Verify the defaults are returned when no config file exists."""
    assert not isolated_config.exists()
    assert load_config() == DEFAULT_CONFIG


def test_initialize_app_writes_default_file(isolated_config: Path) -> None:
    """Verify first run creates the config file."""
    initialize_app()

    assert json.loads(isolated_config.read_text(encoding="utf-8")) == DEFAULT_CONFIG


def test_stored_values_overlay_defaults(isolated_config: Path) -> None:
    """Verify partial sections are merged over the defaults."""
    isolated_config.write_text(json.dumps({"translation": {"lines_per_chunk": 20}, "log_mode": "info"}),
                               encoding="utf-8")

    config = load_config()

    assert config["translation"]["lines_per_chunk"] == 20
    assert config["translation"]["request_interval"] == DEFAULT_CONFIG["translation"]["request_interval"]
    assert config["log_mode"] == "info"
    assert config["gemini"] == DEFAULT_CONFIG["gemini"]


def test_corrupt_config_falls_back_to_defaults(isolated_config: Path) -> None:
    """Verify an unparsable file does not break loading."""
    isolated_config.write_text("{oops", encoding="utf-8")

    assert load_config() == DEFAULT_CONFIG


def test_save_config_roundtrip(isolated_config: Path) -> None:
    """Verify saved settings are loaded back."""
    config = load_config()
    config["ai_provider"] = "openai"

    save_config(config)

    assert load_config()["ai_provider"] == "openai"


def test_document_prompt_has_language_placeholders() -> None:
    """Verify the built-in prompt formats with the language fields."""
    prompt = get_prompt("document_translation_prompt")["prompt"]

    assert "<output>" in prompt.format(target_language_name="French", target_language_code="fr")


def test_language_naming() -> None:
    """Verify tags, codes and directory suffixes."""
    assert lc.normalize_language("french") == "French"
    assert lc.normalize_language("ES") == "Spanish"
    assert lc.normalize_language("") is None
    assert lc.normalize_language("xx") is None
    assert lc.get_language_dir_name("demo", "English") == "demo_en"
    assert lc.get_language_dir_name("demo", "Spanish") == "demo_sp"
    assert lc.get_language_dir_name("demo", "Ukrainian") == "demo_ua"
    assert lc.get_language_code("German") == "de"
