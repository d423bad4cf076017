"""
Validation Utilities
====================
Functions for validating API input.
"""
from typing import Any, Tuple, Optional
from html_translator.config import config, SUPPORTED_LANGUAGES, TargetLanguage


def validate_target_language(value: Any) -> Tuple[bool, Optional[str], Optional[TargetLanguage]]:
    """
    Validate a target language value.

    Returns:
        Tuple of (is_valid, error_message, language)
    """
    if not value or not isinstance(value, str):
        return False, "Target language is required", None

    try:
        return True, None, TargetLanguage(value)
    except ValueError:
        supported = ', '.join(SUPPORTED_LANGUAGES)
        return False, f"Unsupported language: {value}. Supported: {supported}", None


def validate_html_input(value: Any) -> Tuple[bool, Optional[str]]:
    """Validate the HTML pasted into a unit. Empty input is allowed."""
    if not isinstance(value, str):
        return False, "input_html must be a string"

    max_chars = config.workspace.max_input_chars
    if len(value) > max_chars:
        return False, f"Input too large. Maximum size: {max_chars} characters"

    return True, None
