"""
HTML Translator - Utility Functions
"""
from html_translator.utils.text_processing import sanitize_response
from html_translator.utils.validators import (
    validate_target_language,
    validate_html_input
)
from html_translator.utils.logging import (
    LogBuffer,
    AppLogger,
    get_logger,
    debug_print
)

__all__ = [
    "sanitize_response",
    "validate_target_language",
    "validate_html_input",
    "LogBuffer",
    "AppLogger",
    "get_logger",
    "debug_print"
]
