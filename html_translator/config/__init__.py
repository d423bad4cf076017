"""
HTML Translator - Configuration Module
"""
from html_translator.config.settings import Config, config
from html_translator.config.constants import (
    SUPPORTED_LANGUAGES,
    TargetLanguage,
    UnitStatus
)

__all__ = [
    "Config",
    "config",
    "SUPPORTED_LANGUAGES",
    "TargetLanguage",
    "UnitStatus"
]
