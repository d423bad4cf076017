"""
HTML Translator - Services
"""
from html_translator.services.gemini_client import GeminiClient, GeminiResponse
from html_translator.services.translator import TranslationError, build_prompt, translate_html
from html_translator.services.workspace import BulkTranslator, UnitNotFoundError, UnitStore

__all__ = [
    "GeminiClient",
    "GeminiResponse",
    "TranslationError",
    "build_prompt",
    "translate_html",
    "BulkTranslator",
    "UnitNotFoundError",
    "UnitStore"
]
