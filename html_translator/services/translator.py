"""
HTML Translator Service
=======================
Builds the translation prompt, calls the model and cleans up the reply.
"""
from typing import Union

from html_translator.config import config
from html_translator.config.constants import (
    TargetLanguage,
    SOURCE_LANGUAGE,
    TRANSLATION_FAILED_MESSAGE
)
from html_translator.services.gemini_client import GeminiClient, get_gemini_client
from html_translator.utils.logging import get_logger, debug_print
from html_translator.utils.text_processing import sanitize_response


class TranslationError(Exception):
    """Raised when the remote model could not produce a translation."""

    def __init__(self, message: str = TRANSLATION_FAILED_MESSAGE, detail: str = None):
        super().__init__(message)
        self.detail = detail


def _language_name(language: Union[TargetLanguage, str]) -> str:
    return language.value if isinstance(language, TargetLanguage) else str(language)


def build_prompt(html: str, target_language: Union[TargetLanguage, str]) -> str:
    """Build the instruction text sent to the model for one HTML fragment."""
    language = _language_name(target_language)
    return f"""Translate the following HTML from {SOURCE_LANGUAGE} to {language}.

REQUIREMENTS:
- Translate ONLY the human-readable text nodes
- Keep every tag, attribute, class name and id exactly as it is
- Keep all whitespace, line breaks and indentation exactly as they are
- Do not add, remove or reorder any elements

Return ONLY the translated HTML. No explanations, no notes and no markdown
code fences (```html ... ```).

HTML TO TRANSLATE:
{html}"""


def translate_html(
    html: str,
    target_language: Union[TargetLanguage, str],
    client: GeminiClient = None
) -> str:
    """
    Translate the text content of an HTML fragment.

    Args:
        html: HTML to translate
        target_language: Language to translate into
        client: Gemini client (defaults to the shared instance)

    Returns:
        Translated HTML with any code-fence wrapping removed. An empty
        model reply gives an empty string.

    Raises:
        TranslationError: The remote call failed
    """
    client = client or get_gemini_client()
    logger = get_logger().translation_logger
    language = _language_name(target_language)

    logger.info(f"Translating {len(html)} chars to {language} with {client.model}")
    response = client.generate(build_prompt(html, language), temperature=config.gemini.temperature)

    if not response.success:
        logger.error(f"Translation error: {response.error}")
        debug_print(f"Translation to {language} failed: {response.error}", 'ERROR', 'TRANS')
        raise TranslationError(detail=response.error)

    if response.finish_reason and response.finish_reason != 'STOP':
        logger.warning(f"Model stopped early: {response.finish_reason}")

    return sanitize_response(response.text)
