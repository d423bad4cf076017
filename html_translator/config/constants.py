"""
Constants and Enums for HTML Translator
"""
from enum import Enum

# Number of translation units in the grid
UNIT_COUNT = 20

# Language the pasted HTML is written in
SOURCE_LANGUAGE = 'English'

# User-facing message stored on a unit when the remote call fails
TRANSLATION_FAILED_MESSAGE = 'Failed to translate HTML. Please check your input or try again later.'


class TargetLanguage(str, Enum):
    """Languages a unit can be translated into."""
    RUSSIAN = "Russian"
    ITALIAN = "Italian"
    FRENCH = "French"
    SPANISH = "Spanish"
    GERMAN = "German"


class UnitStatus(str, Enum):
    """Display status of a translation unit."""
    READY = "ready"
    TRANSLATING = "translating"
    DONE = "done"
    ERROR = "error"


SUPPORTED_LANGUAGES = [language.value for language in TargetLanguage]
