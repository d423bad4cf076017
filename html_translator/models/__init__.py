"""
HTML Translator - Data Models
"""
from html_translator.models.unit import TranslationUnit
from html_translator.models.schemas import (
    UpdateUnitRequest,
    SetLanguageRequest,
    TranslateResponse,
    TranslateAllResponse,
    HealthStatus
)

__all__ = [
    "TranslationUnit",
    "UpdateUnitRequest",
    "SetLanguageRequest",
    "TranslateResponse",
    "TranslateAllResponse",
    "HealthStatus"
]
