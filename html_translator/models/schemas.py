"""
Request/Response Schemas
========================
Validation schemas for API requests and responses.
"""
from dataclasses import dataclass, field
from typing import Optional, List

from html_translator.utils.validators import validate_html_input, validate_target_language


@dataclass
class UpdateUnitRequest:
    """Request schema for editing a unit's input."""
    input_html: str

    @classmethod
    def from_json(cls, data: Optional[dict]) -> 'UpdateUnitRequest':
        data = data or {}
        return cls(input_html=data.get('input_html'))

    def validate(self) -> List[str]:
        errors = []
        if self.input_html is None:
            errors.append("input_html is required")
        else:
            is_valid, error = validate_html_input(self.input_html)
            if not is_valid:
                errors.append(error)
        return errors


@dataclass
class SetLanguageRequest:
    """Request schema for changing the global target language."""
    language: str

    @classmethod
    def from_json(cls, data: Optional[dict]) -> 'SetLanguageRequest':
        data = data or {}
        return cls(language=data.get('language'))

    def validate(self) -> List[str]:
        is_valid, error, _ = validate_target_language(self.language)
        return [] if is_valid else [error]


@dataclass
class TranslateResponse:
    """Response schema for a single-unit translate request."""
    unit_id: int
    started: bool
    message: Optional[str] = None

    def to_dict(self) -> dict:
        result = {'unit_id': self.unit_id, 'started': self.started}
        if self.message:
            result['message'] = self.message
        return result


@dataclass
class TranslateAllResponse:
    """Response schema for a translate-all request."""
    started: List[int] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            'started': self.started,
            'count': len(self.started),
        }


@dataclass
class HealthStatus:
    """Health check response."""
    status: str
    api_key_configured: bool
    model_reachable: bool
    model: str
    version: str

    def to_dict(self) -> dict:
        return {
            'status': self.status,
            'api_key_configured': self.api_key_configured,
            'model_reachable': self.model_reachable,
            'model': self.model,
            'version': self.version,
        }
