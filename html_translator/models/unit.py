"""
Translation Unit Model
======================
One slot of the bulk translation grid.
"""
from dataclasses import dataclass
from typing import Optional
from html_translator.config.constants import UnitStatus


@dataclass(frozen=True)
class TranslationUnit:
    """
    An independent (input, output, status) record.

    Instances are immutable; the store replaces a record on every change
    so readers never observe a half-applied update.
    """
    id: int
    input_html: str = ""
    output_html: str = ""
    is_loading: bool = False
    is_success: bool = False
    error: Optional[str] = None

    @property
    def has_input(self) -> bool:
        return bool(self.input_html.strip())

    @property
    def status(self) -> UnitStatus:
        if self.is_loading:
            return UnitStatus.TRANSLATING
        if self.is_success:
            return UnitStatus.DONE
        if self.error:
            return UnitStatus.ERROR
        return UnitStatus.READY

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'id': self.id,
            'input_html': self.input_html,
            'output_html': self.output_html,
            'is_loading': self.is_loading,
            'is_success': self.is_success,
            'error': self.error,
            'status': self.status.value,
        }
