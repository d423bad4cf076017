"""
Text Processing Utilities
=========================
Cleanup of raw model responses.
"""
import re
from typing import Optional

# Only an exact leading/trailing fence is stripped; inner fences are content.
_LEADING_FENCE = re.compile(r'\A```(?:html)?[ \t]*\r?\n', re.IGNORECASE)
_TRAILING_FENCE = re.compile(r'(?:\r?\n)?```\Z')


def sanitize_response(raw: Optional[str]) -> str:
    """
    Strip markdown code-fence wrapping the model sometimes adds despite
    being told not to.

    ``"```html\\n<p>Bonjour</p>\\n```"`` becomes ``"<p>Bonjour</p>"``.
    This is not a markdown parser: only one opening fence at the very start
    and one closing fence at the very end are removed.

    Args:
        raw: Raw text returned by the model (may be None)

    Returns:
        Cleaned HTML
    """
    if not raw:
        return ""

    text = raw.strip()
    text = _LEADING_FENCE.sub('', text, count=1)
    text = _TRAILING_FENCE.sub('', text, count=1)
    return text.strip()
