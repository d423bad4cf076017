"""
Gemini API Client
=================
Client for the Gemini ``generateContent`` REST endpoint.
"""
import json
import requests
from typing import Optional, Dict, Any
from dataclasses import dataclass
from html_translator.config import config
from html_translator.utils.logging import get_logger


@dataclass
class GeminiResponse:
    """Response from the Gemini API."""
    success: bool
    text: Optional[str] = None
    error: Optional[str] = None
    model: Optional[str] = None
    finish_reason: Optional[str] = None


def _first_candidate(payload: Any) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        return {}
    candidates = payload.get('candidates')
    if not isinstance(candidates, list) or not candidates:
        return {}
    candidate = candidates[0]
    return candidate if isinstance(candidate, dict) else {}


def extract_text(payload: Dict[str, Any]) -> str:
    """
    Pull the generated text out of a ``generateContent`` reply.

    Missing or malformed candidates, content or parts yield an empty string
    rather than an error.
    """
    content = _first_candidate(payload).get('content')
    if not isinstance(content, dict):
        return ''
    parts = content.get('parts')
    if not isinstance(parts, list):
        return ''
    return ''.join(
        part['text'] for part in parts
        if isinstance(part, dict) and isinstance(part.get('text'), str)
    )


class GeminiClient:
    """Client for Gemini API interactions."""

    def __init__(self, api_key: str = None, model: str = None, base_url: str = None):
        self.api_key = api_key if api_key is not None else config.gemini.api_key
        self.model = model or config.gemini.model
        self.base_url = (base_url or config.gemini.base_url).rstrip('/')
        self.logger = get_logger().app_logger

        # Pool sized for a full translate-all fan-out
        self.session = requests.Session()
        adapter = requests.adapters.HTTPAdapter(
            pool_connections=config.workspace.worker_count,
            pool_maxsize=config.workspace.worker_count
        )
        self.session.mount('https://', adapter)
        self.session.mount('http://', adapter)

    def _headers(self) -> Dict[str, str]:
        # Header rather than query string so the key never shows up in error URLs
        return {'x-goog-api-key': self.api_key}

    def _model_url(self, model: str) -> str:
        return f"{self.base_url}/models/{model}"

    def generate_url(self, model: str = None) -> str:
        return f"{self._model_url(model or self.model)}:generateContent"

    def is_healthy(self) -> bool:
        """Check that the key is set and the configured model is reachable."""
        if not self.api_key:
            return False
        try:
            response = self.session.get(
                self._model_url(self.model),
                headers=self._headers(),
                timeout=config.gemini.health_check_timeout
            )
            return response.status_code == 200
        except requests.RequestException as e:
            self.logger.warning(f"Gemini health check failed: {e}")
            return False

    def generate(
        self,
        prompt: str,
        model: str = None,
        temperature: float = None
    ) -> GeminiResponse:
        """
        Generate text using Gemini.

        Args:
            prompt: The prompt to send
            model: Model to use (defaults to configured model)
            temperature: Sampling temperature (defaults to configured value)

        Returns:
            GeminiResponse with the result
        """
        model = model or self.model
        temperature = temperature if temperature is not None else config.gemini.temperature

        if not self.api_key:
            return GeminiResponse(success=False, error="GEMINI_API_KEY is not configured", model=model)

        payload = {
            'contents': [{'parts': [{'text': prompt}]}],
            'generationConfig': {'temperature': temperature}
        }

        try:
            response = self.session.post(
                self.generate_url(model),
                headers=self._headers(),
                json=payload,
                timeout=(config.gemini.connect_timeout, config.gemini.read_timeout)
            )
            response.raise_for_status()
            result = response.json()
        except json.JSONDecodeError as e:
            return GeminiResponse(success=False, error=f"Invalid JSON response: {e}", model=model)
        except requests.Timeout:
            return GeminiResponse(success=False, error="Request timed out", model=model)
        except requests.RequestException as e:
            return GeminiResponse(success=False, error=str(e), model=model)

        return GeminiResponse(
            success=True,
            text=extract_text(result),
            model=model,
            finish_reason=_first_candidate(result).get('finishReason')
        )

    def close(self):
        self.session.close()


_client_instance: Optional[GeminiClient] = None


def get_gemini_client() -> GeminiClient:
    """Get or create the global Gemini client instance."""
    global _client_instance
    if _client_instance is None:
        _client_instance = GeminiClient()
    return _client_instance
