"""
API Middleware
==============
Rate limiting and access-key checks for the HTTP API.
"""
import time
import hashlib
import threading
from functools import wraps
from typing import Callable, Dict, List, Optional, Tuple
from flask import request, jsonify, g

from html_translator.config import config
from html_translator.utils.logging import get_logger


class RateLimiter:
    """
    In-memory sliding-window rate limiter keyed by client.

    Applied to the endpoints that spend remote-model quota.
    """

    WINDOW_SECONDS = 60

    def __init__(self, requests_per_minute: int = 60):
        self.requests_per_minute = requests_per_minute
        self.requests: Dict[str, List[float]] = {}
        self.lock = threading.Lock()
        self.logger = get_logger().api_logger

    def _get_client_id(self) -> str:
        forwarded = request.headers.get('X-Forwarded-For')
        if forwarded:
            ip = forwarded.split(',')[0].strip()
        else:
            ip = request.remote_addr or 'unknown'
        access_key = request.headers.get('X-API-Key', '')
        return hashlib.sha256(f"{ip}:{access_key}".encode()).hexdigest()[:16]

    def is_allowed(self) -> Tuple[bool, dict]:
        """
        Record a request for the current client if it fits in the window.

        Returns:
            Tuple of (allowed, info_dict)
        """
        client_id = self._get_client_id()
        now = time.time()
        window_start = now - self.WINDOW_SECONDS

        with self.lock:
            # Drop clients whose whole history has aged out of the window
            stale = [
                cid for cid, stamps in self.requests.items()
                if not stamps or stamps[-1] <= window_start
            ]
            for stale_id in stale:
                del self.requests[stale_id]

            recent = [ts for ts in self.requests.get(client_id, []) if ts > window_start]

            if len(recent) >= self.requests_per_minute:
                self.requests[client_id] = recent
                self.logger.warning(f"Rate limit hit for client {client_id}")
                return False, {
                    'limit': self.requests_per_minute,
                    'remaining': 0,
                    'reset': int(recent[0] - window_start + 1)
                }

            recent.append(now)
            self.requests[client_id] = recent
            return True, {
                'limit': self.requests_per_minute,
                'remaining': self.requests_per_minute - len(recent),
                'reset': self.WINDOW_SECONDS
            }


class AccessKeyAuth:
    """Checks the ``X-API-Key`` header against the configured access key."""

    def __init__(self, access_key: str = None, enabled: bool = None):
        access_key = access_key if access_key is not None else config.security.access_key
        self.valid_keys = {access_key} if access_key else set()
        if enabled is None:
            enabled = config.security.enable_auth or bool(access_key)
        self.enabled = enabled

    def validate(self, key: Optional[str]) -> bool:
        if not self.enabled:
            return True
        return key in self.valid_keys


_rate_limiter: Optional[RateLimiter] = None
_access_key_auth: Optional[AccessKeyAuth] = None


def get_rate_limiter() -> RateLimiter:
    global _rate_limiter
    if _rate_limiter is None:
        _rate_limiter = RateLimiter(config.security.rate_limit_per_minute)
    return _rate_limiter


def get_access_key_auth() -> AccessKeyAuth:
    global _access_key_auth
    if _access_key_auth is None:
        _access_key_auth = AccessKeyAuth()
    return _access_key_auth


def rate_limit(f: Callable) -> Callable:
    """Rate limiting decorator."""
    @wraps(f)
    def decorated(*args, **kwargs):
        allowed, info = get_rate_limiter().is_allowed()
        g.rate_limit_info = info

        if not allowed:
            return jsonify({
                'error': 'Rate limit exceeded',
                'retry_after': info['reset']
            }), 429

        return f(*args, **kwargs)

    return decorated


def require_access_key(f: Callable) -> Callable:
    """Access-key authentication decorator."""
    @wraps(f)
    def decorated(*args, **kwargs):
        auth = get_access_key_auth()

        if not auth.enabled:
            return f(*args, **kwargs)

        key = request.headers.get('X-API-Key')
        if not key:
            return jsonify({'error': 'API key required'}), 401
        if not auth.validate(key):
            return jsonify({'error': 'Invalid API key'}), 403

        return f(*args, **kwargs)

    return decorated


def add_rate_limit_headers(response):
    """Add rate limit headers to response."""
    info = g.get('rate_limit_info')
    if info:
        response.headers['X-RateLimit-Limit'] = str(info['limit'])
        response.headers['X-RateLimit-Remaining'] = str(info['remaining'])
        response.headers['X-RateLimit-Reset'] = str(info['reset'])
    return response
