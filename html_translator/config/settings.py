"""
Centralized Configuration for HTML Translator
==============================================
All configuration values in one place, configurable via environment variables.
"""
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple

from html_translator.config.constants import TargetLanguage, UNIT_COUNT


def _get_bool_env(key: str, default: bool) -> bool:
    """Get boolean from environment variable."""
    val = os.environ.get(key, "").lower()
    if val in ("true", "1", "yes", "on"):
        return True
    elif val in ("false", "0", "no", "off"):
        return False
    return default


def _get_int_env(key: str, default: int) -> int:
    """Get integer from environment variable."""
    try:
        return int(os.environ.get(key, default))
    except (ValueError, TypeError):
        return default


def _get_float_env(key: str, default: float) -> float:
    """Get float from environment variable."""
    try:
        return float(os.environ.get(key, default))
    except (ValueError, TypeError):
        return default


def _get_language_env(key: str, default: TargetLanguage) -> TargetLanguage:
    """Get a target language from environment variable, by value or by name."""
    raw = os.environ.get(key, "").strip()
    if not raw:
        return default
    for language in TargetLanguage:
        if raw.lower() in (language.value.lower(), language.name.lower()):
            return language
    return default


def get_app_paths() -> Tuple[str, str]:
    """Get the correct paths based on execution environment."""
    if getattr(sys, 'frozen', False):
        # PyInstaller bundle
        app_dir = os.environ.get('HTML_TRANSLATOR_APP_DIR', os.path.dirname(sys.executable))
        bundle_dir = os.environ.get('HTML_TRANSLATOR_BUNDLE_DIR', getattr(sys, '_MEIPASS', app_dir))
    else:
        app_dir = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
        bundle_dir = app_dir
    return app_dir, bundle_dir


APP_DIR, BUNDLE_DIR = get_app_paths()


@dataclass
class ServerConfig:
    """Flask server configuration."""
    host: str = field(default_factory=lambda: os.environ.get("HTML_TRANSLATOR_HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: _get_int_env("HTML_TRANSLATOR_PORT", 5002))
    debug: bool = field(default_factory=lambda: _get_bool_env("HTML_TRANSLATOR_DEBUG", False))
    secret_key: str = field(default_factory=lambda: os.environ.get("SECRET_KEY", "dev-key-change-in-production"))

    cors_origins: List[str] = field(default_factory=lambda: [
        "http://localhost:5002",
        "http://127.0.0.1:5002"
    ])


@dataclass
class GeminiConfig:
    """Gemini generative-language API configuration."""
    api_key: str = field(default_factory=lambda: os.environ.get("GEMINI_API_KEY") or os.environ.get("API_KEY", ""))
    base_url: str = field(default_factory=lambda: os.environ.get(
        "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
    ).rstrip('/'))
    model: str = field(default_factory=lambda: os.environ.get("GEMINI_MODEL", "gemini-3-flash-preview"))

    # Timeouts
    connect_timeout: int = field(default_factory=lambda: _get_int_env("GEMINI_CONNECT_TIMEOUT", 10))
    read_timeout: int = field(default_factory=lambda: _get_int_env("GEMINI_READ_TIMEOUT", 120))
    health_check_timeout: int = field(default_factory=lambda: _get_int_env("GEMINI_HEALTH_TIMEOUT", 5))

    # Kept low so the model copies markup literally
    temperature: float = field(default_factory=lambda: _get_float_env("GEMINI_TEMPERATURE", 0.1))

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)


@dataclass
class WorkspaceConfig:
    """Translation unit grid configuration."""
    unit_count: int = field(default_factory=lambda: _get_int_env("UNIT_COUNT", UNIT_COUNT))
    default_language: TargetLanguage = field(
        default_factory=lambda: _get_language_env("DEFAULT_TARGET_LANGUAGE", TargetLanguage.RUSSIAN)
    )
    max_input_chars: int = field(default_factory=lambda: _get_int_env("MAX_INPUT_CHARS", 100_000))

    # 0 means one worker per unit
    max_concurrent_translations: int = field(
        default_factory=lambda: _get_int_env("MAX_CONCURRENT_TRANSLATIONS", 0)
    )

    @property
    def worker_count(self) -> int:
        return self.max_concurrent_translations or self.unit_count


@dataclass
class LoggingConfig:
    """Logging configuration."""
    verbose_debug: bool = field(default_factory=lambda: _get_bool_env("VERBOSE_DEBUG", True))
    log_buffer_size: int = field(default_factory=lambda: _get_int_env("LOG_BUFFER_SIZE", 500))
    log_file_max_bytes: int = field(default_factory=lambda: _get_int_env("LOG_FILE_MAX_BYTES", 10 * 1024 * 1024))
    log_file_backup_count: int = field(default_factory=lambda: _get_int_env("LOG_FILE_BACKUP_COUNT", 5))


@dataclass
class SecurityConfig:
    """Security configuration for the HTTP API."""
    enable_auth: bool = field(default_factory=lambda: _get_bool_env("ENABLE_AUTH", False))
    access_key: str = field(default_factory=lambda: os.environ.get("HTML_TRANSLATOR_ACCESS_KEY", ""))
    rate_limit_per_minute: int = field(default_factory=lambda: _get_int_env("RATE_LIMIT_PER_MINUTE", 120))


@dataclass
class PathConfig:
    """Path configuration."""
    app_dir: str = field(default_factory=lambda: APP_DIR)
    bundle_dir: str = field(default_factory=lambda: BUNDLE_DIR)

    @property
    def static_folder(self) -> str:
        return os.path.join(self.bundle_dir, 'static')

    @property
    def log_folder(self) -> Path:
        return Path(self.app_dir) / 'logs'


@dataclass
class Config:
    """Main application configuration container."""
    server: ServerConfig = field(default_factory=ServerConfig)
    gemini: GeminiConfig = field(default_factory=GeminiConfig)
    workspace: WorkspaceConfig = field(default_factory=WorkspaceConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    security: SecurityConfig = field(default_factory=SecurityConfig)
    paths: PathConfig = field(default_factory=PathConfig)

    def __post_init__(self):
        """Create necessary directories after initialization."""
        self._create_directories()
        self._validate()

    def _create_directories(self):
        os.makedirs(self.paths.log_folder, exist_ok=True)

    def _validate(self):
        """Validate configuration values."""
        if self.workspace.unit_count < 1:
            raise ValueError("unit_count must be at least 1")
        if self.workspace.max_input_chars < 1:
            raise ValueError("max_input_chars must be at least 1")
        if self.workspace.max_concurrent_translations < 0:
            raise ValueError("max_concurrent_translations must not be negative")
        if self.gemini.temperature < 0 or self.gemini.temperature > 2:
            raise ValueError("temperature must be between 0 and 2")


# Global configuration instance
config = Config()
