"""
Logging Utilities
=================
Named loggers for the app, unit translations and the API, plus the
in-memory activity feed behind the page's console panel.

Records about a single unit carry its ``unit_id``. The file logs show it
as ``[#n]`` and the feed can be filtered to one unit's history.
"""
import os
import logging
import threading
from collections import deque
from datetime import datetime
from logging.handlers import RotatingFileHandler
from typing import List, Dict, Optional
from html_translator.config import config

# logger attribute -> log file
LOGGER_FILES = {
    'app': 'app.log',
    'translation': 'translations.log',
    'api': 'api.log',
}

FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(unit)s] %(message)s'
CONSOLE_FORMAT = '%(asctime)s - %(levelname)s - [%(unit)s] %(message)s'


class LogBuffer:
    """Bounded, thread-safe feed of recent activity for the console panel."""

    def __init__(self, max_size: int = None):
        self.buffer = deque(maxlen=max_size or config.logging.log_buffer_size)
        self.lock = threading.Lock()
        self.last_id = 0

    def add(self, level: str, source: str, message: str, unit_id: Optional[int] = None) -> Dict:
        with self.lock:
            self.last_id += 1
            entry = {
                'id': self.last_id,
                'timestamp': datetime.now().strftime('%H:%M:%S.%f')[:-3],
                'level': level,
                'source': source,
                'unit_id': unit_id,
                'message': message
            }
            self.buffer.append(entry)
            return entry

    def entries(self, since_id: int = 0, unit_id: Optional[int] = None) -> List[Dict]:
        """
        Entries newer than ``since_id``, optionally only those about one unit.
        """
        with self.lock:
            return [
                e for e in self.buffer
                if e['id'] > since_id and (unit_id is None or e['unit_id'] == unit_id)
            ]

    def clear(self):
        with self.lock:
            self.buffer.clear()
            self.last_id = 0


log_buffer = LogBuffer()


class UnitContextFilter(logging.Filter):
    """Fills ``record.unit`` so the formats can always reference it."""

    def filter(self, record):
        unit_id = getattr(record, 'unit_id', None)
        record.unit = f"#{unit_id + 1}" if unit_id is not None else '-'
        return True


class FeedHandler(logging.Handler):
    """Mirrors unit-level log records into the console panel feed."""

    def __init__(self, feed: LogBuffer, level=logging.INFO):
        super().__init__(level)
        self.feed = feed

    def emit(self, record):
        unit_id = getattr(record, 'unit_id', None)
        if unit_id is None:
            return
        self.feed.add(record.levelname, 'UNIT', record.getMessage(), unit_id=unit_id)


class AppLogger:
    """One named logger per concern, each with its own rotating file."""

    def __init__(self, log_dir: str = None):
        self.log_dir = log_dir or config.paths.log_folder
        os.makedirs(self.log_dir, exist_ok=True)

        for attr, filename in LOGGER_FILES.items():
            setattr(self, f'{attr}_logger', self._setup_logger(f'html_translator.{attr}', filename))

        if not any(isinstance(h, FeedHandler) for h in self.translation_logger.handlers):
            self.translation_logger.addHandler(FeedHandler(log_buffer))

    def _setup_logger(self, name: str, filename: str) -> logging.Logger:
        logger = logging.getLogger(name)
        level = logging.DEBUG if config.logging.verbose_debug else logging.INFO
        logger.setLevel(level)

        # Already configured by an earlier instance
        if logger.handlers:
            return logger

        logger.addFilter(UnitContextFilter())

        file_handler = RotatingFileHandler(
            os.path.join(self.log_dir, filename),
            maxBytes=config.logging.log_file_max_bytes,
            backupCount=config.logging.log_file_backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt='%H:%M:%S'))
        logger.addHandler(console_handler)

        return logger

    def for_unit(self, unit_id: int) -> logging.LoggerAdapter:
        """Translation logger whose records are tagged with ``unit_id``."""
        return logging.LoggerAdapter(self.translation_logger, {'unit_id': unit_id})


_logger_instance: Optional[AppLogger] = None


def get_logger() -> AppLogger:
    """Get or create the global logger instance."""
    global _logger_instance
    if _logger_instance is None:
        _logger_instance = AppLogger()
    return _logger_instance


def debug_print(message: str, level: str = 'INFO', source: str = 'APP', unit_id: Optional[int] = None):
    """Add an entry to the console panel feed, echoing it when verbose."""
    log_buffer.add(level, source, message, unit_id=unit_id)

    if config.logging.verbose_debug:
        print(message)
