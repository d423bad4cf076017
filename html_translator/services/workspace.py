"""
Translation Workspace
=====================
The fixed grid of translation units and the coordinator that drives
single-unit and bulk translation over it.
"""
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import replace
from typing import Callable, Dict, List, Optional, Tuple

from html_translator.config import config
from html_translator.config.constants import TargetLanguage
from html_translator.models.unit import TranslationUnit
from html_translator.services.translator import translate_html
from html_translator.utils.logging import get_logger, debug_print

TranslateFn = Callable[[str, TargetLanguage], str]


class UnitNotFoundError(KeyError):
    """Raised when a unit id is not part of the store."""

    def __init__(self, unit_id: int):
        super().__init__(unit_id)
        self.unit_id = unit_id

    def __str__(self):
        return f"Unit {self.unit_id} not found"


class UnitStore:
    """
    Ordered, fixed-size collection of translation units plus the globally
    selected target language.

    Units are created once and never added or removed; only their fields
    change. Every change goes through :meth:`update`, which swaps in a new
    immutable record under the lock and bumps :attr:`version`.
    """

    def __init__(self, unit_count: int = None, language: TargetLanguage = None):
        unit_count = unit_count or config.workspace.unit_count
        self._units: List[TranslationUnit] = [TranslationUnit(id=i) for i in range(unit_count)]
        self._language = language or config.workspace.default_language
        self._lock = threading.Lock()
        self._version = 0

    def __len__(self) -> int:
        return len(self._units)

    @property
    def version(self) -> int:
        return self._version

    @property
    def target_language(self) -> TargetLanguage:
        return self._language

    def set_target_language(self, language: TargetLanguage) -> None:
        with self._lock:
            self._language = TargetLanguage(language)
            self._version += 1

    def _index(self, unit_id: int) -> int:
        if not isinstance(unit_id, int) or not 0 <= unit_id < len(self._units):
            raise UnitNotFoundError(unit_id)
        return unit_id

    def get(self, unit_id: int) -> TranslationUnit:
        with self._lock:
            return self._units[self._index(unit_id)]

    def snapshot(self) -> List[TranslationUnit]:
        """All units as they are right now."""
        with self._lock:
            return list(self._units)

    def update(self, unit_id: int, **changes) -> TranslationUnit:
        """Apply field changes to one unit atomically and return the new record."""
        with self._lock:
            index = self._index(unit_id)
            unit = replace(self._units[index], **changes)
            self._units[index] = unit
            self._version += 1
            return unit

    def set_input(self, unit_id: int, input_html: str) -> TranslationUnit:
        """
        Replace a unit's input. The previous result is marked stale
        (``is_success=False``) but output and error are left as they were.
        """
        return self.update(unit_id, input_html=input_html, is_success=False)


class BulkTranslator:
    """
    Runs translations for units in a :class:`UnitStore`.

    Each unit is independent: a call started for one unit only ever
    touches that unit's record. Calls are never cancelled, so an edit made
    while a translation is in flight does not stop it and the late result
    still lands on the unit.
    """

    def __init__(
        self,
        store: UnitStore,
        translate_fn: TranslateFn = None,
        executor: Executor = None
    ):
        self.store = store
        self.translate_fn = translate_fn or translate_html
        self.executor = executor or ThreadPoolExecutor(
            max_workers=config.workspace.max_concurrent_translations or len(store),
            thread_name_prefix='unit-translate'
        )

    def _begin(self, unit_id: int) -> Optional[Tuple[str, TargetLanguage]]:
        """Mark a unit as loading and capture what to translate, or None for blank input."""
        unit = self.store.get(unit_id)
        if not unit.has_input:
            return None

        language = self.store.target_language
        self.store.update(unit_id, is_loading=True, error=None, is_success=False)
        get_logger().for_unit(unit_id).info(f"Started: {len(unit.input_html)} chars to {language.value}")
        return unit.input_html, language

    def _complete(self, unit_id: int, input_html: str, language: TargetLanguage) -> TranslationUnit:
        log = get_logger().for_unit(unit_id)
        try:
            translated = self.translate_fn(input_html, language)
            self.store.update(unit_id, output_html=translated, is_success=True)
            log.info(f"Translated to {language.value}")
        except Exception as e:
            log.error(f"Translation failed: {e}")
            self.store.update(unit_id, error=str(e) or 'Error', is_success=False)
        finally:
            unit = self.store.update(unit_id, is_loading=False)
        return unit

    def translate_unit(self, unit_id: int) -> Optional[TranslationUnit]:
        """
        Translate one unit and wait for the result.

        Returns:
            The unit after the call, or None when its input is blank

        Raises:
            UnitNotFoundError: Unknown unit id
        """
        job = self._begin(unit_id)
        if job is None:
            return None
        return self._complete(unit_id, *job)

    def submit_unit(self, unit_id: int) -> Optional[Future]:
        """
        Start translating one unit in the background.

        The unit is marked as loading before this returns. Returns None
        (and changes nothing) when the unit's input is blank.
        """
        job = self._begin(unit_id)
        if job is None:
            return None
        return self.executor.submit(self._complete, unit_id, *job)

    def translate_all(self) -> Dict[int, Future]:
        """
        Start a translation for every populated unit that is not already
        translating. Does not wait; each unit finishes on its own.

        Returns:
            Futures keyed by the ids of the units that were started
        """
        started: Dict[int, Future] = {}
        for unit in self.store.snapshot():
            if unit.has_input and not unit.is_loading:
                future = self.submit_unit(unit.id)
                if future is not None:
                    started[unit.id] = future

        if started:
            debug_print(f"Translate all: {len(started)} units started", 'INFO', 'UNIT')
        return started

    def shutdown(self, wait: bool = True):
        self.executor.shutdown(wait=wait)
