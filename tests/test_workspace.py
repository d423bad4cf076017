"""
Unit Tests for the Translation Workspace
========================================
Tests for the unit store and the single-unit / bulk translation coordinator.
"""
import threading
import pytest
import sys
import os
from concurrent.futures import wait
from unittest.mock import Mock

os.environ.setdefault('VERBOSE_DEBUG', 'false')

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from html_translator.config.constants import TargetLanguage, UnitStatus, TRANSLATION_FAILED_MESSAGE
from html_translator.services.gemini_client import GeminiResponse
from html_translator.services.translator import TranslationError, translate_html
from html_translator.services.workspace import BulkTranslator, UnitNotFoundError, UnitStore


class RecordingTranslate:
    """Fake remote call that records every request it receives."""

    def __init__(self, result=lambda html, language: f"[{language.value}] {html}", fail_on=()):
        self.result = result
        self.fail_on = set(fail_on)
        self.calls = []
        self.lock = threading.Lock()

    def __call__(self, html, language):
        with self.lock:
            self.calls.append((html, language))
        if html in self.fail_on:
            raise TranslationError()
        return self.result(html, language)


@pytest.fixture
def store():
    return UnitStore(unit_count=20, language=TargetLanguage.FRENCH)


@pytest.fixture
def fake_translate():
    return RecordingTranslate()


@pytest.fixture
def translator(store, fake_translate):
    translator = BulkTranslator(store, translate_fn=fake_translate)
    yield translator
    translator.shutdown()


class TestUnitStore:

    def test_fixed_size_with_sequential_ids(self, store):
        units = store.snapshot()
        assert len(store) == 20
        assert [unit.id for unit in units] == list(range(20))

    def test_units_start_empty(self, store):
        unit = store.get(7)
        assert unit.input_html == ""
        assert unit.output_html == ""
        assert not unit.is_loading
        assert not unit.is_success
        assert unit.error is None
        assert unit.status == UnitStatus.READY

    def test_unknown_unit(self, store):
        with pytest.raises(UnitNotFoundError):
            store.get(20)
        with pytest.raises(UnitNotFoundError):
            store.update(-1, input_html="x")

    def test_update_replaces_record_and_bumps_version(self, store):
        before = store.get(2)
        version = store.version
        after = store.update(2, output_html="<p>x</p>")

        assert before.output_html == ""
        assert after.output_html == "<p>x</p>"
        assert store.get(2) == after
        assert store.version == version + 1

    def test_snapshot_is_a_copy(self, store):
        snapshot = store.snapshot()
        store.set_input(0, "<p>changed</p>")
        assert snapshot[0].input_html == ""

    def test_edit_marks_result_stale(self, store):
        store.update(4, output_html="<p>Bonjour</p>", is_success=True)
        unit = store.set_input(4, "<p>Goodbye</p>")

        assert not unit.is_success
        assert unit.output_html == "<p>Bonjour</p>"
        assert unit.error is None

    def test_edit_keeps_error(self, store):
        store.update(4, error="boom")
        assert store.set_input(4, "<p>retry</p>").error == "boom"

    def test_target_language(self, store):
        assert store.target_language == TargetLanguage.FRENCH
        store.set_target_language(TargetLanguage.GERMAN)
        assert store.target_language == TargetLanguage.GERMAN

    def test_status_labels(self, store):
        assert store.update(0, is_loading=True).status == UnitStatus.TRANSLATING
        assert store.update(0, is_loading=False, is_success=True).status == UnitStatus.DONE
        assert store.update(0, is_success=False, error="x").status == UnitStatus.ERROR


class TestTranslateUnit:

    @pytest.mark.parametrize("blank", ["", "   ", "\n\t  \n"])
    def test_blank_input_is_noop(self, store, translator, fake_translate, blank):
        store.update(3, input_html=blank, output_html="<p>old</p>", error="old error")
        before = store.get(3)
        version = store.version

        assert translator.translate_unit(3) is None
        assert translator.submit_unit(3) is None
        assert store.get(3) == before
        assert store.version == version
        assert fake_translate.calls == []

    def test_success(self, store, translator, fake_translate):
        store.set_input(3, "<p>Hello</p>")
        unit = translator.translate_unit(3)

        assert unit.output_html == "[French] <p>Hello</p>"
        assert unit.is_success
        assert not unit.is_loading
        assert unit.error is None
        assert fake_translate.calls == [("<p>Hello</p>", TargetLanguage.FRENCH)]

    def test_success_clears_previous_error(self, store, translator):
        store.update(1, input_html="<p>Hi</p>", error="earlier failure")
        unit = translator.translate_unit(1)
        assert unit.error is None
        assert unit.is_success

    def test_failure_keeps_output(self, store):
        translator = BulkTranslator(store, translate_fn=RecordingTranslate(fail_on={"<p>Hello</p>"}))
        store.update(1, input_html="<p>Hello</p>", output_html="<p>old</p>", is_success=True)

        unit = translator.translate_unit(1)
        translator.shutdown()

        assert not unit.is_loading
        assert not unit.is_success
        assert unit.error == TRANSLATION_FAILED_MESSAGE
        assert unit.output_html == "<p>old</p>"

    def test_failure_without_message(self, store):
        def broken(html, language):
            raise RuntimeError()

        translator = BulkTranslator(store, translate_fn=broken)
        store.set_input(0, "<p>x</p>")
        unit = translator.translate_unit(0)
        translator.shutdown()

        assert unit.error == "Error"

    def test_loading_while_in_flight(self, store):
        seen = {}

        def observe(html, language):
            unit = store.get(5)
            seen.update(loading=unit.is_loading, success=unit.is_success, error=unit.error)
            return html

        translator = BulkTranslator(store, translate_fn=observe)
        store.update(5, input_html="<p>x</p>", is_success=True, error=None)
        translator.translate_unit(5)
        translator.shutdown()

        assert seen == {'loading': True, 'success': False, 'error': None}
        assert not store.get(5).is_loading

    def test_unknown_unit(self, translator):
        with pytest.raises(UnitNotFoundError):
            translator.translate_unit(99)

    def test_fenced_reply_scenario(self, store):
        client = Mock()
        client.model = 'gemini-test'
        client.generate.return_value = GeminiResponse(success=True, text="```html\n<p>Bonjour</p>\n```")
        translator = BulkTranslator(
            store, translate_fn=lambda html, language: translate_html(html, language, client=client)
        )
        store.set_input(3, "<p>Hello</p>")

        unit = translator.translate_unit(3)
        translator.shutdown()

        assert unit.output_html == "<p>Bonjour</p>"
        assert unit.is_success
        assert "French" in client.generate.call_args[0][0]


class TestSubmitUnit:

    def test_marks_loading_before_returning(self, store):
        release = threading.Event()

        def slow(html, language):
            release.wait(5)
            return "<p>done</p>"

        translator = BulkTranslator(store, translate_fn=slow)
        store.set_input(1, "<p>x</p>")

        future = translator.submit_unit(1)
        assert store.get(1).is_loading
        release.set()
        unit = future.result(timeout=5)
        translator.shutdown()

        assert not unit.is_loading
        assert unit.output_html == "<p>done</p>"

    def test_edit_does_not_cancel_in_flight_call(self, store):
        release = threading.Event()

        def slow(html, language):
            release.wait(5)
            return f"translated {html}"

        translator = BulkTranslator(store, translate_fn=slow)
        store.set_input(0, "<p>first</p>")
        future = translator.submit_unit(0)

        store.set_input(0, "<p>second</p>")
        release.set()
        unit = future.result(timeout=5)
        translator.shutdown()

        # The late result of the old input still lands
        assert unit.input_html == "<p>second</p>"
        assert unit.output_html == "translated <p>first</p>"
        assert unit.is_success

    def test_language_captured_at_start(self, store):
        release = threading.Event()
        fake = RecordingTranslate()

        def slow(html, language):
            release.wait(5)
            return fake(html, language)

        translator = BulkTranslator(store, translate_fn=slow)
        store.set_input(2, "<p>x</p>")
        future = translator.submit_unit(2)
        store.set_target_language(TargetLanguage.SPANISH)
        release.set()
        future.result(timeout=5)
        translator.shutdown()

        assert fake.calls == [("<p>x</p>", TargetLanguage.FRENCH)]


class TestTranslateAll:

    def test_only_populated_units_are_started(self, store, translator, fake_translate):
        store.set_input(0, "<p>zero</p>")
        store.set_input(5, "<p>five</p>")
        store.set_input(9, "   ")

        futures = translator.translate_all()
        wait(futures.values(), timeout=5)

        assert set(futures) == {0, 5}
        assert sorted(html for html, _ in fake_translate.calls) == ["<p>five</p>", "<p>zero</p>"]
        assert store.get(0).is_success
        assert store.get(5).is_success

    def test_failures_are_isolated(self, store):
        fake = RecordingTranslate(fail_on={"<p>zero</p>"})
        translator = BulkTranslator(store, translate_fn=fake)
        store.set_input(0, "<p>zero</p>")
        store.set_input(5, "<p>five</p>")

        futures = translator.translate_all()
        wait(futures.values(), timeout=5)
        translator.shutdown()

        assert len(fake.calls) == 2
        failed, succeeded = store.get(0), store.get(5)
        assert failed.error == TRANSLATION_FAILED_MESSAGE
        assert not failed.is_success
        assert succeeded.is_success
        assert succeeded.error is None
        assert succeeded.output_html == "[French] <p>five</p>"

    def test_skips_units_already_loading(self, store, translator, fake_translate):
        store.update(4, input_html="<p>busy</p>", is_loading=True)
        store.set_input(6, "<p>idle</p>")

        futures = translator.translate_all()
        wait(futures.values(), timeout=5)

        assert set(futures) == {6}
        assert fake_translate.calls == [("<p>idle</p>", TargetLanguage.FRENCH)]
        assert store.get(4).is_loading

    def test_nothing_to_do(self, translator, fake_translate):
        assert translator.translate_all() == {}
        assert fake_translate.calls == []

    def test_runs_concurrently(self, store):
        barrier = threading.Barrier(3, timeout=5)

        def meet(html, language):
            # Only passes if all three calls are outstanding at once
            barrier.wait()
            return html

        translator = BulkTranslator(store, translate_fn=meet)
        for unit_id in (1, 2, 3):
            store.set_input(unit_id, f"<p>{unit_id}</p>")

        futures = translator.translate_all()
        wait(futures.values(), timeout=10)
        translator.shutdown()

        assert all(store.get(unit_id).is_success for unit_id in (1, 2, 3))
