from __future__ import annotations

import random
import tempfile
import unittest
from pathlib import Path

from langrelay.pipeline.cancel import CancelToken
from langrelay.pipeline.checkpoint import CheckpointError, CheckpointStore
from langrelay.pipeline.retry import FixedDelay
from langrelay.pipeline.runner import RunConfig, TranslationRun, resolve_resume
from langrelay.pipeline.walker import InvalidDocumentError
from langrelay.utils.json_utils import json_shape

from tests.fakes import QUIET_LOGGER, CancellingTranslator, SuffixTranslator


def make_config(**kwargs) -> RunConfig:
    kwargs.setdefault("repeat_passes", 2)
    kwargs.setdefault("worker_count", 2)
    kwargs.setdefault("start_delay_ms", 0)
    kwargs.setdefault("retry_delay_ms", 0)
    kwargs.setdefault("languages", ("fr", "de", "ja"))
    return RunConfig(**kwargs)


def make_run(config, translator, store=None, cancel=None) -> TranslationRun:
    return TranslationRun(config, translator, store, cancel=cancel, retry_policy=FixedDelay(0),
                          rng=random.Random(5), logger=QUIET_LOGGER)


class TranslationRunTests(unittest.IsolatedAsyncioTestCase):
    async def test_completed_run_returns_translated_document(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            store = CheckpointStore(Path(tmp) / "resume.json", logger=QUIET_LOGGER)
            doc = {"a": "Hello", "b": ["World", 7], "c": {"d": "Again"}}
            result = await make_run(make_config(repeat_passes=3), SuffixTranslator(), store).run(doc)

            self.assertEqual(result.status, "completed")
            self.assertFalse(result.interrupted)
            self.assertEqual(json_shape(result.document), json_shape(doc))
            # suffix fake: back-translation only strips the last pass
            self.assertEqual(result.document["a"].count("_"), 2)
            self.assertEqual(result.progress, {"a": 3, "b[0]": 3, "c.d": 3})
            self.assertFalse(store.exists())
            # caller's document is never mutated
            self.assertEqual(doc, {"a": "Hello", "b": ["World", 7], "c": {"d": "Again"}})

    async def test_cancellation_checkpoints_in_flight_progress(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            store = CheckpointStore(Path(tmp) / "resume.json", logger=QUIET_LOGGER)
            cancel = CancelToken()
            translator = CancellingTranslator(cancel, on_call=1)
            doc = {"leaf1": "Alpha", "leaf2": "Beta_fr_de_ja"}
            config = make_config(repeat_passes=5, worker_count=2)

            result = await make_run(config, translator, store, cancel).run(doc, {"leaf1": 0, "leaf2": 3})

            self.assertTrue(result.interrupted)
            record = store.load()
            self.assertIsNotNone(record)
            self.assertIn(record.progress["leaf1"], (0, 1))
            self.assertIn(record.progress["leaf2"], (3, 4))
            self.assertLessEqual(len(translator.forward_calls), 2)
            self.assertEqual(translator.back_calls, [])
            # every committed pass is reflected in the snapshot text
            self.assertEqual(record.document["leaf1"].count("_"), record.progress["leaf1"])
            self.assertEqual(record.document["leaf2"].count("_"), record.progress["leaf2"])
            self.assertEqual(RunConfig.from_dict(record.config), config)

    async def test_resume_performs_only_remaining_passes(self) -> None:
        translator = SuffixTranslator()
        doc = {"x": "One_fr", "y": "Two_fr_de_ja", "z": "Three"}
        progress = {"x": 1, "y": 3}
        result = await make_run(make_config(repeat_passes=4), translator).run(doc, progress)

        self.assertEqual(result.status, "completed")
        # 3 + 1 + 4 remaining forward passes, one back-translation per leaf
        self.assertEqual(len(translator.forward_calls), 8)
        self.assertEqual(len(translator.back_calls), 3)
        self.assertEqual(result.progress, {"x": 4, "y": 4, "z": 4})
        # the passed-in progress map is not mutated
        self.assertEqual(progress, {"x": 1, "y": 3})

    async def test_interrupt_then_resume_completes_every_leaf(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            store = CheckpointStore(Path(tmp) / "resume.json", logger=QUIET_LOGGER)
            doc = {"greeting": "Hello", "items": ["Sword", "Shield"]}
            config = make_config(repeat_passes=3, worker_count=1)

            cancel = CancelToken()
            first = await make_run(config, CancellingTranslator(cancel, on_call=2), store, cancel).run(doc)
            self.assertTrue(first.interrupted)

            resumed_config, record = resolve_resume(make_config(repeat_passes=99), store, True, QUIET_LOGGER)
            self.assertEqual(resumed_config.repeat_passes, 3)
            translator = SuffixTranslator()
            second = await make_run(resumed_config, translator).run(record.document, record.progress)

            self.assertEqual(second.status, "completed")
            self.assertEqual(second.progress, {"greeting": 3, "items[0]": 3, "items[1]": 3})
            done_before = sum(record.progress.values())
            self.assertEqual(len(translator.forward_calls), 9 - done_before)
            self.assertEqual(json_shape(second.document), json_shape(doc))

    async def test_checkpoint_write_failure_propagates(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "resume.json"
            target.mkdir()
            cancel = CancelToken()
            run = make_run(make_config(), CancellingTranslator(cancel), CheckpointStore(target, QUIET_LOGGER), cancel)
            with self.assertRaises(CheckpointError):
                await run.run({"a": "Hello", "b": "World"})

    async def test_translator_calls_are_bounded_across_nesting_levels(self) -> None:
        translator = SuffixTranslator()
        doc = {f"group{g}": [f"text{g}{i}" for i in range(6)] for g in range(6)}
        await make_run(make_config(repeat_passes=2, worker_count=3), translator).run(doc)
        self.assertLessEqual(translator.max_in_flight, 3)
        self.assertEqual(len(translator.forward_calls), 72)

    async def test_request_cancel_before_run_saves_untouched_document(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            store = CheckpointStore(Path(tmp) / "resume.json", logger=QUIET_LOGGER)
            translator = SuffixTranslator()
            run = make_run(make_config(), translator, store)
            run.request_cancel()
            result = await run.run({"a": "Hello"})

            self.assertTrue(result.interrupted)
            self.assertEqual(translator.calls, [])
            self.assertEqual(store.load().document, {"a": "Hello"})

    async def test_empty_language_pool_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            await make_run(make_config(languages=()), SuffixTranslator()).run({"a": "b"})

    async def test_colliding_leaf_paths_are_rejected_before_translating(self) -> None:
        translator = SuffixTranslator()
        run = make_run(make_config(repeat_passes=3, worker_count=1), translator)
        with self.assertRaises(InvalidDocumentError) as ctx:
            await run.run({"a.b": "x", "a": {"b": "y"}})
        self.assertIn("a.b", str(ctx.exception))
        self.assertEqual(translator.calls, [])

    async def test_non_json_document_is_rejected(self) -> None:
        with self.assertRaises(TypeError):
            await make_run(make_config(), SuffixTranslator()).run({"a": object()})


class ResolveResumeTests(unittest.TestCase):
    def test_fresh_run_ignores_checkpoint(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            store = CheckpointStore(Path(tmp) / "resume.json", logger=QUIET_LOGGER)
            store.save({}, {}, make_config(repeat_passes=9))
            config = make_config(repeat_passes=1)
            self.assertEqual(resolve_resume(config, store, False, QUIET_LOGGER), (config, None))

    def test_resume_without_checkpoint_starts_fresh(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            store = CheckpointStore(Path(tmp) / "resume.json", logger=QUIET_LOGGER)
            config = make_config()
            self.assertEqual(resolve_resume(config, store, True, QUIET_LOGGER), (config, None))

    def test_saved_configuration_supersedes_command_line(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            store = CheckpointStore(Path(tmp) / "resume.json", logger=QUIET_LOGGER)
            saved = make_config(repeat_passes=7, worker_count=4, trans_engine="translate-shell", engine="bing")
            store.save({"a": "b"}, {"a": 2}, saved)

            config, record = resolve_resume(make_config(repeat_passes=1), store, True, QUIET_LOGGER)
            self.assertEqual(config, saved)
            self.assertEqual(record.progress, {"a": 2})

    def test_badly_typed_saved_configuration_is_a_checkpoint_error(self) -> None:
        for saved in ({"repeat_passes": "3"}, {"languages": None}, {"worker_count": 2.5}, {"max_retries": -1}):
            with self.subTest(saved=saved), tempfile.TemporaryDirectory() as tmp:
                store = CheckpointStore(Path(tmp) / "resume.json", logger=QUIET_LOGGER)
                store.save({"a": "b"}, {"a": 1}, saved)
                with self.assertRaises(CheckpointError):
                    resolve_resume(make_config(), store, True, QUIET_LOGGER)

    def test_empty_saved_languages_fall_back_to_current(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            store = CheckpointStore(Path(tmp) / "resume.json", logger=QUIET_LOGGER)
            store.save({}, {}, {"repeat_passes": 3, "languages": [], "unknown_key": True})

            config, _ = resolve_resume(make_config(languages=("ko",)), store, True, QUIET_LOGGER)
            self.assertEqual(config.repeat_passes, 3)
            self.assertEqual(config.languages, ("ko",))


class RunConfigTests(unittest.TestCase):
    def test_defaults(self) -> None:
        config = RunConfig()
        self.assertEqual(config.repeat_passes, 20)
        self.assertEqual(config.worker_count, 10)
        self.assertEqual(config.retry_delay_ms, 10000)
        self.assertEqual(config.effective_start_delay_ms, 1000)

    def test_explicit_start_delay_wins(self) -> None:
        self.assertEqual(RunConfig(start_delay_ms=0).effective_start_delay_ms, 0)

    def test_dict_round_trip(self) -> None:
        config = make_config(mc_version="1.20.4")
        data = config.to_dict()
        self.assertEqual(data["languages"], ["fr", "de", "ja"])
        self.assertEqual(RunConfig.from_dict(data), config)

    def test_non_integer_counts_are_rejected(self) -> None:
        for kwargs in ({"repeat_passes": "3"}, {"worker_count": 2.5}, {"max_retries": True}, {"start_delay_ms": "0"}):
            with self.subTest(kwargs=kwargs), self.assertRaises(TypeError):
                RunConfig(**kwargs)

    def test_negative_values_are_rejected(self) -> None:
        for kwargs in ({"repeat_passes": -1}, {"worker_count": -2}, {"retry_delay_ms": -5}, {"start_delay_ms": -1}):
            with self.subTest(kwargs=kwargs), self.assertRaises(ValueError):
                RunConfig(**kwargs)


if __name__ == "__main__":
    unittest.main()
