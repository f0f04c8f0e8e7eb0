# SPDX-FileCopyrightText: 2025 RealTimeX
# SPDX-License-Identifier: MPL-2.0

import asyncio
import logging
import random
from dataclasses import dataclass, field
from typing import Any, MutableMapping, Sequence

from langrelay.logger import global_logger
from langrelay.pipeline.cancel import CancelToken, RunInterrupted
from langrelay.pipeline.retry import FixedDelay, RetryExhaustedError, RetryPolicy
from langrelay.translator.base import Translator, TranslatorError, TranslatorUnavailableError


class EmptyTranslationError(TranslatorError):
    """The back end answered with an empty string."""


class LeafSlot:
    """One writable position (container[key]) in the working document."""

    __slots__ = ("container", "key")

    def __init__(self, container: Any, key: Any):
        self.container = container
        self.key = key

    def get(self) -> Any:
        return self.container[self.key]

    def set(self, value: Any) -> None:
        self.container[self.key] = value


@dataclass(kw_only=True)
class LeafTranslatorConfig:
    logger: logging.Logger = global_logger
    repeat_passes: int
    languages: Sequence[str] = field(default_factory=list)
    source_language: str = "en"


class LeafTranslator:
    """
    Drives one string leaf through `repeat_passes` forward passes into randomly
    drawn languages, then a single back-translation into the source language.

    Progress for the leaf lives in `progress[path]` and is advanced right after
    each committed pass, together with the leaf's slot in the working document,
    so a checkpoint taken at any await point is consistent.
    """

    def __init__(
            self,
            translator: Translator,
            config: LeafTranslatorConfig,
            progress: MutableMapping[str, int],
            *,
            retry_policy: RetryPolicy | None = None,
            cancel: CancelToken | None = None,
            rng: random.Random | None = None,
            limiter: asyncio.Semaphore | None = None,
    ):
        if not config.languages:
            raise ValueError("Language pool must not be empty")
        self.translator = translator
        self.repeat_passes = config.repeat_passes
        self.languages = list(config.languages)
        self.source_language = config.source_language
        self.logger = config.logger
        self.progress = progress
        self.retry_policy = retry_policy or FixedDelay(10)
        self.cancel = cancel or CancelToken()
        self.rng = rng or random.Random()
        self.limiter = limiter

    async def _call(self, text: str, lang: str) -> str:
        if self.limiter is None:
            return await self.translator.translate(text, lang)
        async with self.limiter:
            return await self.translator.translate(text, lang)

    async def _forward_pass(self, text: str, path: str, pass_number: int) -> tuple[str, str]:
        attempt = 0
        lang = self.rng.choice(self.languages)
        while True:
            try:
                result = await self._call(text, lang)
                if not result:
                    raise EmptyTranslationError("Empty translation")
                return result, lang
            except TranslatorUnavailableError:
                raise
            except Exception as e:
                attempt += 1
                delay = self.retry_policy.delay(attempt)
                if delay is None:
                    raise RetryExhaustedError(
                        f"[{path}] Pass {pass_number} gave up after {attempt} attempts: {e!r}", attempts=attempt
                    ) from e
                self.logger.warning(f"[{path}] Pass {pass_number} -> {lang} failed ({e}); retrying in {delay}s")
                if await self.cancel.sleep(delay):
                    raise RunInterrupted()
                lang = self.rng.choice(self.languages)

    async def _back_translate(self, text: str, path: str) -> str:
        try:
            back = await self._call(text, self.source_language)
        except Exception as e:
            self.logger.warning(f"[{path}] Back-translation to {self.source_language} failed ({e!r}); keeping last pass")
            return text
        if not back:
            self.logger.warning(f"[{path}] Back-translation to {self.source_language} was empty; keeping last pass")
            return text
        self.logger.info(f'[{path}] Back to {self.source_language}: "{back}"')
        return back

    async def translate_leaf(self, slot: LeafSlot, path: str) -> str:
        count = self.progress.setdefault(path, 0)
        text = slot.get()
        while count < self.repeat_passes:
            self.cancel.raise_if_cancelled()
            text, lang = await self._forward_pass(text, path, count + 1)
            count += 1
            slot.set(text)
            self.progress[path] = count
            self.logger.info(f'[{path}] Pass {count} -> {lang}: "{text}"')
        # a cancelled leaf checkpoints instead of back-translating
        self.cancel.raise_if_cancelled()
        return await self._back_translate(text, path)
