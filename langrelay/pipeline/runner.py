# SPDX-FileCopyrightText: 2025 RealTimeX
# SPDX-License-Identifier: MPL-2.0

import asyncio
import copy
import logging
import random
import time
from dataclasses import asdict, dataclass, field, fields, replace
from typing import Any, Literal, Self

from langrelay.logger import global_logger
from langrelay.pipeline.cancel import CancelToken, RunInterrupted
from langrelay.pipeline.checkpoint import CheckpointError, CheckpointRecord, CheckpointStore
from langrelay.pipeline.leaf import LeafSlot, LeafTranslator, LeafTranslatorConfig
from langrelay.pipeline.retry import CappedExponential, FixedDelay, MaxAttempts, RetryPolicy
from langrelay.pipeline.walker import DocumentWalker, InvalidDocumentError
from langrelay.translator.base import Translator, TransEngineType
from langrelay.utils.json_utils import duplicate_leaf_paths, iter_string_leaves, json_shape

RunStatus = Literal["completed", "interrupted"]


@dataclass(frozen=True, kw_only=True)
class RunConfig:
    repeat_passes: int = 20
    worker_count: int = 10  # 0 = unbounded
    start_delay_ms: int | None = None  # None = repeat_passes * 50
    retry_delay_ms: int = 10000
    max_retries: int = 0  # per pass; 0 = retry until cancelled
    retry_backoff: bool = False
    trans_engine: TransEngineType = "google-api"
    engine: str = "google"
    extra_trans_args: str = ""
    source_language: str = "en"
    mc_version: str | None = None
    languages: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        for name in ("repeat_passes", "worker_count", "retry_delay_ms", "max_retries", "start_delay_ms"):
            value = getattr(self, name)
            if value is None and name == "start_delay_ms":
                continue
            if not isinstance(value, int) or isinstance(value, bool):
                raise TypeError(f"{name} must be an integer, got {value!r}")
        if self.repeat_passes < 0:
            raise ValueError("repeat_passes must be >= 0")
        if self.worker_count < 0:
            raise ValueError("worker_count must be >= 0")
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.retry_delay_ms < 0 or (self.start_delay_ms is not None and self.start_delay_ms < 0):
            raise ValueError("delays must be >= 0")
        object.__setattr__(self, "languages", tuple(self.languages))

    @property
    def effective_start_delay_ms(self) -> int:
        if self.start_delay_ms is None:
            return self.repeat_passes * 50
        return self.start_delay_ms

    def build_retry_policy(self) -> RetryPolicy:
        seconds = self.retry_delay_ms / 1000
        if self.retry_backoff:
            policy: RetryPolicy = CappedExponential(seconds, seconds * 32)
        else:
            policy = FixedDelay(seconds)
        if self.max_retries:
            policy = MaxAttempts(policy, self.max_retries)
        return policy

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["languages"] = list(self.languages)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def with_overrides(self, overrides: dict[str, Any]) -> Self:
        """Fields present in `overrides` win; everything else is kept."""
        known = {f.name for f in fields(self)}
        return replace(self, **{k: v for k, v in overrides.items() if k in known})


@dataclass
class RunResult:
    status: RunStatus
    document: Any
    progress: dict[str, int]
    elapsed: float = 0.0

    @property
    def interrupted(self) -> bool:
        return self.status == "interrupted"


def resolve_resume(config: RunConfig, store: CheckpointStore, resume: bool,
                   logger: logging.Logger = global_logger) -> tuple[RunConfig, CheckpointRecord | None]:
    """
    In resume mode, load the checkpoint and let its saved configuration supersede
    `config`. Without a checkpoint the run simply starts fresh.
    """
    if not resume:
        return config, None
    record = store.load()
    if record is None:
        logger.info(f"No checkpoint at {store.path}; starting a fresh run")
        return config, None
    try:
        restored = config.with_overrides(record.config)
    except (TypeError, ValueError) as e:
        raise CheckpointError(f"Checkpoint {store.path} has an invalid saved configuration: {e}") from e
    if not restored.languages:
        restored = replace(restored, languages=config.languages)
    return restored, record


class TranslationRun:
    """
    Top-level driver: walks a working copy of the document and either returns the
    fully translated tree, or, once cancellation is observed, saves a checkpoint
    and returns an "interrupted" result.
    """

    def __init__(
            self,
            config: RunConfig,
            translator: Translator,
            store: CheckpointStore | None = None,
            *,
            cancel: CancelToken | None = None,
            retry_policy: RetryPolicy | None = None,
            rng: random.Random | None = None,
            logger: logging.Logger = global_logger,
    ):
        self.config = config
        self.translator = translator
        self.store = store
        self.cancel = cancel or CancelToken()
        self.retry_policy = retry_policy or config.build_retry_policy()
        self.rng = rng
        self.logger = logger

    def request_cancel(self) -> None:
        self.cancel.cancel()

    async def run(self, document: Any, progress: dict[str, int] | None = None) -> RunResult:
        config = self.config
        if not config.languages:
            raise ValueError("Language pool must not be empty")
        json_shape(document)  # rejects non-JSON values before any work starts
        duplicates = duplicate_leaf_paths(document)
        if duplicates:
            # progress is keyed by path, so colliding leaves would share one count
            raise InvalidDocumentError(f"Several string leaves share the path(s): {duplicates[:5]}")

        progress = dict(progress or {})
        holder = [copy.deepcopy(document)]
        limiter = asyncio.Semaphore(config.worker_count) if config.worker_count else None
        leaf_translator = LeafTranslator(
            self.translator,
            LeafTranslatorConfig(
                logger=self.logger,
                repeat_passes=config.repeat_passes,
                languages=config.languages,
                source_language=config.source_language,
            ),
            progress,
            retry_policy=self.retry_policy,
            cancel=self.cancel,
            rng=self.rng,
            limiter=limiter,
        )
        walker = DocumentWalker(
            leaf_translator,
            worker_count=config.worker_count,
            start_delay=config.effective_start_delay_ms / 1000,
            retry_policy=self.retry_policy,
            cancel=self.cancel,
            logger=self.logger,
        )

        leaf_count = sum(1 for _ in iter_string_leaves(holder[0]))
        self.logger.info(
            f"Translating {leaf_count} strings: passes:{config.repeat_passes}, workers:{config.worker_count}, "
            f"languages:{len(config.languages)}, retry:{self.retry_policy!r}"
        )
        time1 = time.time()
        try:
            translated = await walker.walk(holder[0], "", LeafSlot(holder, 0))
        except RunInterrupted:
            self.logger.warning("Run interrupted; capturing progress")
            if self.store is not None:
                self.store.save(holder[0], progress, config)
            return RunResult("interrupted", holder[0], progress, time.time() - time1)
        self.logger.info(f"Translation finished, time elapsed: {time.time() - time1:.1f} seconds")
        return RunResult("completed", translated, progress, time.time() - time1)
