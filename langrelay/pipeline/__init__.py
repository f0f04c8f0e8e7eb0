# SPDX-FileCopyrightText: 2025 RealTimeX
# SPDX-License-Identifier: MPL-2.0
from langrelay.pipeline.cancel import CancelToken, RunInterrupted
from langrelay.pipeline.checkpoint import CheckpointError, CheckpointRecord, CheckpointStore, validate_checkpoint
from langrelay.pipeline.leaf import EmptyTranslationError, LeafSlot, LeafTranslator, LeafTranslatorConfig
from langrelay.pipeline.queue import NOT_RUN, run_queue
from langrelay.pipeline.retry import CappedExponential, FixedDelay, MaxAttempts, RetryExhaustedError, RetryPolicy
from langrelay.pipeline.runner import RunConfig, RunResult, TranslationRun, resolve_resume
from langrelay.pipeline.walker import DocumentWalker, InvalidDocumentError

__all__ = [
    "CancelToken",
    "RunInterrupted",
    "CheckpointError",
    "CheckpointRecord",
    "CheckpointStore",
    "validate_checkpoint",
    "EmptyTranslationError",
    "LeafSlot",
    "LeafTranslator",
    "LeafTranslatorConfig",
    "NOT_RUN",
    "run_queue",
    "CappedExponential",
    "FixedDelay",
    "MaxAttempts",
    "RetryExhaustedError",
    "RetryPolicy",
    "RunConfig",
    "RunResult",
    "TranslationRun",
    "resolve_resume",
    "DocumentWalker",
    "InvalidDocumentError",
]
