# SPDX-FileCopyrightText: 2025 RealTimeX
# SPDX-License-Identifier: MPL-2.0

import logging
from typing import Any

from langrelay.logger import global_logger
from langrelay.pipeline.cancel import CancelToken, RunInterrupted
from langrelay.pipeline.leaf import LeafSlot, LeafTranslator
from langrelay.pipeline.queue import NOT_RUN, run_queue
from langrelay.pipeline.retry import FixedDelay, RetryExhaustedError, RetryPolicy
from langrelay.translator.base import TranslatorUnavailableError
from langrelay.utils.json_utils import child_path


class InvalidDocumentError(TypeError):
    """The tree holds a value that is not a JSON object, array or primitive."""


class DocumentWalker:
    """
    Recursively translates a JSON tree. Every object/array level sends its direct
    children through the worker queue; string leaves go to the LeafTranslator.

    The walker reads from the working document it is given (leaf passes are written
    back there) and returns a freshly built tree with the same shape.
    """

    def __init__(
            self,
            leaf_translator: LeafTranslator,
            *,
            worker_count: int = 10,
            start_delay: float = 0,
            retry_policy: RetryPolicy | None = None,
            cancel: CancelToken | None = None,
            logger: logging.Logger = global_logger,
    ):
        self.leaf_translator = leaf_translator
        self.worker_count = worker_count
        self.start_delay = start_delay
        self.retry_policy = retry_policy or FixedDelay(10)
        self.cancel = cancel or CancelToken()
        self.logger = logger

    async def walk(self, node: Any, path: str = "", slot: LeafSlot | None = None) -> Any:
        if isinstance(node, dict):
            keys = list(node.keys())
            values = await self._walk_children([LeafSlot(node, k) for k in keys], path)
            return dict(zip(keys, values))
        if isinstance(node, list):
            return await self._walk_children([LeafSlot(node, i) for i in range(len(node))], path)
        if isinstance(node, str):
            if slot is None:
                slot = LeafSlot([node], 0)
            return await self.leaf_translator.translate_leaf(slot, path)
        if node is None or isinstance(node, (bool, int, float)):
            return node
        raise InvalidDocumentError(f"Unsupported node type at '{path}': {type(node).__name__}")

    async def _walk_children(self, slots: list[LeafSlot], path: str) -> list:
        async def visit(slot: LeafSlot):
            return await self.walk(slot.get(), child_path(path, slot.key), slot)

        results = await run_queue(
            slots,
            self.worker_count,
            visit,
            start_delay=self.start_delay,
            retry_policy=self.retry_policy,
            cancel=self.cancel,
            fatal_errors=(InvalidDocumentError, TranslatorUnavailableError, RetryExhaustedError),
            logger=self.logger,
        )
        if any(r is NOT_RUN for r in results):
            raise RunInterrupted()
        return results
