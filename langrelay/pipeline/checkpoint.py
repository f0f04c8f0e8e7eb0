# SPDX-FileCopyrightText: 2025 RealTimeX
# SPDX-License-Identifier: MPL-2.0

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from langrelay.logger import global_logger
from langrelay.utils.json_utils import duplicate_leaf_paths, iter_string_leaves, json_shape

DEFAULT_CHECKPOINT_FILE = ".translation_resume.json"


class CheckpointError(RuntimeError):
    """The checkpoint could not be written, read, or does not match the source document."""


@dataclass
class CheckpointRecord:
    document: Any
    progress: dict[str, int]
    config: dict[str, Any]


class CheckpointStore:
    """
    Persists {document snapshot, progress map, run configuration} as one JSON file.
    Existence of the file is what makes a run resumable.
    """

    def __init__(self, path: str | Path = DEFAULT_CHECKPOINT_FILE, logger: logging.Logger = global_logger):
        self.path = Path(path)
        self.logger = logger

    def exists(self) -> bool:
        return self.path.is_file()

    def save(self, document: Any, progress: Mapping[str, int], config: Any) -> None:
        config_dict = config.to_dict() if hasattr(config, "to_dict") else dict(config)
        payload = {"json": document, "progress": dict(progress), "config": config_dict}
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=".resume_", suffix=".tmp", dir=self.path.parent)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, indent=4)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except (OSError, TypeError, ValueError) as e:
            if tmp_name and os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise CheckpointError(f"Failed to write checkpoint {self.path}: {e}") from e
        self.logger.info(f"Checkpoint saved: {self.path} ({len(payload['progress'])} leaves tracked)")

    def load(self) -> CheckpointRecord | None:
        if not self.exists():
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                payload = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise CheckpointError(f"Unreadable checkpoint {self.path}: {e}") from e

        if not isinstance(payload, dict):
            raise CheckpointError(f"Checkpoint {self.path} is not a JSON object")
        missing = [k for k in ("json", "progress", "config") if k not in payload]
        if missing:
            raise CheckpointError(f"Checkpoint {self.path} is missing fields: {', '.join(missing)}")
        progress = payload["progress"]
        if not isinstance(progress, dict) or not all(
                isinstance(v, int) and not isinstance(v, bool) for v in progress.values()
        ):
            raise CheckpointError(f"Checkpoint {self.path} has a malformed progress map")
        if not isinstance(payload["config"], dict):
            raise CheckpointError(f"Checkpoint {self.path} has a malformed config")
        return CheckpointRecord(document=payload["json"], progress=progress, config=payload["config"])

    def clear(self) -> None:
        if self.exists():
            self.path.unlink()
            self.logger.debug(f"Checkpoint removed: {self.path}")


def validate_checkpoint(record: CheckpointRecord, source_document: Any, repeat_passes: int) -> None:
    """
    Refuse a checkpoint whose snapshot no longer lines up with the source document,
    since progress paths would then point at the wrong leaves.
    """
    try:
        same_shape = json_shape(record.document) == json_shape(source_document)
    except TypeError as e:
        raise CheckpointError(f"Checkpoint snapshot is not a JSON document: {e}") from e
    if not same_shape:
        raise CheckpointError("Checkpoint snapshot does not match the structure of the source document")

    duplicates = duplicate_leaf_paths(record.document)
    if duplicates:
        raise CheckpointError(f"Checkpoint snapshot has string leaves sharing a path: {duplicates[:5]}")
    leaf_paths = {path for path, _ in iter_string_leaves(record.document)}
    unknown = [p for p in record.progress if p not in leaf_paths]
    if unknown:
        raise CheckpointError(f"Checkpoint progress refers to unknown leaves: {unknown[:5]}")
    out_of_range = {p: c for p, c in record.progress.items() if not 0 <= c <= repeat_passes}
    if out_of_range:
        raise CheckpointError(
            f"Checkpoint progress outside 0..{repeat_passes}: {dict(list(out_of_range.items())[:5])}"
        )
