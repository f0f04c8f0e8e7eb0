# SPDX-FileCopyrightText: 2025 RealTimeX
# SPDX-License-Identifier: MPL-2.0
from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional

from dotenv import dotenv_values

ENV_FILE_HINT = "LANGRELAY_ENV_FILE"


def load_env_file(path: str | Path | None = None, *, override: bool = False) -> tuple[Optional[str], List[str]]:
    """
    Load environment variables from a .env file.

    Resolution order when path is None:
    1) $LANGRELAY_ENV_FILE if set
    2) ./.env in the current working directory

    Variables already set in the environment win unless `override` is true.
    Returns (path_used, loaded_keys); (None, []) when no readable file exists.
    """
    if path is None:
        hint = os.getenv(ENV_FILE_HINT)
        path = Path(hint) if hint else Path.cwd() / ".env"
    candidate = Path(path)
    if not candidate.is_file():
        return None, []
    try:
        values = dotenv_values(candidate, encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None, []

    # keys without a value (bare `KEY`) come back as None
    loaded = [(k, v) for k, v in values.items() if v is not None and (override or k not in os.environ)]
    os.environ.update(loaded)
    return str(candidate), [k for k, _ in loaded]
