# SPDX-FileCopyrightText: 2025 RealTimeX
# SPDX-License-Identifier: MPL-2.0

import asyncio
import os
import shlex
from dataclasses import dataclass

from langrelay.translator.base import (
    Translator,
    TranslatorConfig,
    TranslatorError,
    TranslatorUnavailableError,
)


@dataclass(kw_only=True)
class ShellTranslatorConfig(TranslatorConfig):
    cmd: str = ""  # empty: LANGRELAY_TRANS_CMD, then "trans"
    engine: str = "google"
    extra_args: str = ""


class ShellTranslator(Translator):
    """Runs translate-shell (`trans`) once per call."""

    def __init__(self, config: ShellTranslatorConfig):
        super().__init__(config=config)
        self.cmd = config.cmd or os.getenv("LANGRELAY_TRANS_CMD") or "trans"
        self.engine = config.engine
        self.extra_args = shlex.split(config.extra_args) if config.extra_args else []

    async def _run(self, args: list[str]) -> str:
        cmd = [self.cmd, *args]
        self.logger.debug(f"Running: {' '.join(shlex.quote(x) for x in cmd)}")
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise TranslatorUnavailableError(
                f"translate-shell executable not found: {self.cmd}. Install it and ensure it's in PATH, "
                f"or set LANGRELAY_TRANS_CMD."
            ) from e
        stdout, stderr = await proc.communicate()
        if proc.returncode != 0:
            msg = stderr.decode(errors="replace").strip() or f"exit status {proc.returncode}"
            raise TranslatorError(f"translate-shell failed: {msg}")
        return stdout.decode("utf-8", errors="replace")

    async def translate(self, text: str, to_lang: str) -> str:
        output = await self._run([*self.extra_args, "-engine", self.engine, "-brief", f":{to_lang}", text])
        return output.strip()

    async def list_languages(self) -> list[str]:
        output = await self._run(["-engine", self.engine, "-list-codes"])
        return [line.strip() for line in output.splitlines() if line.strip()]
