# SPDX-FileCopyrightText: 2025 RealTimeX
# SPDX-License-Identifier: MPL-2.0
from langrelay.translator.base import (
    Translator,
    TranslatorConfig,
    TranslatorError,
    TranslatorUnavailableError,
    TransEngineType,
)

default_params = {
    "repeat": 20,
    "threads": 10,
    "start_delay": None,
    "retry_delay": 10000,
    "max_retries": 0,
    "trans_engine": "google-api",
    "engine": "google",
    "extra_trans_args": "",
    "source_language": "en",
}


def build_translator(trans_engine: TransEngineType, *, engine: str = "google", extra_args: str = "",
                     concurrent: int = 10, logger=None) -> Translator:
    extra = {"logger": logger} if logger else {}
    if trans_engine == "translate-shell":
        from langrelay.translator.shell_translator import ShellTranslator, ShellTranslatorConfig
        return ShellTranslator(ShellTranslatorConfig(engine=engine, extra_args=extra_args, **extra))
    if trans_engine == "google-api":
        from langrelay.translator.google_translator import GoogleTranslator, GoogleTranslatorConfig
        return GoogleTranslator(GoogleTranslatorConfig(concurrent=concurrent, **extra))
    raise ValueError(f"Unsupported translation engine: {trans_engine}")


__all__ = [
    "Translator",
    "TranslatorConfig",
    "TranslatorError",
    "TranslatorUnavailableError",
    "TransEngineType",
    "build_translator",
    "default_params",
]
