# SPDX-FileCopyrightText: 2025 RealTimeX
# SPDX-License-Identifier: MPL-2.0
from abc import ABC, abstractmethod
from dataclasses import dataclass
from logging import Logger
from typing import Literal

from langrelay.logger import global_logger

TransEngineType = Literal["google-api", "translate-shell"]


class TranslatorError(RuntimeError):
    """The back end failed to translate. Callers treat this as transient."""


class TranslatorUnavailableError(TranslatorError):
    """The back end cannot be used at all (e.g. executable missing)."""


@dataclass(kw_only=True)
class TranslatorConfig:
    logger: Logger = global_logger


class Translator(ABC):
    """
    A single interchangeable translation back end.
    `translate` may raise or return an empty string; both count as failure upstream.
    """

    def __init__(self, config: TranslatorConfig):
        self.config = config
        self.logger = config.logger

    @abstractmethod
    async def translate(self, text: str, to_lang: str) -> str:
        ...

    @abstractmethod
    async def list_languages(self) -> list[str]:
        ...

    async def aclose(self) -> None:
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.aclose()
