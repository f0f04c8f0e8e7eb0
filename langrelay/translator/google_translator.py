# SPDX-FileCopyrightText: 2025 RealTimeX
# SPDX-License-Identifier: MPL-2.0

from dataclasses import dataclass

import httpx

from langrelay.translator.base import Translator, TranslatorConfig, TranslatorError
from langrelay.translator.languages import GOOGLE_LANGUAGES

GOOGLE_TRANSLATE_URL = "https://translate.googleapis.com/translate_a/single"


@dataclass(kw_only=True)
class GoogleTranslatorConfig(TranslatorConfig):
    base_url: str = GOOGLE_TRANSLATE_URL
    timeout: int = 60  # seconds (httpx read timeout)
    concurrent: int = 10
    system_proxy_enable: bool = False


class GoogleTranslator(Translator):
    """Translates through the public Google Translate web endpoint."""

    def __init__(self, config: GoogleTranslatorConfig, client: httpx.AsyncClient | None = None):
        super().__init__(config=config)
        self.base_url = config.base_url
        self.timeout = httpx.Timeout(connect=5, read=config.timeout, write=30, pool=None)
        self._owns_client = client is None
        if client is None:
            max_concurrent = max(config.concurrent, 1)
            limits = httpx.Limits(
                max_connections=max_concurrent * 2,
                max_keepalive_connections=max_concurrent,
            )
            client = httpx.AsyncClient(trust_env=config.system_proxy_enable, limits=limits, timeout=self.timeout)
        self.client = client

    @staticmethod
    def _parse_response(data) -> str:
        # [[["translated", "original", ...], ...], ...]
        segments = data[0] or []
        return "".join(seg[0] for seg in segments if seg and seg[0])

    async def translate(self, text: str, to_lang: str) -> str:
        params = {
            "client": "gtx",
            "sl": "auto",
            "tl": to_lang,
            "dt": "t",
            "q": text,
        }
        try:
            response = await self.client.get(self.base_url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return self._parse_response(response.json())
        except httpx.HTTPStatusError as e:
            raise TranslatorError(
                f"HTTP status error: {e.response.status_code} - {e.response.text[:200]}"
            ) from e
        except httpx.RequestError as e:
            raise TranslatorError(f"Request error: {e!r}") from e
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise TranslatorError(f"Response format error: {e!r}") from e

    async def list_languages(self) -> list[str]:
        return list(GOOGLE_LANGUAGES)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()
