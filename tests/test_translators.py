from __future__ import annotations

import json
import os
import stat
import tempfile
import unittest
from pathlib import Path
from unittest import mock

import httpx

from langrelay.translator import build_translator
from langrelay.translator.base import TranslatorError, TranslatorUnavailableError
from langrelay.translator.google_translator import GoogleTranslator, GoogleTranslatorConfig
from langrelay.translator.languages import GOOGLE_LANGUAGES
from langrelay.translator.shell_translator import ShellTranslator, ShellTranslatorConfig

from tests.fakes import QUIET_LOGGER

FAKE_TRANS = """#!/bin/sh
if [ "$3" = "-list-codes" ]; then
    printf 'fr\\n\\nde\\n  ja  \\n'
    exit 0
fi
if [ "$5" = "explode" ]; then
    echo "engine refused" >&2
    exit 3
fi
printf '%s via %s %s\\n' "$5" "$2" "$4"
"""


def make_google(handler) -> GoogleTranslator:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GoogleTranslator(GoogleTranslatorConfig(logger=QUIET_LOGGER), client=client)


class GoogleTranslatorTests(unittest.IsolatedAsyncioTestCase):
    async def test_translate_joins_segments(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            body = [[["Bonjour ", "Hello ", None], ["le monde", "world", None]], None, "en"]
            return httpx.Response(200, content=json.dumps(body))

        translator = make_google(handler)
        async with translator:
            self.assertEqual(await translator.translate("Hello world", "fr"), "Bonjour le monde")
        await translator.client.aclose()

        params = seen[0].url.params
        self.assertEqual(params["client"], "gtx")
        self.assertEqual(params["sl"], "auto")
        self.assertEqual(params["tl"], "fr")
        self.assertEqual(params["q"], "Hello world")

    async def test_empty_payload_gives_empty_text(self) -> None:
        translator = make_google(lambda request: httpx.Response(200, json=[None]))
        self.assertEqual(await translator.translate("Hello", "de"), "")
        await translator.client.aclose()

    async def test_http_error_is_wrapped(self) -> None:
        translator = make_google(lambda request: httpx.Response(500, text="backend error"))
        with self.assertRaises(TranslatorError) as ctx:
            await translator.translate("Hello", "de")
        self.assertIn("500", str(ctx.exception))
        await translator.client.aclose()

    async def test_malformed_body_is_wrapped(self) -> None:
        translator = make_google(lambda request: httpx.Response(200, text="<html>"))
        with self.assertRaises(TranslatorError):
            await translator.translate("Hello", "de")
        await translator.client.aclose()

    async def test_connection_error_is_wrapped(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        translator = make_google(handler)
        with self.assertRaises(TranslatorError):
            await translator.translate("Hello", "de")
        await translator.client.aclose()

    async def test_language_list_has_no_auto_detect(self) -> None:
        translator = make_google(lambda request: httpx.Response(200, json=[]))
        languages = await translator.list_languages()
        await translator.client.aclose()
        self.assertNotIn("auto", languages)
        self.assertEqual(set(languages), set(GOOGLE_LANGUAGES))
        self.assertIn("ja", languages)


@unittest.skipIf(os.name == "nt", "needs a POSIX shell")
class ShellTranslatorTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.script = Path(self._tmp.name) / "fake-trans"
        self.script.write_text(FAKE_TRANS, encoding="utf-8")
        self.script.chmod(self.script.stat().st_mode | stat.S_IXUSR)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def make(self, **kwargs) -> ShellTranslator:
        return ShellTranslator(ShellTranslatorConfig(logger=QUIET_LOGGER, cmd=str(self.script), **kwargs))

    async def test_translate_passes_engine_and_target(self) -> None:
        result = await self.make(engine="bing").translate("Hello", "fr")
        self.assertEqual(result, "Hello via bing :fr")

    async def test_list_languages_skips_blank_lines(self) -> None:
        self.assertEqual(await self.make().list_languages(), ["fr", "de", "ja"])

    async def test_non_zero_exit_is_translator_error(self) -> None:
        with self.assertRaises(TranslatorError) as ctx:
            await self.make().translate("explode", "fr")
        self.assertNotIsInstance(ctx.exception, TranslatorUnavailableError)
        self.assertIn("engine refused", str(ctx.exception))

    async def test_missing_executable_is_unavailable(self) -> None:
        translator = ShellTranslator(
            ShellTranslatorConfig(logger=QUIET_LOGGER, cmd=str(Path(self._tmp.name) / "no-such-trans"))
        )
        with self.assertRaises(TranslatorUnavailableError):
            await translator.translate("Hello", "fr")

    def test_command_from_environment(self) -> None:
        with mock.patch.dict(os.environ, {"LANGRELAY_TRANS_CMD": "/opt/bin/trans"}):
            self.assertEqual(ShellTranslator(ShellTranslatorConfig()).cmd, "/opt/bin/trans")
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertEqual(ShellTranslator(ShellTranslatorConfig()).cmd, "trans")

    def test_extra_args_are_split_like_a_shell(self) -> None:
        translator = self.make(extra_args="-proxy 'http://h:1' -no-warn")
        self.assertEqual(translator.extra_args, ["-proxy", "http://h:1", "-no-warn"])


class BuildTranslatorTests(unittest.IsolatedAsyncioTestCase):
    async def test_engine_selection(self) -> None:
        google = build_translator("google-api", concurrent=4)
        self.assertIsInstance(google, GoogleTranslator)
        await google.aclose()
        shell = build_translator("translate-shell", engine="yandex", extra_args="-no-ansi")
        self.assertIsInstance(shell, ShellTranslator)
        self.assertEqual(shell.engine, "yandex")

    def test_unknown_engine(self) -> None:
        with self.assertRaises(ValueError):
            build_translator("deepl")


if __name__ == "__main__":
    unittest.main()
