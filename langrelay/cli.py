# SPDX-FileCopyrightText: 2025 RealTimeX
# SPDX-License-Identifier: MPL-2.0
import argparse
import asyncio
import json
import os
import signal
import sys
from dataclasses import replace
from pathlib import Path

from langrelay.logger import global_logger, set_log_level
from langrelay.pipeline import (
    CancelToken,
    CheckpointError,
    CheckpointStore,
    InvalidDocumentError,
    RetryExhaustedError,
    RunConfig,
    TranslationRun,
    resolve_resume,
    validate_checkpoint,
)
from langrelay.pipeline.checkpoint import DEFAULT_CHECKPOINT_FILE
from langrelay.source import (
    InvalidVersionError,
    SourceError,
    build_resource_pack,
    cleanup,
    download_client_jar,
    extract_lang_file,
    fetch_manifest,
    resolve_version,
)
from langrelay.source.minecraft import OUTPUT_DIR, OUTPUT_JAR, TARGET_FILE, make_client
from langrelay.source.resource_pack import RESOURCE_DIR
from langrelay.translator import TranslatorError, TranslatorUnavailableError, build_translator, default_params
from langrelay.utils.dotenv import load_env_file
from langrelay.utils.i18n import t
from langrelay.utils.json_utils import duplicate_leaf_paths, read_json, write_json

# Exit codes for orchestration environments
EC_OK = 0
EC_INVALID_INPUT = 10
EC_DEP_MISSING = 20
EC_TRANSLATE_ERROR = 30
EC_EXPORT_ERROR = 40
EC_CHECKPOINT_ERROR = 50
EC_INTERRUPTED = 130


def _build_run_config(ns: argparse.Namespace) -> RunConfig:
    # pull defaults from env if not provided
    trans_engine = ns.trans_engine or os.getenv("LANGRELAY_TRANS_ENGINE") or default_params["trans_engine"]
    return RunConfig(
        repeat_passes=ns.repeat,
        worker_count=ns.threads,
        start_delay_ms=ns.start_delay,
        retry_delay_ms=ns.retry_delay,
        max_retries=ns.max_retries,
        retry_backoff=ns.retry_backoff,
        trans_engine=trans_engine,
        engine=ns.engine,
        extra_trans_args=ns.extra_trans_args,
        source_language=ns.source_language,
        mc_version=ns.mc_version,
    )


def _install_interrupt_handler(cancel: CancelToken, lang: str):
    def on_interrupt(*_):
        if not cancel.cancelled:
            print("\n" + t("interrupt_notice", lang=lang), flush=True)
        cancel.cancel()

    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, on_interrupt)
        return lambda: loop.remove_signal_handler(signal.SIGINT)
    except (NotImplementedError, RuntimeError):
        # Windows event loops have no add_signal_handler
        previous = signal.signal(signal.SIGINT, lambda *_: loop.call_soon_threadsafe(on_interrupt))
        return lambda: signal.signal(signal.SIGINT, previous)


async def _prepare_minecraft_source(config: RunConfig, lang: str) -> tuple[RunConfig, dict, Path]:
    async with make_client() as client:
        manifest = await fetch_manifest(client)
        entry = resolve_version(manifest, config.mc_version)
        jar_path, version_info = await download_client_jar(client, entry, OUTPUT_JAR)
    lang_path = extract_lang_file(jar_path, OUTPUT_DIR, TARGET_FILE)
    if lang_path is None:
        raise SourceError(t("lang_file_missing", lang=lang, target=TARGET_FILE, path=jar_path))
    document = read_json(lang_path)
    build_resource_pack(OUTPUT_DIR, RESOURCE_DIR, entry["id"], version_info)
    return replace(config, mc_version=entry["id"]), document, Path(RESOURCE_DIR) / TARGET_FILE


async def run_async(ns: argparse.Namespace) -> int:
    lang = ns.lang
    store = CheckpointStore(ns.checkpoint)
    try:
        config, record = resolve_resume(_build_run_config(ns), store, ns.resume)
    except CheckpointError as e:
        print(t("checkpoint_failed", lang=lang, error=str(e)))
        return EC_CHECKPOINT_ERROR
    except ValueError as e:
        print(str(e))
        return EC_INVALID_INPUT
    if record is not None:
        print(t("resuming", lang=lang))
    elif ns.resume:
        print(t("resume_missing", lang=lang, path=str(store.path)))

    # Source document
    try:
        if ns.input:
            input_path = Path(ns.input)
            if not input_path.is_file():
                print(t("file_not_found", lang=lang, path=str(input_path)))
                return EC_INVALID_INPUT
            try:
                source_document = read_json(input_path)
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                print(t("invalid_json", lang=lang, path=str(input_path), error=str(e)))
                return EC_INVALID_INPUT
            output_path = Path(ns.output) if ns.output else input_path.with_name(f"{input_path.stem}_translated.json")
        else:
            if record is None:
                cleanup([OUTPUT_JAR, OUTPUT_DIR, RESOURCE_DIR])
            config, source_document, output_path = await _prepare_minecraft_source(config, lang)
            if ns.output:
                output_path = Path(ns.output)
    except InvalidVersionError as e:
        print(t("invalid_version", lang=lang, version=e.version))
        return EC_INVALID_INPUT
    except SourceError as e:
        print(t("source_failed", lang=lang, error=str(e)))
        return EC_INVALID_INPUT

    if isinstance(source_document, dict):
        print(t("lang_file_entries", lang=lang, count=len(source_document)))
    duplicates = duplicate_leaf_paths(source_document)
    if duplicates:
        print(t("invalid_document", lang=lang, error=f"string leaves share the path(s) {duplicates[:5]}"))
        return EC_INVALID_INPUT

    document, progress = source_document, {}
    if record is not None:
        try:
            validate_checkpoint(record, source_document, config.repeat_passes)
        except CheckpointError as e:
            print(t("checkpoint_failed", lang=lang, error=str(e)))
            return EC_CHECKPOINT_ERROR
        document, progress = record.document, record.progress

    try:
        translator = build_translator(
            config.trans_engine,
            engine=config.engine,
            extra_args=config.extra_trans_args,
            concurrent=config.worker_count or 10,
        )
    except ValueError as e:
        print(str(e))
        return EC_INVALID_INPUT
    async with translator:
        try:
            if not config.languages:
                languages = await translator.list_languages()
                if not languages:
                    print(t("no_languages", lang=lang))
                    return EC_TRANSLATE_ERROR
                config = replace(config, languages=tuple(languages))
            print(t("languages_loaded", lang=lang, count=len(config.languages)))

            cancel = CancelToken()
            restore_handler = _install_interrupt_handler(cancel, lang)
            try:
                result = await TranslationRun(config, translator, store, cancel=cancel).run(document, progress)
            finally:
                restore_handler()
        except TranslatorUnavailableError as e:
            print(t("missing_dependency", lang=lang, missing=str(e)))
            return EC_DEP_MISSING
        except CheckpointError as e:
            print(t("checkpoint_failed", lang=lang, error=str(e)))
            return EC_CHECKPOINT_ERROR
        except (TranslatorError, RetryExhaustedError) as e:
            print(t("translate_failed", lang=lang, error=str(e)))
            return EC_TRANSLATE_ERROR
        except InvalidDocumentError as e:
            print(t("invalid_document", lang=lang, error=str(e)))
            return EC_INVALID_INPUT

    if result.interrupted:
        print(t("interrupted", lang=lang, path=str(store.path)))
        return EC_INTERRUPTED

    try:
        write_json(output_path, result.document)
    except OSError as e:
        print(t("export_failed", lang=lang, error=str(e)))
        return EC_EXPORT_ERROR
    store.clear()
    print(t("generated", lang=lang, path=str(output_path.resolve())))
    print(t("all_done", lang=lang))
    return EC_OK


def _add_run_subparser(subparsers: argparse._SubParsersAction):
    sp = subparsers.add_parser("run", help="Run the telephone-game translation")
    sp.add_argument("--mc-version", help="Minecraft version (default: latest release)")
    sp.add_argument("--input", help="Translate a local JSON file instead of the Minecraft lang file")
    sp.add_argument("--output", help="Where to write the translated JSON")
    sp.add_argument("--repeat", type=int, default=default_params["repeat"], help="Number of translation passes")
    sp.add_argument("--threads", type=int, default=default_params["threads"],
                    help="Concurrent workers (0 = unlimited)")
    sp.add_argument("--start-delay", type=int, default=default_params["start_delay"],
                    help="Start delay per worker in ms (default: repeat * 50)")
    sp.add_argument("--retry-delay", type=int, default=default_params["retry_delay"],
                    help="Retry delay for failed translations (ms)")
    sp.add_argument("--max-retries", type=int, default=default_params["max_retries"],
                    help="Give up a pass after this many retries (0 = retry until interrupted)")
    sp.add_argument("--retry-backoff", action="store_true",
                    help="Double the retry delay after each failure, capped at 32x --retry-delay")
    sp.add_argument("--trans-engine", choices=["google-api", "translate-shell"], default=None,
                    help="Translation engine (or env LANGRELAY_TRANS_ENGINE). Default: google-api")
    sp.add_argument("--extra-trans-args", default=default_params["extra_trans_args"],
                    help="Extra arguments passed to trans when using translate-shell")
    sp.add_argument("--engine", default=default_params["engine"],
                    help="Engine passed to trans via -engine when using translate-shell")
    sp.add_argument("--source-language", default=default_params["source_language"],
                    help="Language the final pass translates back into")
    sp.add_argument("--resume", action="store_true", help="Resume from last saved progress")
    sp.add_argument("--checkpoint", default=DEFAULT_CHECKPOINT_FILE, help="Checkpoint file path")
    sp.set_defaults(cmd="run")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="langrelay: telephone-game translation of JSON documents",
        epilog=(
            "Examples:\n"
            "  langrelay run --repeat 20 --threads 10\n"
            "  langrelay run --resume\n"
            "  langrelay run --input strings.json --trans-engine translate-shell --engine bing\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="cmd")
    _add_run_subparser(subparsers)

    ver = subparsers.add_parser("version", help="Show version")
    ver.set_defaults(cmd="version")

    parser.add_argument(
        "--env-file", help="Load environment variables from file (default: ./.env)", default=None
    )
    parser.add_argument(
        "--no-env", action="store_true", help="Do not auto-load .env from current directory"
    )
    parser.add_argument(
        "--lang", choices=["en", "zh"], default=os.getenv("LANGRELAY_LANG", "en"),
        help="Language for CLI messages (default: en)"
    )
    parser.add_argument(
        "--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], default="INFO", help="Logging level"
    )
    return parser


def main():
    parser = build_parser()

    # No-arg hint
    if len(sys.argv) == 1:
        parser.print_help()
        sys.exit(EC_OK)

    args = parser.parse_args()

    if not args.no_env:
        env_path_used, loaded_keys = load_env_file(args.env_file)
        if env_path_used:
            global_logger.debug(f"Loaded {len(loaded_keys)} variables from {env_path_used}")
    set_log_level(args.log_level)

    if args.cmd == "version":
        from langrelay import __version__
        print(__version__)
        return

    if args.cmd == "run":
        try:
            code = asyncio.run(run_async(args))
        except KeyboardInterrupt:
            # Ctrl+C outside the translation phase; no new progress exists
            print("\n" + t("interrupted_setup", lang=args.lang))
            code = EC_INTERRUPTED
        sys.exit(code)

    # Unknown / fallthrough
    parser.print_help()
    sys.exit(1)


if __name__ == "__main__":
    main()
