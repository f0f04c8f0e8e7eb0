# SPDX-FileCopyrightText: 2025 RealTimeX
# SPDX-License-Identifier: MPL-2.0

import logging
import zipfile
from pathlib import Path
from typing import Any

import httpx

from langrelay.logger import global_logger

VERSION_MANIFEST = "https://piston-meta.mojang.com/mc/game/version_manifest_v2.json"
OUTPUT_JAR = "client.jar"
OUTPUT_DIR = "assets_extracted"
TARGET_FILE = "assets/minecraft/lang/en_us.json"

timeout = httpx.Timeout(
    connect=10.0,  # Connection timeout
    read=300.0,  # The client jar is tens of MB
    write=30.0,
    pool=10.0
)


class SourceError(RuntimeError):
    """The source document could not be fetched or extracted."""


class InvalidVersionError(SourceError):
    def __init__(self, version: str):
        super().__init__(f"Invalid version ID: {version}")
        self.version = version


def make_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=timeout, follow_redirects=True)


async def _get_json(client: httpx.AsyncClient, url: str) -> Any:
    try:
        response = await client.get(url)
        response.raise_for_status()
        return response.json()
    except httpx.HTTPStatusError as e:
        raise SourceError(f"HTTP error: {e.response.status_code} - {e.request.url}") from e
    except httpx.RequestError as e:
        raise SourceError(f"Error occurred while requesting {url}: {e}") from e
    except ValueError as e:
        raise SourceError(f"Response from {url} is not valid JSON") from e


async def fetch_manifest(client: httpx.AsyncClient, url: str = VERSION_MANIFEST) -> dict:
    return await _get_json(client, url)


def resolve_version(manifest: dict, version: str | None = None) -> dict:
    """Return the manifest entry for `version`, defaulting to the latest release."""
    version = version or manifest.get("latest", {}).get("release")
    for entry in manifest.get("versions", []):
        if entry.get("id") == version:
            return entry
    raise InvalidVersionError(str(version))


async def download_client_jar(
        client: httpx.AsyncClient,
        entry: dict,
        dest: str | Path = OUTPUT_JAR,
        logger: logging.Logger = global_logger,
) -> tuple[Path, dict]:
    version_info = await _get_json(client, entry["url"])
    try:
        client_url = version_info["downloads"]["client"]["url"]
    except (KeyError, TypeError) as e:
        raise SourceError(f"Version {entry.get('id')} has no client download") from e

    logger.info(f"Downloading Minecraft {entry.get('id')} client jar...")
    dest = Path(dest)
    try:
        async with client.stream("GET", client_url) as response:
            response.raise_for_status()
            with open(dest, "wb") as f:
                async for chunk in response.aiter_bytes():
                    f.write(chunk)
    except httpx.HTTPStatusError as e:
        raise SourceError(f"HTTP error: {e.response.status_code} - {e.request.url}") from e
    except httpx.RequestError as e:
        raise SourceError(f"Error occurred while downloading client jar: {e}") from e
    logger.info(f"Saved as {dest}")
    return dest, version_info


def extract_lang_file(
        jar_path: str | Path,
        output_dir: str | Path = OUTPUT_DIR,
        target: str = TARGET_FILE,
        logger: logging.Logger = global_logger,
) -> Path | None:
    """Extract a single member of the jar. Returns None when the member is absent."""
    try:
        with zipfile.ZipFile(jar_path) as zf:
            try:
                data = zf.read(target)
            except KeyError:
                logger.error(f"{target} not found in {jar_path}")
                return None
    except zipfile.BadZipFile as e:
        raise SourceError(f"{jar_path} is not a valid jar/zip archive") from e

    full_path = Path(output_dir) / target
    full_path.parent.mkdir(parents=True, exist_ok=True)
    full_path.write_bytes(data)
    logger.info(f"Extracted {target} to {full_path}")
    return full_path
