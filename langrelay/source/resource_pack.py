# SPDX-FileCopyrightText: 2025 RealTimeX
# SPDX-License-Identifier: MPL-2.0

import logging
import shutil
from pathlib import Path
from typing import Iterable

from langrelay.logger import global_logger
from langrelay.utils.json_utils import write_json

RESOURCE_DIR = "output_resource_pack"


def pack_metadata(version: str, version_info: dict) -> dict:
    asset_index = version_info.get("assetIndex") or {}
    return {
        "pack": {
            "pack_format": asset_index.get("id") or "1",
            "description": f"Translated Minecraft {version}",
        }
    }


def build_resource_pack(
        extracted_dir: str | Path,
        pack_dir: str | Path,
        version: str,
        version_info: dict,
        logger: logging.Logger = global_logger,
) -> Path:
    """Copy the extracted assets into the pack directory and write pack.mcmeta."""
    pack_dir = Path(pack_dir)
    pack_dir.mkdir(parents=True, exist_ok=True)
    assets = Path(extracted_dir) / "assets"
    if assets.is_dir():
        shutil.copytree(assets, pack_dir / "assets", dirs_exist_ok=True)
    write_json(pack_dir / "pack.mcmeta", pack_metadata(version, version_info))
    logger.info(f"Resource pack prepared in {pack_dir}")
    return pack_dir


def cleanup(paths: Iterable[str | Path]) -> None:
    for p in map(Path, paths):
        if p.is_dir():
            shutil.rmtree(p)
        elif p.exists():
            p.unlink()
