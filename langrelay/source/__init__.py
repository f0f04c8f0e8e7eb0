# SPDX-FileCopyrightText: 2025 RealTimeX
# SPDX-License-Identifier: MPL-2.0
from langrelay.source.minecraft import (
    InvalidVersionError,
    SourceError,
    download_client_jar,
    extract_lang_file,
    fetch_manifest,
    resolve_version,
)
from langrelay.source.resource_pack import build_resource_pack, cleanup, pack_metadata

__all__ = [
    "InvalidVersionError",
    "SourceError",
    "download_client_jar",
    "extract_lang_file",
    "fetch_manifest",
    "resolve_version",
    "build_resource_pack",
    "cleanup",
    "pack_metadata",
]
