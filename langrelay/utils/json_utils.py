# SPDX-FileCopyrightText: 2025 RealTimeX
# SPDX-License-Identifier: MPL-2.0
import json
from pathlib import Path
from typing import Any, Iterator


def child_path(parent: str, key: str | int) -> str:
    """Build the address of a child node: `parent.key` for objects, `parent[i]` for arrays."""
    if isinstance(key, int):
        return f"{parent}[{key}]"
    return f"{parent}.{key}" if parent else key


def json_shape(node: Any) -> Any:
    """
    Reduce a JSON tree to its structure: key order, array lengths and node types,
    with leaf values dropped. Two documents have the same shape iff the results compare equal.
    """
    if isinstance(node, dict):
        return "object", [(k, json_shape(v)) for k, v in node.items()]
    if isinstance(node, list):
        return "array", [json_shape(v) for v in node]
    if isinstance(node, bool):
        return "bool"
    if isinstance(node, (int, float)):
        return "number"
    if isinstance(node, str):
        return "string"
    if node is None:
        return "null"
    raise TypeError(f"Unsupported JSON node type: {type(node).__name__}")


def iter_string_leaves(node: Any, path: str = "") -> Iterator[tuple[str, str]]:
    """Yield (path, value) for every string leaf, depth first in document order."""
    if isinstance(node, dict):
        for k, v in node.items():
            yield from iter_string_leaves(v, child_path(path, k))
    elif isinstance(node, list):
        for i, v in enumerate(node):
            yield from iter_string_leaves(v, child_path(path, i))
    elif isinstance(node, str):
        yield path, node


def duplicate_leaf_paths(node: Any) -> list[str]:
    """Paths shared by more than one string leaf, e.g. key "a.b" next to {"a": {"b": ...}}."""
    seen: set[str] = set()
    duplicates: list[str] = []
    for path, _ in iter_string_leaves(node):
        if path in seen and path not in duplicates:
            duplicates.append(path)
        seen.add(path)
    return duplicates


def read_json(path: str | Path) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def write_json(path: str | Path, content: Any) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(content, ensure_ascii=False, indent=4), encoding="utf-8")
