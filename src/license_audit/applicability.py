from __future__ import annotations

from typing import Iterable

from .types_mapping import Mapping, is_applicable


def file_extension(path: str) -> str:
    """Return the dotted extension of the last path segment, or "" if it has none."""

    name = path.replace("\\", "/").rsplit("/", 1)[-1]
    dot = name.rfind(".")
    if dot == -1:
        return ""
    return name[dot:]


def evaluate_file(path: str, licenses: Iterable[str], mapping: Mapping) -> bool:
    return is_applicable(file_extension(path), licenses, mapping)
