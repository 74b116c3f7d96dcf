from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Optional

import yaml

from .errors import ConfigurationError
from .types_mapping import CATEGORY_FIELDS, Mapping
from .types_policy import IgnorePolicy

DEFAULT_MAPPING_FILE = Path("mapping.json")
DEFAULT_IGNORE_FILE = Path(".licenseignore.yml")


def _load_yaml(path: Path, operation: str) -> Any:
    # JSON is a subset of YAML, so mapping.json and mapping.yml load the same way
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ConfigurationError("Configuration file not found", path=str(path), operation=operation) from exc
    except OSError as exc:
        raise ConfigurationError(
            f"Unable to read configuration: {exc.strerror or exc}", path=str(path), operation=operation
        ) from exc
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(
            f"Unable to parse configuration: {exc}", path=str(path), operation=operation
        ) from exc


def _string_list(value: Any, where: str, path: Path, operation: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigurationError(f"{where} must be a list of strings", path=str(path), operation=operation)
    return value


def parse_mapping(raw: Any, path: Path = DEFAULT_MAPPING_FILE) -> Mapping:
    operation = "load_mapping"
    if not isinstance(raw, dict):
        raise ConfigurationError("Mapping must be an object of categories", path=str(path), operation=operation)

    expected = [key for key, _ in CATEGORY_FIELDS]
    missing = [key for key in expected if key not in raw]
    unknown = sorted(set(raw) - set(expected))
    if missing:
        raise ConfigurationError(
            f"Mapping is missing categories: {', '.join(missing)}", path=str(path), operation=operation
        )
    if unknown:
        raise ConfigurationError(
            f"Mapping has unknown categories: {', '.join(unknown)}", path=str(path), operation=operation
        )

    sections = {}
    for key in expected:
        section = raw[key]
        if not isinstance(section, dict):
            raise ConfigurationError(f"Category '{key}' must be an object", path=str(path), operation=operation)
        sections[key] = {
            "extensions": _string_list(section.get("extensions"), f"{key}.extensions", path, operation),
            "licenses": _string_list(section.get("licenses"), f"{key}.licenses", path, operation),
        }
    return Mapping.from_dict(sections)


def load_mapping(path: Path | str = DEFAULT_MAPPING_FILE) -> Mapping:
    path = Path(path)
    return parse_mapping(_load_yaml(path, "load_mapping"), path)


def load_ignore_patterns(path: Optional[Path | str], *, required: bool = False) -> tuple[str, ...]:
    """Read the ``ignore`` list of an ignore document.

    A missing file means no patterns unless ``required`` is set, which the CLI
    uses for files the user named explicitly.
    """

    if path is None:
        return ()
    path = Path(path)
    if not path.exists() and not required:
        return ()

    raw = _load_yaml(path, "load_ignore")
    if raw is None:
        return ()
    if isinstance(raw, dict):
        unknown = sorted(set(raw) - {"ignore"})
        if unknown:
            raise ConfigurationError(
                f"Ignore configuration has unknown fields: {', '.join(unknown)}",
                path=str(path),
                operation="load_ignore",
            )
        raw = raw.get("ignore") or []
    return tuple(_string_list(raw, "ignore", path, "load_ignore"))


def build_policy(
    ignore_config: Optional[Path | str] = None,
    *,
    extra_patterns: Iterable[str] = (),
    skip_hidden_dirs: bool = False,
    skip_root_files: bool = False,
    recursive_globs: bool = False,
    require_ignore_config: bool = False,
) -> IgnorePolicy:
    patterns = load_ignore_patterns(ignore_config, required=require_ignore_config)
    return IgnorePolicy(
        patterns=patterns + tuple(extra_patterns),
        skip_hidden_dirs=skip_hidden_dirs,
        skip_root_files=skip_root_files,
        recursive_globs=recursive_globs,
    )
