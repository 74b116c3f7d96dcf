"""Root-license detection for an audited repository.

Only canonical license files sitting directly in the repository root are
considered. Each file contributes at most one identifier: an explicit
``SPDX-License-Identifier`` tag when present, otherwise the anchor-phrase
entry with the most matching phrases.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from .errors import DetectionError
from .types_mapping import license_tuple

logger = logging.getLogger(__name__)

LICENSE_FILE_PREFIXES = ("license", "licence", "copying", "unlicense")

MAX_LICENSE_BYTES = 128 * 1024

SPDX_TAG_RE = re.compile(r"SPDX-License-Identifier:\s*([A-Za-z0-9.+\-]+)", re.IGNORECASE)

ANCHOR_PHRASES: List[Tuple[str, Tuple[str, ...]]] = [
    ("BSL-1.0", ("boost software license", "permission is hereby granted, free of charge")),
    ("MIT", ("permission is hereby granted, free of charge", "the software is provided \"as is\"")),
    ("Apache-2.0", ("apache license", "version 2.0, january 2004")),
    (
        "BSD-3-Clause",
        (
            "redistribution and use in source and binary forms, with or without modification",
            "neither the name of",
        ),
    ),
    (
        "BSD-2-Clause",
        ("redistribution and use in source and binary forms, with or without modification",),
    ),
    ("MPL-2.0", ("mozilla public license version 2.0",)),
    ("AGPL-3.0", ("gnu affero general public license", "version 3")),
    ("LGPL-3.0", ("gnu lesser general public license", "version 3")),
    ("LGPL-2.1", ("gnu lesser general public license", "version 2.1")),
    ("GPL-3.0", ("gnu general public license", "version 3")),
    ("GPL-2.0", ("gnu general public license", "version 2")),
    ("EPL-2.0", ("eclipse public license - v 2.0",)),
    ("ISC", ("permission to use, copy, modify, and/or distribute this software for any purpose",)),
    ("Unlicense", ("this is free and unencumbered software released into the public domain",)),
    ("CC0-1.0", ("cc0 1.0 universal",)),
    ("CC-BY-SA-4.0", ("creative commons attribution-sharealike 4.0",)),
    ("CC-BY-4.0", ("creative commons attribution 4.0",)),
]


def _normalize(text: str) -> str:
    return " ".join(text.lower().replace("“", '"').replace("”", '"').split())


def license_files(root: Path) -> list[Path]:
    return sorted(
        path
        for path in root.iterdir()
        if path.is_file() and path.name.lower().startswith(LICENSE_FILE_PREFIXES)
    )


def match_license_text(text: str) -> Optional[str]:
    """Return the strongest license identifier for one license file's text."""

    tag = SPDX_TAG_RE.search(text)
    if tag:
        return tag.group(1)

    normalized = _normalize(text)
    best: Optional[str] = None
    best_hits = 0
    for license_id, phrases in ANCHOR_PHRASES:
        if all(phrase in normalized for phrase in phrases) and len(phrases) > best_hits:
            best, best_hits = license_id, len(phrases)
    return best


def detect_root_licenses(root: Path | str) -> list[str]:
    root_path = Path(root)
    try:
        candidates = license_files(root_path)
    except OSError as exc:
        raise DetectionError(
            f"Unable to list repository root: {exc.strerror or exc}", path=str(root_path), operation="detect"
        ) from exc

    found: set[str] = set()
    for path in candidates:
        try:
            with path.open("r", encoding="utf-8", errors="ignore") as handle:
                text = handle.read(MAX_LICENSE_BYTES)
        except OSError as exc:
            raise DetectionError(
                f"Unable to read license file: {exc.strerror or exc}", path=str(path), operation="detect"
            ) from exc
        license_id = match_license_text(text)
        if license_id:
            logger.info("Detected %s in %s", license_id, path.name)
            found.add(license_id)
        else:
            logger.debug("No known license text in %s", path.name)

    if not found:
        raise DetectionError("No root licenses found", path=str(root_path), operation="detect")
    return sorted(found)


def resolve_licenses(root: Path | str, explicit: Iterable[str] = ()) -> list[str]:
    """Use ``explicit`` identifiers when given, otherwise detect them from ``root``."""

    explicit = [entry for entry in license_tuple(explicit) if entry]
    if explicit:
        return sorted(set(explicit))
    return detect_root_licenses(root)
