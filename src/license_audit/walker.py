from __future__ import annotations

import logging
import os
import stat
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

from .applicability import evaluate_file
from .errors import DetectionError, TraversalError
from .ignore import IgnoreMatcher
from .types_mapping import Mapping, license_tuple
from .types_policy import DEFAULT_POLICY, IgnorePolicy
from .types_report import ComplianceReport, FileVerdict, freeze_verdicts

logger = logging.getLogger(__name__)


def license_set(licenses: Iterable[str]) -> tuple[str, ...]:
    """Deduplicate license identifiers, dropping empty entries.

    Identifiers are kept verbatim; matching against the mapping is exact.
    """

    return tuple(sorted({entry for entry in license_tuple(licenses) if entry}))


def _as_policy(policy: Union[IgnorePolicy, Iterable[str], None]) -> IgnorePolicy:
    if policy is None:
        return DEFAULT_POLICY
    if isinstance(policy, IgnorePolicy):
        return policy
    if isinstance(policy, str):
        return IgnorePolicy(patterns=(policy,))
    return IgnorePolicy(patterns=tuple(policy))


def _scan(directory: str) -> list[os.DirEntry]:
    try:
        with os.scandir(directory) as entries:
            return sorted(entries, key=lambda entry: entry.name)
    except OSError as exc:
        raise TraversalError(
            f"Unable to list directory: {exc.strerror or exc}", path=directory, operation="scandir"
        ) from exc


def _walk(
    directory: str, prefix: str, policy: IgnorePolicy, matcher: IgnoreMatcher
) -> Iterator[str]:
    for entry in _scan(directory):
        relative = prefix + entry.name
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
        except OSError as exc:
            raise TraversalError(
                f"Unable to inspect entry: {exc.strerror or exc}", path=entry.path, operation="lstat"
            ) from exc

        if is_dir:
            if policy.skip_hidden_dirs and entry.name.startswith("."):
                logger.debug("Skipping hidden directory %s", relative)
                continue
            pattern = matcher.match(relative, is_dir=True)
            if pattern is not None:
                logger.debug("Pruning %s (matched %r)", relative, pattern)
                continue
            yield from _walk(entry.path, relative + "/", policy, matcher)
            continue

        if policy.skip_root_files and not prefix:
            logger.debug("Skipping root file %s", relative)
            continue
        pattern = matcher.match(relative)
        if pattern is not None:
            logger.debug("Ignoring %s (matched %r)", relative, pattern)
            continue

        try:
            mode = os.stat(entry.path).st_mode
        except OSError as exc:
            raise TraversalError(
                f"Unable to stat file: {exc.strerror or exc}", path=entry.path, operation="stat"
            ) from exc
        if stat.S_ISREG(mode):
            yield relative


def walk_files(
    root: Union[str, Path], policy: Union[IgnorePolicy, Iterable[str], None] = None
) -> Iterator[str]:
    """Yield the forward-slash relative path of every audited regular file under ``root``.

    Directories matched by the policy are pruned without being listed.
    Symlinks to directories are never followed. Any OS error raises
    TraversalError.
    """

    policy = _as_policy(policy)
    root_path = Path(root)
    if not root_path.is_dir():
        raise TraversalError("Repository root is not a directory", path=str(root_path), operation="walk")
    yield from _walk(str(root_path), "", policy, IgnoreMatcher.from_policy(policy))


def evaluate_tree(
    root: Union[str, Path],
    licenses: Iterable[str],
    mapping: Mapping,
    policy: Union[IgnorePolicy, Iterable[str], None] = None,
    *,
    project: Optional[str] = None,
) -> tuple[FileVerdict, ComplianceReport]:
    licenses = license_set(licenses)
    if not licenses:
        raise DetectionError("No root license available; cannot evaluate compliance", path=str(root))

    verdicts: dict[str, bool] = {}
    for relative in walk_files(root, policy):
        verdicts[relative] = evaluate_file(relative, licenses, mapping)

    frozen = freeze_verdicts(verdicts)
    report = ComplianceReport(verdicts=frozen, licenses=licenses, project=project)
    logger.info(
        "Evaluated %d files under %s: %d compliant (%.2f%%)",
        report.total_files,
        root,
        report.compliant_files,
        report.score,
    )
    return frozen, report
