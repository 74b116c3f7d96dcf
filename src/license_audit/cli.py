from __future__ import annotations

import json
from pathlib import Path
from typing import NoReturn, Optional

import click

from .applicability import file_extension
from .config import DEFAULT_IGNORE_FILE, DEFAULT_MAPPING_FILE, build_policy, load_mapping
from .detection import resolve_licenses
from .errors import LicenseAuditError, TraversalError
from .ignore import IgnoreMatcher
from .logging_util import setup_logging
from .reporting import FAIL_MARK, PASS_MARK, write_report
from .repository import cloned_repository, is_remote, project_name
from .types import ComplianceReport, IgnorePolicy, Mapping
from .walker import evaluate_tree


def _ignore_source(ignore_config: Optional[str]) -> tuple[Optional[Path], bool]:
    if ignore_config:
        return Path(ignore_config), True
    return DEFAULT_IGNORE_FILE, False


def _audit_directory(
    root: Path, licenses: tuple[str, ...], mapping: Mapping, policy: IgnorePolicy, project: str
) -> ComplianceReport:
    if not root.is_dir():
        raise TraversalError("Repository root is not a directory", path=str(root), operation="audit")
    detected = resolve_licenses(root, licenses)
    _, report = evaluate_tree(root, detected, mapping, policy, project=project)
    return report


def _fail(exc: LicenseAuditError) -> NoReturn:
    click.echo(f"Error: {exc.user_message()}", err=True)
    raise SystemExit(exc.exit_code)


@click.group()
def main() -> None:
    """License compliance audit CLI."""


@main.command()
@click.argument("target", type=str)
@click.option(
    "--mapping",
    "mapping_path",
    type=click.Path(dir_okay=False, path_type=str),
    help=f"Category/extension/license mapping (YAML or JSON). Defaults to ./{DEFAULT_MAPPING_FILE}.",
)
@click.option(
    "--ignore-config",
    type=click.Path(dir_okay=False, path_type=str),
    help=f"Ignore pattern document. Defaults to ./{DEFAULT_IGNORE_FILE} when present.",
)
@click.option("--ignore", "ignore_patterns", multiple=True, help="Additional ignore glob patterns.")
@click.option(
    "--license",
    "licenses",
    multiple=True,
    help="Root license identifier to audit against (skips license detection).",
)
@click.option(
    "--skip-hidden-dirs/--include-hidden-dirs",
    default=True,
    show_default=True,
    help="Leave out directories whose name starts with a dot (.git, .github, ...).",
)
@click.option(
    "--skip-root-files/--include-root-files",
    default=False,
    show_default=True,
    help="Leave out files that sit directly in the repository root (LICENSE, README, ...).",
)
@click.option(
    "--recursive-globs",
    is_flag=True,
    help="Match ignore patterns with gitignore rules (** and any-depth matching).",
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["text", "json", "markdown", "md", "html"], case_sensitive=False),
    default="text",
    show_default=True,
    help="Output format for the report.",
)
@click.option(
    "--output",
    type=click.Path(dir_okay=False, writable=True, path_type=str),
    help="Write the report to a file instead of stdout.",
)
@click.option(
    "--fail-under",
    type=click.FloatRange(0, 100),
    help="Exit non-zero when the compliance score falls below the threshold (0-100).",
)
@click.option("-v", "--verbose", count=True, help="Increase log verbosity (-v info, -vv debug).")
def audit(
    target: str,
    mapping_path: Optional[str],
    ignore_config: Optional[str],
    ignore_patterns: tuple[str, ...],
    licenses: tuple[str, ...],
    skip_hidden_dirs: bool,
    skip_root_files: bool,
    recursive_globs: bool,
    fmt: str,
    output: Optional[str],
    fail_under: Optional[float],
    verbose: int,
) -> None:
    """Audit TARGET (a local directory or a git URL) for per-file license compliance."""
    setup_logging(verbose)
    ignore_path, ignore_required = _ignore_source(ignore_config)

    try:
        mapping = load_mapping(Path(mapping_path) if mapping_path else DEFAULT_MAPPING_FILE)
        policy = build_policy(
            ignore_path,
            extra_patterns=ignore_patterns,
            skip_hidden_dirs=skip_hidden_dirs,
            skip_root_files=skip_root_files,
            recursive_globs=recursive_globs,
            require_ignore_config=ignore_required,
        )
        if is_remote(target):
            with cloned_repository(target) as checkout:
                report = _audit_directory(checkout, licenses, mapping, policy, project_name(target))
        else:
            root = Path(target)
            report = _audit_directory(root, licenses, mapping, policy, root.resolve().name)
    except LicenseAuditError as exc:
        _fail(exc)

    rendered = write_report(report, fmt, Path(output) if output else None, policy)
    if not output:
        click.echo(rendered)

    if fail_under is not None and report.score < fail_under:
        raise SystemExit(1)


@main.command("check-ignore")
@click.argument("paths", nargs=-1, required=True)
@click.option(
    "--ignore-config",
    type=click.Path(dir_okay=False, path_type=str),
    help=f"Ignore pattern document. Defaults to ./{DEFAULT_IGNORE_FILE} when present.",
)
@click.option("--ignore", "ignore_patterns", multiple=True, help="Additional ignore glob patterns.")
@click.option("--recursive-globs", is_flag=True, help="Match ignore patterns with gitignore rules.")
def check_ignore(
    paths: tuple[str, ...], ignore_config: Optional[str], ignore_patterns: tuple[str, ...], recursive_globs: bool
) -> None:
    """Show which relative PATHS the ignore patterns would exclude (suffix directories with /)."""
    setup_logging()
    ignore_path, ignore_required = _ignore_source(ignore_config)
    try:
        policy = build_policy(
            ignore_path,
            extra_patterns=ignore_patterns,
            recursive_globs=recursive_globs,
            require_ignore_config=ignore_required,
        )
    except LicenseAuditError as exc:
        _fail(exc)

    matcher = IgnoreMatcher.from_policy(policy)
    for path in paths:
        is_dir = path.endswith("/")
        pattern = matcher.match(path.rstrip("/") or path, is_dir=is_dir)
        if pattern is None:
            click.echo(f"{path}: kept")
        else:
            click.echo(f"{path}: ignored by {pattern!r}")


@main.command("mapping")
@click.option(
    "--mapping",
    "mapping_path",
    type=click.Path(dir_okay=False, path_type=str),
    help=f"Mapping file to validate and print. Defaults to ./{DEFAULT_MAPPING_FILE}.",
)
def show_mapping(mapping_path: Optional[str]) -> None:
    """Validate the mapping document and print it as normalized JSON."""
    try:
        mapping = load_mapping(Path(mapping_path) if mapping_path else DEFAULT_MAPPING_FILE)
    except LicenseAuditError as exc:
        _fail(exc)
    click.echo(json.dumps(mapping.as_dict(), indent=2))


@main.command()
@click.argument("path")
@click.option("--license", "licenses", multiple=True, required=True, help="Root license identifier.")
@click.option(
    "--mapping",
    "mapping_path",
    type=click.Path(dir_okay=False, path_type=str),
    help=f"Mapping file. Defaults to ./{DEFAULT_MAPPING_FILE}.",
)
def explain(path: str, licenses: tuple[str, ...], mapping_path: Optional[str]) -> None:
    """Explain the verdict for a single relative PATH under the given licenses."""
    try:
        mapping = load_mapping(Path(mapping_path) if mapping_path else DEFAULT_MAPPING_FILE)
    except LicenseAuditError as exc:
        _fail(exc)

    extension = file_extension(path)
    categories = mapping.matching_categories(extension, licenses)
    click.echo(f"Extension: {extension or '(none)'}")
    click.echo(f"Licenses: {', '.join(sorted(set(licenses)))}")
    if categories:
        click.echo(f"{path}: {PASS_MARK} allowed by {', '.join(categories)}")
    else:
        click.echo(f"{path}: {FAIL_MARK} no category admits this extension under these licenses")


if __name__ == "__main__":
    main()
