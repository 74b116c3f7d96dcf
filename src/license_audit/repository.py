from __future__ import annotations

import logging
import subprocess
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from .errors import RepositoryError

logger = logging.getLogger(__name__)

REMOTE_PREFIXES = ("http://", "https://", "ssh://", "git://", "git@", "file://")


def is_remote(target: str) -> bool:
    return target.startswith(REMOTE_PREFIXES)


def project_name(target: str) -> str:
    """Return the repository name shown in reports: ``https://host/org/repo.git`` -> ``repo``."""

    base = target.rstrip("/").replace(":", "/").rsplit("/", 1)[-1]
    return base.split(".", 1)[0] or base


@contextmanager
def cloned_repository(url: str, *, git: str = "git") -> Iterator[Path]:
    """Shallow-clone ``url`` into a temporary directory removed on every exit path."""

    with tempfile.TemporaryDirectory(prefix="license-audit-") as workdir:
        destination = Path(workdir) / (project_name(url) or "repository")
        logger.info("Cloning %s into %s", url, destination)
        try:
            subprocess.run(
                [git, "clone", "--depth", "1", url, str(destination)],
                check=True,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as exc:
            raise RepositoryError(f"git executable not found: {git}", path=url, operation="clone") from exc
        except subprocess.CalledProcessError as exc:
            detail = (exc.stderr or "").strip() or f"exit status {exc.returncode}"
            raise RepositoryError(f"Failed to clone repository: {detail}", path=url, operation="clone") from exc
        yield destination
        logger.debug("Removing clone %s", destination)
