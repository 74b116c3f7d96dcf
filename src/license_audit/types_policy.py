from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class IgnorePolicy:
    """Everything that decides whether a walked entry is left out of the audit.

    ``skip_hidden_dirs`` and ``skip_root_files`` reproduce the fixed exclusions
    of older releases (``.git``-style directories, and LICENSE/README-style
    files sitting in the repository root). ``recursive_globs`` switches the
    patterns from one-level shell globs to gitignore-style ``**`` matching.
    """

    patterns: tuple[str, ...] = ()
    skip_hidden_dirs: bool = False
    skip_root_files: bool = False
    recursive_globs: bool = False

    @classmethod
    def legacy(cls, patterns: Iterable[str] = ()) -> "IgnorePolicy":
        return cls(patterns=tuple(patterns), skip_hidden_dirs=True, skip_root_files=True)

    def as_dict(self) -> dict:
        return {
            "patterns": list(self.patterns),
            "skip_hidden_dirs": self.skip_hidden_dirs,
            "skip_root_files": self.skip_root_files,
            "recursive_globs": self.recursive_globs,
        }


DEFAULT_POLICY = IgnorePolicy()
