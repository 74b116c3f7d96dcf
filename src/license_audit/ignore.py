from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional

import pathspec

from .errors import PatternSyntaxError
from .types_policy import IgnorePolicy

logger = logging.getLogger(__name__)

SEPARATOR = "/"


def normalize_path(path: str) -> str:
    if path.startswith("./"):
        path = path[2:]
    return path


def _translate_class(pattern: str, start: int) -> tuple[str, int]:
    """Translate the ``[...]`` class opening at ``start``; return (regex, next index)."""

    i = start + 1
    negate = False
    if i < len(pattern) and pattern[i] in "!^":
        negate = True
        i += 1

    ranges: list[str] = []
    while True:
        if i >= len(pattern):
            raise PatternSyntaxError(pattern, "unterminated character class")
        char = pattern[i]
        if char == "]" and ranges:
            i += 1
            break
        if char == "\\":
            i += 1
            if i >= len(pattern):
                raise PatternSyntaxError(pattern, "trailing escape in character class")
            char = pattern[i]
        elif char == "]":
            raise PatternSyntaxError(pattern, "empty character class")
        low = char
        i += 1
        if i + 1 < len(pattern) and pattern[i] == "-" and pattern[i + 1] != "]":
            high = pattern[i + 1]
            if high == "\\":
                if i + 2 >= len(pattern):
                    raise PatternSyntaxError(pattern, "trailing escape in character class")
                high = pattern[i + 2]
                i += 1
            if high < low:
                raise PatternSyntaxError(pattern, f"reversed range {low}-{high}")
            ranges.append(f"{re.escape(low)}-{re.escape(high)}")
            i += 2
        else:
            ranges.append(re.escape(low))

    body = "".join(ranges)
    # classes never match the path separator, like ``*`` and ``?``
    if negate:
        return f"[^{body}/]", i
    return f"(?![/])[{body}]", i


def translate_glob(pattern: str) -> str:
    """Translate a shell glob into an anchored regular expression.

    ``*`` and ``?`` stay within one path segment; ``[...]`` supports ranges and
    ``!``/``^`` negation; ``\\`` escapes the next character.
    """

    parts: list[str] = []
    i = 0
    while i < len(pattern):
        char = pattern[i]
        if char == "*":
            while i < len(pattern) and pattern[i] == "*":
                i += 1
            parts.append("[^/]*")
            continue
        if char == "?":
            parts.append("[^/]")
        elif char == "[":
            regex, i = _translate_class(pattern, i)
            parts.append(regex)
            continue
        elif char == "\\":
            i += 1
            if i >= len(pattern):
                raise PatternSyntaxError(pattern, "trailing escape")
            parts.append(re.escape(pattern[i]))
        else:
            parts.append(re.escape(char))
        i += 1
    return "(?s:" + "".join(parts) + r")\Z"


class _GlobRule:
    def __init__(self, pattern: str):
        self.pattern = pattern
        anchored = pattern.startswith(SEPARATOR)
        body = pattern[1:] if anchored else pattern
        self.expressions = [re.compile(translate_glob(body))]
        if not anchored:
            self.expressions.append(re.compile(translate_glob("*/" + body)))

    def matches(self, path: str, is_dir: bool = False) -> bool:
        return any(expr.match(path) for expr in self.expressions)


class _GitIgnoreRule:
    def __init__(self, pattern: str):
        self.pattern = pattern
        try:
            self.spec = pathspec.GitIgnoreSpec.from_lines([pattern])
        except ValueError as exc:
            raise PatternSyntaxError(pattern, str(exc)) from exc

    def matches(self, path: str, is_dir: bool = False) -> bool:
        return self.spec.match_file(path + SEPARATOR if is_dir else path)


class IgnoreMatcher:
    """Compiled ignore patterns.

    By default every pattern is a one-level shell glob: matched against the
    whole relative path, and unless it starts with ``/`` also against one
    extra leading directory (``*.log`` matches ``a.log`` and ``logs/a.log``
    but not ``var/logs/a.log``). With ``recursive=True`` the patterns follow
    gitignore rules instead, including ``**``.

    Patterns that fail to compile are logged and never match.
    """

    def __init__(self, patterns: Iterable[str] = (), *, recursive: bool = False):
        self.recursive = recursive
        self.rules: List[_GlobRule | _GitIgnoreRule] = []
        self.invalid: List[PatternSyntaxError] = []
        rule_type = _GitIgnoreRule if recursive else _GlobRule
        for pattern in patterns:
            try:
                self.rules.append(rule_type(pattern))
            except PatternSyntaxError as exc:
                logger.warning("Skipping ignore pattern: %s", exc)
                self.invalid.append(exc)

    @classmethod
    def from_policy(cls, policy: IgnorePolicy) -> "IgnoreMatcher":
        return cls(policy.patterns, recursive=policy.recursive_globs)

    @property
    def patterns(self) -> list[str]:
        return [rule.pattern for rule in self.rules]

    def match(self, path: str, is_dir: bool = False) -> Optional[str]:
        """Return the first pattern that ignores ``path``, or None."""

        normalized = normalize_path(path)
        for rule in self.rules:
            if rule.matches(normalized, is_dir):
                return rule.pattern
        return None

    def matches(self, path: str, is_dir: bool = False) -> bool:
        return self.match(path, is_dir) is not None


def should_ignore(path: str, patterns: Iterable[str]) -> bool:
    return IgnoreMatcher(patterns).matches(path)
