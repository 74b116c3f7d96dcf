from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Mapping as MappingType, Optional

FileVerdict = MappingType[str, bool]


def freeze_verdicts(verdicts: dict[str, bool]) -> FileVerdict:
    """Return a read-only view of ``verdicts`` sorted by relative path."""

    return MappingProxyType({path: verdicts[path] for path in sorted(verdicts)})


@dataclass
class ComplianceReport:
    verdicts: FileVerdict
    licenses: tuple[str, ...] = ()
    project: Optional[str] = None
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def total_files(self) -> int:
        return len(self.verdicts)

    @property
    def compliant_files(self) -> int:
        return sum(1 for compliant in self.verdicts.values() if compliant)

    @property
    def non_compliant_files(self) -> int:
        return self.total_files - self.compliant_files

    @property
    def score(self) -> float:
        """Return the compliant share as a 0-100 percentage.

        An empty tree scores 0.0 rather than dividing by zero.
        """

        if not self.total_files:
            return 0.0
        return self.compliant_files / self.total_files * 100

    @property
    def passed(self) -> bool:
        return self.total_files > 0 and self.non_compliant_files == 0

    def summary(self) -> dict:
        return {
            "total_files": self.total_files,
            "compliant_files": self.compliant_files,
            "non_compliant_files": self.non_compliant_files,
            "score": round(self.score, 2),
        }
