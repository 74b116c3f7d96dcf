from __future__ import annotations

"""Shared data structures for the license audit.

The definitions live in domain-focused modules (mapping, ignore policy,
report); this module re-exports them under one stable import path.
"""

from .types_mapping import CATEGORY_FIELDS, Category, Mapping, is_applicable, license_tuple
from .types_policy import DEFAULT_POLICY, IgnorePolicy
from .types_report import ComplianceReport, FileVerdict, freeze_verdicts

__all__ = [
    "CATEGORY_FIELDS",
    "Category",
    "ComplianceReport",
    "DEFAULT_POLICY",
    "FileVerdict",
    "IgnorePolicy",
    "Mapping",
    "freeze_verdicts",
    "is_applicable",
    "license_tuple",
]
