from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Mapping as MappingType, Tuple

CATEGORY_FIELDS = (
    ("software", "Software"),
    ("documentation", "Documentation"),
    ("multimedia", "Multimedia"),
    ("data_sets_and_models", "DataSetsAndModels"),
)


def license_tuple(licenses: Iterable[str]) -> tuple[str, ...]:
    """Return ``licenses`` as a tuple; a bare string is one identifier."""

    if isinstance(licenses, str):
        return (licenses,)
    return tuple(licenses)


@dataclass(frozen=True)
class Category:
    extensions: frozenset[str] = field(default_factory=frozenset)
    licenses: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_lists(cls, extensions: Iterable[str], licenses: Iterable[str]) -> "Category":
        return cls(extensions=frozenset(extensions), licenses=frozenset(licenses))

    def admits(self, extension: str, licenses: Iterable[str]) -> bool:
        """Return True when this category allows ``extension`` under any of ``licenses``."""

        if extension not in self.extensions:
            return False
        return any(license_id in self.licenses for license_id in license_tuple(licenses))

    def as_dict(self) -> dict:
        return {"extensions": sorted(self.extensions), "licenses": sorted(self.licenses)}


@dataclass(frozen=True)
class Mapping:
    """The category -> (extensions, licenses) table.

    Categories are independent: a file is compliant when a single category
    contains its extension and also lists one of the detected licenses.
    """

    software: Category = field(default_factory=Category)
    documentation: Category = field(default_factory=Category)
    multimedia: Category = field(default_factory=Category)
    data_sets_and_models: Category = field(default_factory=Category)

    @classmethod
    def from_dict(cls, raw: MappingType[str, MappingType[str, Iterable[str]]]) -> "Mapping":
        return cls(
            **{
                key: Category.from_lists(raw[key].get("extensions", []), raw[key].get("licenses", []))
                for key, _ in CATEGORY_FIELDS
            }
        )

    def categories(self) -> Iterator[Tuple[str, Category]]:
        for key, label in CATEGORY_FIELDS:
            yield label, getattr(self, key)

    def matching_categories(self, extension: str, licenses: Iterable[str]) -> list[str]:
        licenses = license_tuple(licenses)
        return [label for label, category in self.categories() if category.admits(extension, licenses)]

    def as_dict(self) -> dict:
        return {key: getattr(self, key).as_dict() for key, _ in CATEGORY_FIELDS}


def is_applicable(extension: str, licenses: Iterable[str], mapping: Mapping) -> bool:
    licenses = license_tuple(licenses)
    for _, category in mapping.categories():
        if category.admits(extension, licenses):
            return True
    return False
