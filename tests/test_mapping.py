from license_audit.applicability import evaluate_file, file_extension
from license_audit.types import Category, Mapping, is_applicable


def _mixed_mapping() -> Mapping:
    return Mapping(
        software=Category.from_lists([".py", ".go"], ["MIT", "Apache-2.0"]),
        documentation=Category.from_lists([".md"], ["CC-BY-4.0"]),
        multimedia=Category.from_lists([".png"], ["CC0-1.0"]),
        data_sets_and_models=Category.from_lists([".csv"], ["CC-BY-4.0"]),
    )


def test_extension_and_license_in_same_category_is_applicable():
    mapping = _mixed_mapping()
    assert is_applicable(".py", ["MIT"], mapping)
    assert is_applicable(".csv", ["GPL-3.0", "CC-BY-4.0"], mapping)


def test_categories_are_not_unioned_across_extension_and_license():
    mapping = _mixed_mapping()
    # .md is documentation, MIT is software: neither category satisfies both
    assert not is_applicable(".md", ["MIT"], mapping)
    assert not is_applicable(".png", ["CC-BY-4.0"], mapping)


def test_unknown_extension_and_empty_extension_are_not_applicable():
    mapping = _mixed_mapping()
    assert not is_applicable(".rs", ["MIT"], mapping)
    assert not is_applicable("", ["MIT"], mapping)


def test_matching_is_case_sensitive():
    mapping = _mixed_mapping()
    assert not is_applicable(".PY", ["MIT"], mapping)
    assert not is_applicable(".py", ["mit"], mapping)


def test_duplicate_licenses_are_harmless():
    assert is_applicable(".go", ["MIT", "MIT"], _mixed_mapping())


def test_matching_categories_lists_every_admitting_category():
    mapping = Mapping(
        software=Category.from_lists([".json"], ["MIT"]),
        data_sets_and_models=Category.from_lists([".json"], ["MIT", "CC0-1.0"]),
    )
    assert mapping.matching_categories(".json", ["MIT"]) == ["Software", "DataSetsAndModels"]
    assert mapping.matching_categories(".json", ["CC0-1.0"]) == ["DataSetsAndModels"]


def test_file_extension_uses_last_segment():
    assert file_extension("pkg/module.tar.gz") == ".gz"
    assert file_extension("dir.with.dots/Makefile") == ""
    assert file_extension("docs/.nojekyll") == ".nojekyll"
    assert file_extension("main.go") == ".go"


def test_evaluate_file_composes_extension_lookup(go_mapping):
    assert evaluate_file("cmd/tool/main.go", ["MIT"], go_mapping)
    assert not evaluate_file("cmd/tool/notes.txt", ["MIT"], go_mapping)


def test_single_string_is_one_license_not_characters():
    mapping = Mapping(software=Category.from_lists([".go"], ["M"]))
    assert not is_applicable(".go", "MIT", mapping)
    assert is_applicable(".go", "M", mapping)
    assert mapping.matching_categories(".go", "MIT") == []
