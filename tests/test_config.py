import json
from pathlib import Path

import pytest

from license_audit.config import build_policy, load_ignore_patterns, load_mapping
from license_audit.errors import ConfigurationError

MAPPING = {
    "software": {"extensions": [".go", ".py"], "licenses": ["MIT"]},
    "documentation": {"extensions": [".md"], "licenses": ["CC-BY-4.0"]},
    "multimedia": {"extensions": [".png"], "licenses": ["CC0-1.0"]},
    "data_sets_and_models": {"extensions": [".csv"], "licenses": ["ODbL-1.0"]},
}


def test_load_mapping_from_json(tmp_path: Path):
    path = tmp_path / "mapping.json"
    path.write_text(json.dumps(MAPPING))

    mapping = load_mapping(path)

    assert mapping.software.extensions == frozenset({".go", ".py"})
    assert mapping.data_sets_and_models.licenses == frozenset({"ODbL-1.0"})
    assert mapping.as_dict()["documentation"] == {"extensions": [".md"], "licenses": ["CC-BY-4.0"]}


def test_load_mapping_from_yaml(tmp_path: Path):
    path = tmp_path / "mapping.yml"
    path.write_text(
        """
software:
  extensions: [".rs"]
  licenses: ["Apache-2.0"]
documentation: {extensions: [], licenses: []}
multimedia: {extensions: [], licenses: []}
data_sets_and_models: {extensions: [], licenses: []}
"""
    )

    assert load_mapping(path).software.extensions == frozenset({".rs"})


def test_missing_mapping_file_is_fatal(tmp_path: Path):
    with pytest.raises(ConfigurationError) as excinfo:
        load_mapping(tmp_path / "absent.json")
    assert excinfo.value.operation == "load_mapping"
    assert "absent.json" in excinfo.value.user_message()


def test_unparsable_mapping_is_fatal(tmp_path: Path):
    path = tmp_path / "mapping.json"
    path.write_text('{"software": [')

    with pytest.raises(ConfigurationError):
        load_mapping(path)


@pytest.mark.parametrize(
    "mutate",
    [
        lambda raw: raw.pop("multimedia"),
        lambda raw: raw.update({"fonts": {"extensions": [], "licenses": []}}),
        lambda raw: raw["software"].update({"extensions": ".go"}),
        lambda raw: raw["software"].update({"licenses": [1, 2]}),
        lambda raw: raw["documentation"].pop("licenses"),
        lambda raw: raw.update({"software": ["MIT"]}),
    ],
)
def test_malformed_mapping_sections_are_rejected(tmp_path: Path, mutate):
    raw = json.loads(json.dumps(MAPPING))
    mutate(raw)
    path = tmp_path / "mapping.json"
    path.write_text(json.dumps(raw))

    with pytest.raises(ConfigurationError):
        load_mapping(path)


def test_ignore_document_with_ignore_field(tmp_path: Path):
    path = tmp_path / "ignore.yml"
    path.write_text("ignore:\n  - vendor/*\n  - '*.lock'\n")

    assert load_ignore_patterns(path) == ("vendor/*", "*.lock")


def test_ignore_document_as_plain_list_and_empty(tmp_path: Path):
    listed = tmp_path / "list.json"
    listed.write_text('["dist", "build"]')
    empty = tmp_path / "empty.yml"
    empty.write_text("")

    assert load_ignore_patterns(listed) == ("dist", "build")
    assert load_ignore_patterns(empty) == ()


def test_absent_ignore_file_means_no_patterns(tmp_path: Path):
    assert load_ignore_patterns(tmp_path / "missing.yml") == ()
    assert load_ignore_patterns(None) == ()


def test_required_ignore_file_must_exist(tmp_path: Path):
    with pytest.raises(ConfigurationError):
        load_ignore_patterns(tmp_path / "missing.yml", required=True)


def test_ignore_document_rejects_unknown_fields(tmp_path: Path):
    path = tmp_path / "ignore.yml"
    path.write_text("ignore: []\ninclude: ['*']\n")

    with pytest.raises(ConfigurationError):
        load_ignore_patterns(path)


def test_build_policy_appends_extra_patterns(tmp_path: Path):
    path = tmp_path / "ignore.yml"
    path.write_text("ignore: [vendor]\n")

    policy = build_policy(path, extra_patterns=["*.tmp"], skip_hidden_dirs=True)

    assert policy.patterns == ("vendor", "*.tmp")
    assert policy.skip_hidden_dirs
    assert not policy.skip_root_files
