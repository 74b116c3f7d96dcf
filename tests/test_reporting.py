import json
from datetime import datetime
from pathlib import Path

import pytest

from license_audit.reporting import render_html, render_json, render_markdown, render_report, render_text, write_report
from license_audit.types import ComplianceReport, IgnorePolicy, freeze_verdicts


def _report() -> ComplianceReport:
    return ComplianceReport(
        verdicts=freeze_verdicts({"b.txt": False, "a.go": True}),
        licenses=("MIT",),
        project="demo",
        generated_at=datetime(2024, 1, 1),
    )


def test_text_report_lists_sorted_files_and_score():
    text = render_text(_report())

    assert text.startswith("Project: demo\nLicense: MIT\n")
    assert text.index("a.go: ✅") < text.index("b.txt: ❌")
    assert "Total files: 2" in text
    assert "Compliant files: 1" in text
    assert "Non-compliant files: 1" in text
    assert text.endswith("Score: 50.00%")


def test_json_report_contains_summary_and_policy():
    payload = json.loads(render_json(_report(), IgnorePolicy(patterns=("vendor/*",))))

    assert payload["files"] == [{"path": "a.go", "compliant": True}, {"path": "b.txt", "compliant": False}]
    assert payload["score"] == 50.0
    assert payload["non_compliant_files"] == 1
    assert payload["ignore_policy"]["patterns"] == ["vendor/*"]


def test_markdown_and_html_render_scores():
    markdown = render_markdown(_report())
    assert "# License Compliance Report: demo" in markdown
    assert "| a.go | ✅ |" in markdown

    html = render_html(_report())
    assert "50.00%" in html
    assert "<td>b.txt</td>" in html


def test_html_escapes_file_names():
    report = ComplianceReport(verdicts=freeze_verdicts({"<script>.js": False}), licenses=("MIT",))
    assert "&lt;script&gt;.js" in render_html(report)


def test_empty_report_renders_zero_score():
    report = ComplianceReport(verdicts=freeze_verdicts({}), licenses=("MIT",))
    assert render_text(report).endswith("Score: 0.00%")


def test_unknown_format_is_rejected():
    with pytest.raises(ValueError):
        render_report(_report(), "pdf")


def test_write_report_creates_parent_directories(tmp_path: Path):
    destination = tmp_path / "out" / "report.md"

    rendered = write_report(_report(), "md", destination)

    assert destination.read_text(encoding="utf-8") == rendered
