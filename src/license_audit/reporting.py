from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable

from jinja2 import Environment, select_autoescape

from .types import ComplianceReport, IgnorePolicy


env = Environment(autoescape=select_autoescape(["html", "xml"]))

PASS_MARK = "✅"
FAIL_MARK = "❌"


def _file_rows(report: ComplianceReport) -> Iterable[dict]:
    for path in sorted(report.verdicts):
        yield {"path": path, "compliant": report.verdicts[path]}


def render_text(report: ComplianceReport) -> str:
    lines = []
    if report.project:
        lines.append(f"Project: {report.project}")
    for license_id in report.licenses:
        lines.append(f"License: {license_id}")

    lines.append("\nFiles:")
    for row in _file_rows(report):
        lines.append(f"{row['path']}: {PASS_MARK if row['compliant'] else FAIL_MARK}")

    lines.append(f"\nTotal files: {report.total_files}")
    lines.append(f"Compliant files: {report.compliant_files}")
    lines.append(f"Non-compliant files: {report.non_compliant_files}")
    lines.append(f"\nScore: {report.score:.2f}%")
    return "\n".join(lines)


def render_json(report: ComplianceReport, policy: IgnorePolicy | None = None) -> str:
    payload = {
        "project": report.project,
        "generated_at": report.generated_at.isoformat(),
        "licenses": list(report.licenses),
        "files": list(_file_rows(report)),
        **report.summary(),
    }
    if policy is not None:
        payload["ignore_policy"] = policy.as_dict()
    return json.dumps(payload, indent=2)


def render_markdown(report: ComplianceReport) -> str:
    lines = [
        f"# License Compliance Report{f': {report.project}' if report.project else ''}",
        "",
        f"Generated at: {report.generated_at.isoformat()}",
        f"Licenses: {', '.join(report.licenses) or 'none'}",
        f"Score: {report.score:.2f}%",
    ]

    lines.append("\n## Summary\n")
    lines.append("| Total | Compliant | Non-compliant |")
    lines.append("| --- | --- | --- |")
    lines.append(f"| {report.total_files} | {report.compliant_files} | {report.non_compliant_files} |")

    lines.append("\n## Files\n")
    lines.append("| Path | Compliant |")
    lines.append("| --- | --- |")
    for row in _file_rows(report):
        lines.append(f"| {row['path']} | {PASS_MARK if row['compliant'] else FAIL_MARK} |")

    return "\n".join(lines)


def render_html(report: ComplianceReport) -> str:
    template = env.from_string(
        """
<!doctype html>
<html lang=\"en\">
<head>
  <meta charset=\"utf-8\" />
  <title>License Compliance Report</title>
  <style>
    body { font-family: Arial, sans-serif; margin: 2rem; }
    h1, h2 { color: #1f2937; }
    table { border-collapse: collapse; width: 100%; margin-bottom: 1.5rem; }
    th, td { border: 1px solid #d1d5db; padding: 0.5rem; }
    th { background: #f3f4f6; text-align: left; }
    .badge { display: inline-block; padding: 0.35rem 0.6rem; border-radius: 0.4rem; font-weight: 600; color: #111827; }
    .badge.good { background: #d1fae5; color: #065f46; }
    .badge.warn { background: #fef3c7; color: #92400e; }
    .badge.bad { background: #fee2e2; color: #991b1b; }
  </style>
</head>
<body>
  <h1>License Compliance Report{% if project %}: {{ project }}{% endif %}</h1>
  <p>Generated at: {{ generated_at }}</p>
  <p>Licenses: {{ licenses | join(", ") if licenses else "none" }}</p>
  <p>Score: <span class=\"badge {{ badge_class }}\">{{ score }}%</span></p>
  <section>
    <h2>Summary</h2>
    <table>
      <thead><tr><th>Total</th><th>Compliant</th><th>Non-compliant</th></tr></thead>
      <tbody>
        <tr><td>{{ total_files }}</td><td>{{ compliant_files }}</td><td>{{ non_compliant_files }}</td></tr>
      </tbody>
    </table>
  </section>
  <section>
    <h2>Files</h2>
    <table>
      <thead><tr><th>Path</th><th>Compliant</th></tr></thead>
      <tbody>
        {% for row in files %}
        <tr>
          <td>{{ row.path }}</td>
          <td><span class=\"badge {{ 'good' if row.compliant else 'bad' }}\">{{ 'yes' if row.compliant else 'no' }}</span></td>
        </tr>
        {% endfor %}
      </tbody>
    </table>
  </section>
</body>
</html>
"""
    )

    return template.render(
        project=report.project,
        generated_at=report.generated_at.isoformat(),
        licenses=list(report.licenses),
        score=f"{report.score:.2f}",
        badge_class="good" if report.score >= 90 else ("warn" if report.score >= 50 else "bad"),
        total_files=report.total_files,
        compliant_files=report.compliant_files,
        non_compliant_files=report.non_compliant_files,
        files=list(_file_rows(report)),
    )


def render_report(report: ComplianceReport, fmt: str, policy: IgnorePolicy | None = None) -> str:
    fmt = fmt.lower()
    if fmt == "text":
        return render_text(report)
    if fmt == "json":
        return render_json(report, policy)
    if fmt in {"md", "markdown"}:
        return render_markdown(report)
    if fmt == "html":
        return render_html(report)
    raise ValueError(f"Unknown report format: {fmt}")


def write_report(
    report: ComplianceReport, fmt: str, destination: Path | None, policy: IgnorePolicy | None = None
) -> str:
    output = render_report(report, fmt, policy)
    if destination:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(output, encoding="utf-8")
    return output
