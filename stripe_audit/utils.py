# utils.py
"""
Report generation and console output.

- Uses Rich for colorful, wrapped tables in the terminal.
- Renders JSON, CSV, and HTML reports from a ScanResult.
"""

import csv
import html
import io
import json
import os
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from .config import RISK_BAND_HIGH, RISK_BAND_MEDIUM
from .models import Issue, ScanResult, Severity

SEVERITY_STYLES = {
    Severity.HIGH: "bold red",
    Severity.MEDIUM: "bold yellow",
    Severity.LOW: "blue",
}
SEVERITY_TITLES = {
    Severity.HIGH: "HIGH SEVERITY ISSUES",
    Severity.MEDIUM: "MEDIUM SEVERITY ISSUES",
    Severity.LOW: "LOW SEVERITY / INFORMATIONAL",
}
BAND_STYLES = {"high": "bold red", "medium": "bold yellow", "low": "bold green"}
CSV_FIELDS = ["severity", "kind", "probe", "category", "resource", "message", "recommendation"]


def risk_band(percentage: int) -> str:
    if percentage >= RISK_BAND_HIGH:
        return "high"
    if percentage >= RISK_BAND_MEDIUM:
        return "medium"
    return "low"


def issue_to_dict(issue: Issue) -> Dict[str, str]:
    return {
        "severity": issue.severity.value,
        "kind": issue.kind,
        "message": issue.message,
        "recommendation": issue.recommendation,
        "resource": issue.resource,
        "probe": issue.probe,
        "category": issue.category.value,
    }


def result_to_dict(result: ScanResult) -> Dict[str, Any]:
    score = result.risk_score
    return {
        "scan_time": result.timestamp.replace(microsecond=0).isoformat(),
        "account_id": result.account_id,
        "risk_score": {
            "total": score.total,
            "high": score.high,
            "medium": score.medium,
            "low": score.low,
            "percentage": score.percentage,
        },
        "issues": [issue_to_dict(i) for i in result.issues],
    }


def issues_by_severity(result: ScanResult, severity: Severity) -> List[Issue]:
    return [i for i in result.issues if i.severity == severity]


def render_json(result: ScanResult) -> str:
    return json.dumps(result_to_dict(result), indent=2)


def render_csv(result: ScanResult) -> str:
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=CSV_FIELDS, lineterminator="\n")
    writer.writeheader()
    for issue in result.issues:
        row = issue_to_dict(issue)
        writer.writerow({k: row.get(k, "") for k in CSV_FIELDS})
    return buf.getvalue()


def render_html(result: ScanResult) -> str:
    score = result.risk_score
    esc = html.escape
    band = risk_band(score.percentage)

    html_rows: List[str] = []
    html_rows.append("<!doctype html>")
    html_rows.append("<html><head><meta charset='utf-8'><title>Stripe Integration Risk Scan Report</title>")
    html_rows.append(
        "<style>body{font-family:Arial,Helvetica,sans-serif;margin:20px}"
        ".risk-score{font-size:48px;font-weight:bold}"
        ".high{color:#dc2626}.medium{color:#d97706}.low{color:#2563eb}"
        "table{border-collapse:collapse;width:100%}th,td{border:1px solid #ddd;padding:8px}"
        "th{background:#f2f2f2;text-align:left}tr:nth-child(even){background:#fafafa}</style>"
    )
    html_rows.append("</head><body>")
    html_rows.append("<h1>Stripe Integration Risk Scan Report</h1>")
    html_rows.append(f"<div class='risk-score {band}' id='risk-score'>{score.percentage}%</div>")
    html_rows.append("<ul id='stats'>")
    html_rows.append(f"<li>Total Issues: {score.total}</li>")
    html_rows.append(f"<li class='high'>High Severity: {score.high}</li>")
    html_rows.append(f"<li class='medium'>Medium Severity: {score.medium}</li>")
    html_rows.append(f"<li class='low'>Low Severity: {score.low}</li>")
    html_rows.append("</ul>")
    if result.account_id:
        html_rows.append(f"<p><strong>Account ID:</strong> {esc(result.account_id)}</p>")
    html_rows.append(f"<p><strong>Scan Date:</strong> {esc(result.timestamp.isoformat())}</p>")

    for severity in (Severity.HIGH, Severity.MEDIUM, Severity.LOW):
        issues = issues_by_severity(result, severity)
        if not issues:
            continue
        html_rows.append(f"<h2 class='{severity.value}'>{SEVERITY_TITLES[severity].title()}</h2>")
        html_rows.append(
            f"<table class='issues {severity.value}'><thead><tr><th>Kind</th><th>Resource</th>"
            "<th>Message</th><th>Recommendation</th></tr></thead><tbody>"
        )
        for issue in issues:
            html_rows.append(
                f"<tr><td>{esc(issue.kind)}</td><td>{esc(issue.resource)}</td>"
                f"<td>{esc(issue.message)}</td><td>{esc(issue.recommendation)}</td></tr>"
            )
        html_rows.append("</tbody></table>")

    if not result.issues:
        html_rows.append("<p>No issues found.</p>")
    html_rows.append("</body></html>")
    return "\n".join(html_rows)


RENDERERS = {
    "json": render_json,
    "csv": render_csv,
    "html": render_html,
}


def save_report(result: ScanResult, fmt: str, path: str) -> str:
    """
    Render the result in the given format and write it to path.
    """
    text = RENDERERS[fmt](result)
    out_dir = os.path.dirname(path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    with open(path, "w", encoding="utf-8") as fh:
        fh.write(text)
    return path


# --- Console printing with color/wrapping ---

def print_console_report(result: ScanResult, console: Optional[Console] = None) -> None:
    """
    Print the risk score, severity counts and one table per severity.
    """
    console = console or Console()
    score = result.risk_score
    band_style = BAND_STYLES[risk_band(score.percentage)]

    console.print()
    console.rule("[bold]Stripe Integration Risk Scan Report")
    console.print(Text.assemble(("Risk Score: ", "bold"), (f"{score.percentage}%", band_style)))
    console.print(f"  Total Issues: {score.total}")
    console.print(Text.assemble(
        "  High: ", (str(score.high), SEVERITY_STYLES[Severity.HIGH]),
        " | Medium: ", (str(score.medium), SEVERITY_STYLES[Severity.MEDIUM]),
        " | Low: ", (str(score.low), SEVERITY_STYLES[Severity.LOW]),
    ))
    if result.account_id:
        console.print(f"  Account ID: {result.account_id}")

    for severity in (Severity.HIGH, Severity.MEDIUM, Severity.LOW):
        issues = issues_by_severity(result, severity)
        if not issues:
            continue
        table = Table(
            title=SEVERITY_TITLES[severity],
            title_style=SEVERITY_STYLES[severity],
            show_header=True,
            header_style="bold cyan",
        )
        table.add_column("#", justify="right")
        table.add_column("Kind", style=SEVERITY_STYLES[severity])
        table.add_column("Message", overflow="fold")
        table.add_column("Recommendation", style="dim", overflow="fold")
        for idx, issue in enumerate(issues, start=1):
            table.add_row(str(idx), issue.kind, issue.message, issue.recommendation)
        console.print(table)

    if not result.issues:
        console.print("[green]No issues found! Your Stripe integration looks secure.[/green]")
    console.rule()
