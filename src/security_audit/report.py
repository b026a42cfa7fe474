"""Markdown export of a full audit."""

import math
from datetime import datetime, timezone

from .config import REPORT_SIGNATURE
from .models import CATEGORY_LABELS, Finding, FullAudit


def _format_date(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def _format_confidence(confidence: float) -> str:
    # Round half up so 0.855 renders as 86%
    return f"{math.floor(confidence * 100 + 0.5)}%"


def _finding_lines(finding: Finding) -> list[str]:
    lines = [
        f"### {finding.severity.value.upper()}: {finding.title}",
        "",
        f"**Category:** {CATEGORY_LABELS[finding.category]} ({finding.category.value})",
    ]
    if finding.file:
        location = finding.file if finding.line is None else f"{finding.file}:{finding.line}"
        lines.append(f"**File:** {location}")
    if finding.cve:
        lines.append(f"**CVE:** {finding.cve}")
    lines.append(f"**Confidence:** {_format_confidence(finding.confidence)}")
    lines.extend(["", "**Description:**", finding.description, ""])
    if finding.code:
        lines.extend(["**Code:**", "```", finding.code, "```", ""])
    lines.extend([
        "**Impact:**",
        finding.impact,
        "",
        "**Recommendation:**",
        finding.recommendation,
        "",
        "---",
        "",
    ])
    return lines


def export_markdown(audit: FullAudit) -> str:
    """Render a full audit as a markdown report.

    Deterministic: the same audit always renders to the same text.
    """
    summary = audit.summary
    lines = [
        "# Security Audit Report",
        "",
        f"**Project ID:** {audit.project_id}",
        f"**Audit ID:** {audit.id}",
        f"**Date:** {_format_date(audit.scanned_at)}",
        "",
        "---",
        "",
        "## Summary",
        "",
        "| Severity | Count |",
        "|----------|-------|",
        f"| Critical | {summary.critical} |",
        f"| High | {summary.high} |",
        f"| Medium | {summary.medium} |",
        f"| Low | {summary.low} |",
        f"| Info | {summary.info} |",
        f"| **Total** | **{summary.total}** |",
        "",
        "---",
        "",
        "## Findings",
        "",
    ]
    for finding in audit.findings:
        lines.extend(_finding_lines(finding))
    lines.append(REPORT_SIGNATURE)
    return "\n".join(lines)
