"""Merge scanner output into one severity-ordered list with a summary."""

from typing import Iterable, Sequence

from .models import SEVERITY_ORDER, AuditSummary, Finding, Severity


def order_findings(findings: Iterable[Finding]) -> list[Finding]:
    """Stable sort by severity; equal severities keep their input order."""
    return sorted(findings, key=lambda f: SEVERITY_ORDER[f.severity])


def calculate_summary(findings: Sequence[Finding]) -> AuditSummary:
    counts = {severity: 0 for severity in Severity}
    for finding in findings:
        counts[finding.severity] += 1
    return AuditSummary(
        critical=counts[Severity.critical],
        high=counts[Severity.high],
        medium=counts[Severity.medium],
        low=counts[Severity.low],
        info=counts[Severity.info],
        total=len(findings),
    )


def aggregate(
    static: Sequence[Finding],
    dependency: Sequence[Finding],
    heuristic: Sequence[Finding],
) -> tuple[AuditSummary, list[Finding]]:
    """Concatenate static, dependency and heuristic findings and rank them."""
    findings = order_findings([*static, *dependency, *heuristic])
    summary = calculate_summary(findings)
    expected = len(static) + len(dependency) + len(heuristic)
    if summary.total != expected:
        raise ValueError(f"summary total {summary.total} != {expected} scanned findings")
    return summary, findings
