"""Free and paid views over a set of findings.

The partial view is built field by field from the findings; it never holds
a Finding, so detail fields cannot leak through it.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Sequence

from .aggregator import calculate_summary, order_findings
from .models import Category, FullAudit, PartialScan, PreviewFinding, Finding

logger = logging.getLogger(__name__)


def _distinct_categories(findings: Sequence[Finding]) -> list[Category]:
    seen: list[Category] = []
    for finding in findings:
        if finding.category not in seen:
            seen.append(finding.category)
    return seen


def to_partial_scan(findings: Sequence[Finding], scanned_at: Optional[datetime] = None) -> PartialScan:
    """Counts, categories and a title-only preview of the most severe finding."""
    ordered = order_findings(findings)
    preview = None
    if ordered:
        top = ordered[0]
        preview = PreviewFinding(category=top.category, severity=top.severity, title=top.title)

    return PartialScan(
        has_issues=len(ordered) > 0,
        summary=calculate_summary(ordered),
        categories=_distinct_categories(ordered),
        preview_finding=preview,
        scanned_at=scanned_at or datetime.now(timezone.utc),
    )


def to_full_audit(
    findings: Sequence[Finding],
    project_id: str,
    audit_id: Optional[str] = None,
    scanned_at: Optional[datetime] = None,
) -> FullAudit:
    """Every finding with every field, most severe first."""
    ordered = order_findings(findings)
    now = datetime.now(timezone.utc)
    fields = {}
    if audit_id:
        fields["id"] = audit_id

    audit = FullAudit(
        project_id=project_id,
        status="complete",
        summary=calculate_summary(ordered),
        findings=ordered,
        scanned_at=scanned_at or now,
        completed_at=now,
        **fields,
    )
    logger.info(f"Full audit {audit.id} for {project_id}: {audit.summary.total} findings")
    return audit
