"""Tests for the markdown report exporter."""

from datetime import datetime, timezone

import pytest

from security_audit.config import REPORT_SIGNATURE
from security_audit.disclosure import to_full_audit
from security_audit.models import Category, Severity
from security_audit.report import export_markdown

SCANNED_AT = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


@pytest.fixture
def audit(make_finding):
    findings = [
        make_finding(
            Severity.medium,
            "No Rate Limiting Detected",
            category=Category.rate_limiting,
            confidence=0.75,
            is_static=False,
        ),
        make_finding(
            Severity.critical,
            "Hardcoded API Key Detected",
            category=Category.secrets,
            file="src/config.ts",
            line=3,
            code='const apiKey = "sk_l****aaaa"',
            confidence=1.0,
        ),
        make_finding(
            Severity.high,
            "Vulnerable Package: lodash",
            category=Category.dependencies,
            file="package.json",
            cve="CVE-2021-23337",
            confidence=0.125,
        ),
    ]
    return to_full_audit(findings, "proj_1", audit_id="audit_1", scanned_at=SCANNED_AT)


class TestExportMarkdown:
    """Test the report layout."""

    def test_header(self, audit):
        markdown = export_markdown(audit)

        assert markdown.startswith(
            "# Security Audit Report\n"
            "\n"
            "**Project ID:** proj_1\n"
            "**Audit ID:** audit_1\n"
            "**Date:** 2024-01-02 03:04:05 UTC\n"
        )

    def test_summary_table(self, audit):
        markdown = export_markdown(audit)

        assert "| Severity | Count |\n|----------|-------|\n| Critical | 1 |\n| High | 1 |\n| Medium | 1 |" in markdown
        assert "| Info | 0 |" in markdown
        assert "| **Total** | **3** |" in markdown

    def test_one_heading_per_finding_in_order(self, audit):
        headings = [line for line in export_markdown(audit).split("\n") if line.startswith("### ")]

        assert headings == [
            "### CRITICAL: Hardcoded API Key Detected",
            "### HIGH: Vulnerable Package: lodash",
            "### MEDIUM: No Rate Limiting Detected",
        ]

    def test_optional_lines(self, audit):
        sections = export_markdown(audit).split("### ")[1:]
        secret, dependency, heuristic = sections

        assert "**Category:** Secrets Exposure (secrets)" in secret
        assert "**File:** src/config.ts:3" in secret
        assert "**Code:**\n```\nconst apiKey = \"sk_l****aaaa\"\n```" in secret
        assert "**CVE:**" not in secret

        assert "**File:** package.json\n" in dependency
        assert "**CVE:** CVE-2021-23337" in dependency
        assert "**Code:**" not in dependency

        assert "**Category:** Rate Limiting (rate-limiting)" in heuristic
        assert "**File:**" not in heuristic
        assert "**CVE:**" not in heuristic
        assert "**Code:**" not in heuristic

    def test_confidence_percent(self, audit):
        markdown = export_markdown(audit)

        assert "**Confidence:** 100%" in markdown
        assert "**Confidence:** 75%" in markdown
        assert "**Confidence:** 13%" in markdown

    def test_ends_with_signature(self, audit):
        assert export_markdown(audit).endswith("---\n\n" + REPORT_SIGNATURE)

    def test_deterministic(self, audit):
        assert export_markdown(audit) == export_markdown(audit)

    def test_naive_date_treated_as_utc(self, make_finding):
        audit = to_full_audit([], "proj_2", audit_id="audit_2", scanned_at=datetime(2024, 6, 30, 23, 59, 0))

        assert "**Date:** 2024-06-30 23:59:00 UTC" in export_markdown(audit)

    def test_empty_audit(self):
        audit = to_full_audit([], "proj_3", audit_id="audit_3", scanned_at=SCANNED_AT)
        markdown = export_markdown(audit)

        assert "| **Total** | **0** |" in markdown
        assert "### " not in markdown
        assert markdown.endswith("## Findings\n\n" + REPORT_SIGNATURE)
