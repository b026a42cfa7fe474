"""Shared fixtures for security-audit tests."""

import pytest

from security_audit.models import Category, Finding, Severity


@pytest.fixture
def make_finding():
    """Build a Finding with sensible defaults; override any field by keyword."""

    def _make(severity=Severity.medium, title="Test Finding", **overrides):
        fields = {
            "category": Category.configuration,
            "severity": severity,
            "title": title,
            "description": f"{title} description",
            "impact": f"{title} impact",
            "recommendation": f"{title} recommendation",
            "confidence": 0.9,
            "is_static": True,
        }
        fields.update(overrides)
        return Finding(**fields)

    return _make
