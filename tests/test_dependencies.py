"""Tests for the dependency scanner."""

import json

from security_audit.advisories import KNOWN_VULNERABLE_PACKAGES, Advisory
from security_audit.models import Category, Severity
from security_audit.scanners.dependencies import scan_dependencies


def _manifest(dependencies=None, dev_dependencies=None) -> str:
    data = {"name": "demo", "version": "1.0.0"}
    if dependencies is not None:
        data["dependencies"] = dependencies
    if dev_dependencies is not None:
        data["devDependencies"] = dev_dependencies
    return json.dumps(data)


class TestKnownVulnerablePackages:
    """Test matching against the advisory table."""

    def test_lodash_flagged(self):
        findings = scan_dependencies(_manifest({"lodash": "4.17.20"}))

        assert len(findings) == 1
        finding = findings[0]
        assert finding.category == Category.dependencies
        assert finding.severity == Severity.high
        assert finding.cve == "CVE-2021-23337"
        assert finding.file == "package.json"
        assert finding.code == '"lodash": "4.17.20"'
        assert finding.title == "Vulnerable Package: lodash"
        assert "npm install lodash@4.17.21" in finding.recommendation

    def test_dev_dependencies_checked(self):
        findings = scan_dependencies(_manifest({}, {"minimist": "1.2.0"}))

        assert [f.severity for f in findings] == [Severity.critical]

    def test_dev_dependency_version_wins(self):
        findings = scan_dependencies(_manifest({"lodash": "4.0.0"}, {"lodash": "4.17.15"}))

        assert len(findings) == 1
        assert findings[0].code == '"lodash": "4.17.15"'

    def test_advisory_without_cve(self):
        findings = scan_dependencies(_manifest({"moment": "2.29.1"}))

        assert findings[0].cve is None
        assert findings[0].severity == Severity.medium

    def test_clean_manifest(self):
        assert scan_dependencies(_manifest({"next": "14.1.0", "zod": "3.22.4"})) == []

    def test_table_entries_are_complete(self):
        assert len(KNOWN_VULNERABLE_PACKAGES) == 12
        for advisory in KNOWN_VULNERABLE_PACKAGES.values():
            assert advisory.fix_version
            assert advisory.description

    def test_custom_advisory_table(self):
        table = {"left-pad": Advisory(Severity.low, None, None, "Unpublished package")}
        findings = scan_dependencies(_manifest({"left-pad": "1.0.0", "lodash": "4.17.20"}), advisories=table)

        assert [f.title for f in findings] == ["Vulnerable Package: left-pad"]
        assert "npm install" not in findings[0].recommendation


class TestReactVersion:
    """Test the outdated React check."""

    def test_react_17_flagged(self):
        findings = scan_dependencies(_manifest({"react": "^17.0.2"}))

        assert len(findings) == 1
        assert findings[0].title == "Outdated React Version"
        assert findings[0].severity == Severity.low
        assert findings[0].cve is None

    def test_react_18_not_flagged(self):
        assert scan_dependencies(_manifest({"react": "^18.2.0"})) == []


class TestMalformedManifest:
    """Test that bad manifests become a finding rather than an error."""

    def test_invalid_json(self):
        findings = scan_dependencies("{not json")

        assert len(findings) == 1
        assert findings[0].category == Category.configuration
        assert findings[0].severity == Severity.low
        assert findings[0].title == "Invalid package.json"

    def test_non_object_root(self):
        findings = scan_dependencies("[1, 2, 3]")

        assert [f.title for f in findings] == ["Invalid package.json"]

    def test_non_object_sections_ignored(self):
        assert scan_dependencies(json.dumps({"dependencies": ["lodash"]})) == []

    def test_deeply_nested_array(self):
        findings = scan_dependencies("[" * 100000 + "]" * 100000)

        assert [f.title for f in findings] == ["Invalid package.json"]

    def test_deeply_nested_object(self):
        findings = scan_dependencies('{"a":' * 100000 + "1" + "}" * 100000)

        assert [f.title for f in findings] == ["Invalid package.json"]
