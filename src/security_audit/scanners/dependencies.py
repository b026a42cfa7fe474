"""Dependency scanner: package.json against the known-vulnerable table."""

import json
import logging
import re
from typing import Mapping, Optional

from ..advisories import KNOWN_VULNERABLE_PACKAGES, Advisory
from ..models import Category, Finding, Severity
from .common import make_snippet

logger = logging.getLogger(__name__)

MANIFEST_FILE = "package.json"
OUTDATED_REACT_MAJORS = {16, 17}


def _invalid_manifest_finding() -> Finding:
    return Finding(
        category=Category.configuration,
        severity=Severity.low,
        title="Invalid package.json",
        description="Could not parse package.json for dependency analysis.",
        impact="Dependencies could not be checked for known vulnerabilities.",
        recommendation="Fix the JSON syntax in package.json so dependencies can be analyzed.",
        file=MANIFEST_FILE,
        confidence=1.0,
        is_static=True,
    )


def _collect_dependencies(manifest: dict) -> dict[str, str]:
    deps: dict[str, str] = {}
    for section in ("dependencies", "devDependencies"):
        entries = manifest.get(section)
        if not isinstance(entries, dict):
            continue
        for name, version in entries.items():
            deps[name] = str(version)
    return deps


def _advisory_finding(name: str, version: str, advisory: Advisory) -> Finding:
    reference = advisory.cve or "the package advisories"
    if advisory.fix_version:
        recommendation = (
            f"Update to {name}@{advisory.fix_version} or later using: "
            f"npm install {name}@{advisory.fix_version}"
        )
    else:
        recommendation = f"Check npm for a patched release of {name} and update, or replace the package."
    return Finding(
        category=Category.dependencies,
        severity=advisory.severity,
        title=f"Vulnerable Package: {name}",
        description=advisory.description,
        impact=f"This vulnerability in {name} could be exploited by attackers. See {reference} for details.",
        recommendation=recommendation,
        file=MANIFEST_FILE,
        code=make_snippet(f'"{name}": "{version}"'),
        cve=advisory.cve,
        confidence=1.0,
        is_static=True,
    )


def _react_major(version: str) -> Optional[int]:
    match = re.search(r"\d+", version)
    return int(match.group(0)) if match else None


def scan_dependencies(
    manifest_json: str,
    advisories: Optional[Mapping[str, Advisory]] = None,
) -> list[Finding]:
    """Check declared dependencies against an advisory table.

    Matching is by package name only; the declared version range is not
    evaluated. An unparseable manifest yields a single configuration
    finding instead of an error.
    """
    table = KNOWN_VULNERABLE_PACKAGES if advisories is None else advisories

    try:
        manifest = json.loads(manifest_json)
    except (ValueError, TypeError, RecursionError) as e:
        logger.warning(f"Could not parse package.json: {e}")
        return [_invalid_manifest_finding()]
    if not isinstance(manifest, dict):
        logger.warning("package.json root is not an object")
        return [_invalid_manifest_finding()]

    deps = _collect_dependencies(manifest)
    findings: list[Finding] = []

    for name, version in deps.items():
        advisory = table.get(name)
        if advisory:
            findings.append(_advisory_finding(name, version, advisory))

    react_version = deps.get("react")
    if react_version and _react_major(react_version) in OUTDATED_REACT_MAJORS:
        findings.append(
            Finding(
                category=Category.dependencies,
                severity=Severity.low,
                title="Outdated React Version",
                description=f"React {react_version} is no longer the current major release.",
                impact="Older React versions miss security fixes and hardening in newer releases.",
                recommendation="Upgrade to the latest React major version.",
                file=MANIFEST_FILE,
                code=make_snippet(f'"react": "{react_version}"'),
                confidence=1.0,
                is_static=True,
            )
        )

    logger.info(f"Dependency scan: {len(deps)} packages, {len(findings)} findings")
    return findings
