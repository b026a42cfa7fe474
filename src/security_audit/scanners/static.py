"""Static line-level scanner.

Applies every rule in the rule library to every line of every eligible
file, then runs the two whole-file API route checks.
"""

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Sequence

from ..config import MAX_FILE_CHARS, SCAN_WORKERS
from ..models import Category, Finding, Severity, SourceFile
from .common import cap_line, is_api_route, is_binary_content, make_snippet, should_skip
from .rules import RULES, Rule, redact_secrets

logger = logging.getLogger(__name__)

ENV_EXPOSURE_PATTERN = re.compile(
    r"process\.env\.[A-Z_]+.*\breturn\b|"
    r"res\.(?:json|send)\([^)]*process\.env|"
    r"(?:NextResponse|Response)\.json\([^)]*process\.env|"
    r"(?:jsonify|JSONResponse)\([^)]*os\.(?:environ|getenv)"
)

AUTH_MARKERS = ("getserversession", "auth", "token", "session", "jwt")
UNAUTHENTICATED_ROUTE_MARKERS = ("auth", "webhook", "health")


def _finding_from_rule(rule: Rule, path: str, line_no: int, code: Optional[str]) -> Finding:
    return Finding(
        category=rule.category,
        severity=rule.severity,
        title=rule.title,
        description=rule.description,
        impact=rule.impact,
        recommendation=rule.recommendation,
        file=path,
        line=line_no,
        code=code,
        confidence=rule.confidence,
        is_static=rule.is_static,
    )


def _check_env_exposure(path: str, lines: list[str]) -> Optional[Finding]:
    for line_no, line in enumerate(lines, start=1):
        if ENV_EXPOSURE_PATTERN.search(line):
            return Finding(
                category=Category.secrets,
                severity=Severity.high,
                title="Environment Variables Exposed in API",
                description="An API route returns a value read from environment variables.",
                impact="Secrets stored in environment variables may be sent to any client that calls this route.",
                recommendation="Never return environment variables from API routes; return only the derived data the client needs.",
                file=path,
                line=line_no,
                code=make_snippet(redact_secrets(line)),
                confidence=0.85,
                is_static=True,
            )
    return None


def _check_missing_auth(path: str, content: str) -> Optional[Finding]:
    lowered_path = path.lower()
    if any(marker in lowered_path for marker in UNAUTHENTICATED_ROUTE_MARKERS):
        return None
    lowered = content.lower()
    if any(marker in lowered for marker in AUTH_MARKERS):
        return None
    return Finding(
        category=Category.authorization,
        severity=Severity.medium,
        title="API Route Without Authentication Check",
        description="This API route does not appear to verify the caller's identity.",
        impact="Anyone can call this endpoint and reach the data or actions behind it.",
        recommendation="Check the session (for example with getServerSession()) at the start of the handler and reject unauthenticated requests.",
        file=path,
        confidence=0.7,
        is_static=True,
    )


def scan_file(source: SourceFile) -> list[Finding]:
    """Scan a single file; returns no findings for skipped files."""
    path = source.path
    content = source.content

    if should_skip(path):
        return []
    if len(content) > MAX_FILE_CHARS:
        logger.debug(f"Skipping {path}: {len(content)} chars exceeds limit")
        return []
    if is_binary_content(content):
        logger.debug(f"Skipping {path}: binary content")
        return []

    findings: list[Finding] = []
    lines = [cap_line(line.rstrip("\r")) for line in content.split("\n")]
    rules = [rule for rule in RULES if rule.applies_to(path)]

    for line_no, line in enumerate(lines, start=1):
        for rule in rules:
            if rule.match(line):
                findings.append(_finding_from_rule(rule, path, line_no, rule.snippet(line)))

    if is_api_route(path):
        exposure = _check_env_exposure(path, lines)
        if exposure:
            findings.append(exposure)
        missing_auth = _check_missing_auth(path, content)
        if missing_auth:
            findings.append(missing_auth)

    return findings


def _scan_file_isolated(source: SourceFile) -> list[Finding]:
    try:
        return scan_file(source)
    except Exception as e:
        logger.warning(f"Failed to scan {source.path}: {e}")
        return []


def scan_static(files: Sequence[SourceFile], max_workers: Optional[int] = None) -> list[Finding]:
    """Scan source files with the rule library.

    Files are scanned independently; a failure in one file is logged and
    contributes no findings. Results keep input file order regardless of
    max_workers.
    """
    workers = SCAN_WORKERS if max_workers is None else max_workers
    if workers > 1 and len(files) > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            per_file = list(executor.map(_scan_file_isolated, files))
    else:
        per_file = [_scan_file_isolated(source) for source in files]

    findings = [finding for file_findings in per_file for finding in file_findings]
    logger.info(f"Static scan: {len(files)} files, {len(findings)} findings")
    return findings
