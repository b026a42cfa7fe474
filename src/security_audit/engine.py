"""Entry points that run the scanners and build the disclosure views."""

import logging
from typing import Any, Mapping, Optional, Sequence, Union

from .aggregator import aggregate
from .disclosure import to_full_audit, to_partial_scan
from .models import AuditSummary, Finding, FullAudit, PartialScan, SourceFile
from .scanners import scan_dependencies, scan_heuristics, scan_static

logger = logging.getLogger(__name__)

FileInput = Union[SourceFile, Mapping[str, Any]]


def _coerce_files(files: Sequence[FileInput]) -> list[SourceFile]:
    return [f if isinstance(f, SourceFile) else SourceFile.model_validate(f) for f in files]


def run_scan(
    files: Sequence[FileInput],
    manifest_json: Optional[str] = None,
    max_workers: Optional[int] = None,
) -> tuple[AuditSummary, list[Finding]]:
    """Run all scanners and return the summary with ordered findings.

    Dependency scanning is skipped when no manifest is given.
    """
    sources = _coerce_files(files)
    static = scan_static(sources, max_workers=max_workers)
    dependency = scan_dependencies(manifest_json) if manifest_json is not None else []
    heuristic = scan_heuristics(sources)
    return aggregate(static, dependency, heuristic)


def run_partial_scan(files: Sequence[FileInput], manifest_json: Optional[str] = None) -> PartialScan:
    _, findings = run_scan(files, manifest_json)
    return to_partial_scan(findings)


def run_full_audit(
    project_id: str,
    files: Sequence[FileInput],
    manifest_json: Optional[str] = None,
    audit_id: Optional[str] = None,
) -> FullAudit:
    _, findings = run_scan(files, manifest_json)
    return to_full_audit(findings, project_id, audit_id=audit_id)
