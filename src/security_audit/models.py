"""Pydantic models for security audit findings and results."""

from datetime import datetime, timezone
from enum import Enum
from typing import Literal, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Severity(str, Enum):
    """Severity levels, most severe first."""

    critical = "critical"
    high = "high"
    medium = "medium"
    low = "low"
    info = "info"


SEVERITY_ORDER: dict[Severity, int] = {
    Severity.critical: 0,
    Severity.high: 1,
    Severity.medium: 2,
    Severity.low: 3,
    Severity.info: 4,
}


class Category(str, Enum):
    """Security concern a finding belongs to."""

    authentication = "authentication"
    authorization = "authorization"
    api_security = "api-security"
    rate_limiting = "rate-limiting"
    csrf_xss = "csrf-xss"
    file_handling = "file-handling"
    dependencies = "dependencies"
    secrets = "secrets"
    configuration = "configuration"
    ai_specific = "ai-specific"


CATEGORY_LABELS: dict[Category, str] = {
    Category.authentication: "Authentication",
    Category.authorization: "Authorization",
    Category.api_security: "API Security",
    Category.rate_limiting: "Rate Limiting",
    Category.csrf_xss: "CSRF/XSS",
    Category.file_handling: "File Handling",
    Category.dependencies: "Dependencies",
    Category.secrets: "Secrets Exposure",
    Category.configuration: "Configuration",
    Category.ai_specific: "AI Risks",
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SourceFile(BaseModel):
    """One file supplied for scanning."""

    path: str = Field(..., description="Project-relative file path")
    content: str = Field(..., description="Full text content of the file")


class Finding(BaseModel):
    """A single detected security issue."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    id: str = Field(default_factory=lambda: f"finding_{uuid4().hex}", description="Opaque unique id")
    category: Category
    severity: Severity
    title: str = Field(..., description="Short human-readable title")
    description: str = Field(..., description="What was detected")
    impact: str = Field(..., description="What an attacker could do with it")
    recommendation: str = Field(..., description="How to fix it")
    file: Optional[str] = Field(default=None, description="File the issue was found in")
    line: Optional[int] = Field(default=None, ge=1, description="1-based line number")
    code: Optional[str] = Field(default=None, max_length=256, description="Offending code snippet")
    cve: Optional[str] = Field(default=None, description="CVE identifier for dependency findings")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Detector certainty")
    is_static: bool = Field(..., alias="isStatic", description="True for pattern matches, false for heuristics")


class AuditSummary(BaseModel):
    """Finding counts by severity."""

    critical: int = Field(default=0, ge=0)
    high: int = Field(default=0, ge=0)
    medium: int = Field(default=0, ge=0)
    low: int = Field(default=0, ge=0)
    info: int = Field(default=0, ge=0)
    total: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def check_total(self) -> "AuditSummary":
        counted = self.critical + self.high + self.medium + self.low + self.info
        if self.total != counted:
            raise ValueError(f"total {self.total} does not match severity counts {counted}")
        return self


class PreviewFinding(BaseModel):
    """The only finding detail exposed by a partial scan."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    category: Category
    severity: Severity
    title: str


class PartialScan(BaseModel):
    """Free-tier result: counts, categories and a single redacted preview.

    Carries no description, impact, recommendation, location, code or CVE
    of any finding, and rejects any attempt to add them.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    has_issues: bool = Field(..., alias="hasIssues")
    summary: AuditSummary
    categories: list[Category] = Field(default_factory=list, description="Distinct categories, most severe first")
    preview_finding: Optional[PreviewFinding] = Field(default=None, alias="previewFinding")
    scanned_at: datetime = Field(default_factory=_utcnow, alias="scannedAt")


class FullAudit(BaseModel):
    """Paid-tier result: every finding with full detail."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: f"audit_{uuid4().hex}")
    project_id: str = Field(..., alias="projectId")
    status: Literal["pending", "complete", "failed"] = "complete"
    summary: AuditSummary
    findings: list[Finding] = Field(default_factory=list)
    scanned_at: datetime = Field(default_factory=_utcnow, alias="scannedAt")
    completed_at: Optional[datetime] = Field(default=None, alias="completedAt")
    export_format: Optional[Literal["markdown", "pdf"]] = Field(default=None, alias="exportFormat")


class AuditRequest(BaseModel):
    """Input accepted by the sandbox entrypoint."""

    model_config = ConfigDict(populate_by_name=True)

    project_id: str = Field(default="local", alias="projectId")
    files: list[SourceFile] = Field(default_factory=list)
    package_json: Optional[str] = Field(default=None, alias="packageJson", description="Raw package.json text")
    mode: Literal["partial", "full"] = "partial"
    audit_id: Optional[str] = Field(default=None, alias="auditId")
    export: Optional[Literal["markdown"]] = None
