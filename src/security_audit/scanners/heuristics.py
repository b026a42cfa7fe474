"""Corpus-wide heuristic checks.

Unlike the rule library these cannot be decided line by line: each
predicate looks at the whole set of files and fires at most once. The
findings carry no location and are marked as non-static.
"""

import logging
import re
from typing import Callable, NamedTuple, Sequence

from ..models import Category, Finding, Severity, SourceFile
from .common import is_api_route, normalize_path

logger = logging.getLogger(__name__)

RATE_LIMIT_MARKER = re.compile(r"rate[-_ ]?limit|slowapi|throttl", re.IGNORECASE)
CSRF_MARKER = re.compile(r"csrf|xsrf|csurf", re.IGNORECASE)
USER_INPUT_MARKER = re.compile(r"req\.(?:body|query|params)|request\.(?:json|form|args|get_json)")
VALIDATION_MARKER = re.compile(
    r"(?i:\b(?:zod|yup|joi|ajv|pydantic|marshmallow|validator)\b)|"
    r"(?<!JSON)\.(?:safeParse|parse)\(|"
    r"\.validate\("
)
SECURITY_HEADER_MARKER = re.compile(
    r"helmet|X-Frame-Options|X-Content-Type-Options|Content-Security-Policy|Strict-Transport-Security",
    re.IGNORECASE,
)
ERROR_DETAIL_MARKER = re.compile(r"\.stack\b|\berror\.message\b|\berr\.message\b|traceback\.format_exc")
RESPONSE_MARKER = re.compile(r"\bres\.|NextResponse\.json|Response\.json|jsonify\(|HTTPException\(")
AI_PROVIDER_MARKER = re.compile(
    r"openai|anthropic|langchain|@google/generative-ai|google\.genai|gpt-|claude",
    re.IGNORECASE,
)
PROMPT_INPUT_MARKER = re.compile(
    r"req\.body|request\.(?:json|form|get_json)|"
    r"\buser(?:Input|Message|Prompt|_input|_message|_prompt)\b|"
    r"role['\"]?\s*:\s*['\"]user['\"]"
)
PROMPT_FIELD_MARKER = re.compile(r"\b(?:prompt|messages?|content)\b")
TOOL_MARKER = re.compile(r"\btools\b|tool_choice|tool_calls|function_call")
EXEC_CAPABILITY_MARKER = re.compile(
    r"\bexec(?:Sync)?\b|\bspawn\b|child_process|subprocess|writefile|write_file|fs\.write|run_command",
    re.IGNORECASE,
)


def _any_file(files: Sequence[SourceFile], pattern: re.Pattern) -> bool:
    return any(pattern.search(f.content) for f in files)


def _has_ai_provider(files: Sequence[SourceFile]) -> bool:
    return _any_file(files, AI_PROVIDER_MARKER)


def missing_rate_limiting(files: Sequence[SourceFile]) -> bool:
    has_api_routes = any(is_api_route(f.path) for f in files)
    return has_api_routes and not _any_file(files, RATE_LIMIT_MARKER)


def missing_csrf_protection(files: Sequence[SourceFile]) -> bool:
    has_form_handling = any(
        ("action=" in f.content and "method=" in f.content) or "POST" in f.content
        for f in files
    )
    return has_form_handling and not _any_file(files, CSRF_MARKER)


def missing_input_validation(files: Sequence[SourceFile]) -> bool:
    return _any_file(files, USER_INPUT_MARKER) and not _any_file(files, VALIDATION_MARKER)


def missing_security_headers(files: Sequence[SourceFile]) -> bool:
    if _any_file(files, SECURITY_HEADER_MARKER):
        return False
    return not any(
        "next.config" in normalize_path(f.path) and "headers" in f.content
        for f in files
    )


def verbose_errors(files: Sequence[SourceFile]) -> bool:
    return any(
        ERROR_DETAIL_MARKER.search(f.content) and RESPONSE_MARKER.search(f.content)
        for f in files
    )


def prompt_injection_risk(files: Sequence[SourceFile]) -> bool:
    if not _has_ai_provider(files):
        return False
    return any(
        PROMPT_INPUT_MARKER.search(f.content) and PROMPT_FIELD_MARKER.search(f.content)
        for f in files
    )


def tool_execution_risk(files: Sequence[SourceFile]) -> bool:
    if not _has_ai_provider(files):
        return False
    return any(
        TOOL_MARKER.search(f.content) and EXEC_CAPABILITY_MARKER.search(f.content)
        for f in files
    )


class Heuristic(NamedTuple):
    check: Callable[[Sequence[SourceFile]], bool]
    category: Category
    severity: Severity
    title: str
    description: str
    impact: str
    recommendation: str
    confidence: float

    def to_finding(self) -> Finding:
        return Finding(
            category=self.category,
            severity=self.severity,
            title=self.title,
            description=self.description,
            impact=self.impact,
            recommendation=self.recommendation,
            confidence=self.confidence,
            is_static=False,
        )


# Evaluated in this order
HEURISTICS: tuple[Heuristic, ...] = (
    Heuristic(
        check=missing_rate_limiting,
        category=Category.rate_limiting,
        severity=Severity.medium,
        title="No Rate Limiting Detected",
        description="API routes do not appear to implement rate limiting, which could allow abuse.",
        impact="Attackers could overwhelm your API with requests, causing denial of service or incurring excessive costs.",
        recommendation="Implement rate limiting using middleware like express-rate-limit, slowapi, or your platform's built-in rate limiting.",
        confidence=0.75,
    ),
    Heuristic(
        check=missing_csrf_protection,
        category=Category.csrf_xss,
        severity=Severity.medium,
        title="CSRF Protection Not Detected",
        description="Forms or POST endpoints exist without apparent CSRF protection.",
        impact="Attackers could trick users into performing unwanted actions through malicious websites.",
        recommendation="Implement CSRF tokens for state-changing operations. Next.js Server Actions include built-in CSRF protection.",
        confidence=0.7,
    ),
    Heuristic(
        check=missing_input_validation,
        category=Category.api_security,
        severity=Severity.high,
        title="Input Validation Not Detected",
        description="User input is processed without apparent validation library usage.",
        impact="Malformed or malicious input could cause unexpected behavior, crashes, or security vulnerabilities.",
        recommendation="Validate all user input with a schema library such as Zod, Yup, Joi or Pydantic before processing.",
        confidence=0.65,
    ),
    Heuristic(
        check=missing_security_headers,
        category=Category.configuration,
        severity=Severity.medium,
        title="Security Headers Not Configured",
        description="No security headers configuration found (Helmet, CSP, X-Frame-Options, etc.).",
        impact="Missing security headers leave the application vulnerable to clickjacking, MIME sniffing, and XSS attacks.",
        recommendation="Configure security headers in next.config.js or use Helmet middleware. Include X-Frame-Options, CSP, and X-Content-Type-Options.",
        confidence=0.8,
    ),
    Heuristic(
        check=verbose_errors,
        category=Category.configuration,
        severity=Severity.low,
        title="Verbose Error Messages",
        description="Error details including stack traces may be exposed to clients.",
        impact="Detailed error messages help attackers understand your application structure and find vulnerabilities.",
        recommendation="Return generic error messages to clients. Log detailed errors server-side only.",
        confidence=0.7,
    ),
    Heuristic(
        check=prompt_injection_risk,
        category=Category.ai_specific,
        severity=Severity.high,
        title="Potential Prompt Injection Risk",
        description="User input appears to be passed to AI models, which could allow prompt injection attacks.",
        impact="Attackers could manipulate AI responses, bypass restrictions, or extract sensitive information from system prompts.",
        recommendation="Sanitize and validate user input before passing to AI. Use separate user and system message contexts. Consider output filtering.",
        confidence=0.75,
    ),
    Heuristic(
        check=tool_execution_risk,
        category=Category.ai_specific,
        severity=Severity.medium,
        title="AI Tool Execution Risk",
        description="AI appears to have access to tools that can modify files or execute commands.",
        impact="If not properly sandboxed, AI tool calls could be manipulated to perform unauthorized actions.",
        recommendation="Validate all tool inputs. Implement strict sandboxing. Use allowlists for file paths and commands.",
        confidence=0.7,
    ),
)


def scan_heuristics(files: Sequence[SourceFile]) -> list[Finding]:
    """Run every corpus-wide heuristic over all supplied files."""
    findings = [h.to_finding() for h in HEURISTICS if h.check(files)]
    logger.info(f"Heuristic scan: {len(findings)} findings")
    return findings
