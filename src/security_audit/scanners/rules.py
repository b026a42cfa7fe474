"""Line-level detector rules.

Each rule is an immutable value: compiled patterns plus the metadata that
goes into a finding. The static scanner applies every rule to every line
through one generic loop, so adding a detector means adding an entry here.
"""

import os
import re
from typing import NamedTuple, Optional

from ..models import Category, Severity
from .common import make_snippet, redact_secret

JS_TS_EXTENSIONS = frozenset({".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs"})


def _mask_secret(found: re.Match) -> str:
    whole = found.group(0)
    secret = found.groupdict().get("secret") or whole
    return whole.replace(secret, redact_secret(secret))


class Rule(NamedTuple):
    """A line detector with the metadata of the finding it produces."""

    id: str
    category: Category
    severity: Severity
    title: str
    description: str
    impact: str
    recommendation: str
    confidence: float
    patterns: tuple[re.Pattern, ...]
    exclude: tuple[re.Pattern, ...] = ()
    extensions: Optional[frozenset[str]] = None
    include_snippet: bool = True
    redact: bool = False  # values matched by this rule are masked in every snippet
    is_static: bool = True

    def applies_to(self, path: str) -> bool:
        if self.extensions is None:
            return True
        return os.path.splitext(path)[1].lower() in self.extensions

    def match(self, line: str) -> Optional[re.Match]:
        """Return the first pattern match on the line, unless an exclusion hits."""
        for pattern in self.patterns:
            found = pattern.search(line)
            if found:
                if any(ex.search(line) for ex in self.exclude):
                    return None
                return found
        return None

    def snippet(self, line: str) -> Optional[str]:
        """Snippet of the line with every detectable secret on it masked."""
        if not self.include_snippet:
            return None
        return make_snippet(redact_secrets(line))


RULES: tuple[Rule, ...] = (
    # Secrets
    Rule(
        id="hardcoded-api-key",
        category=Category.secrets,
        severity=Severity.critical,
        title="Hardcoded API Key Detected",
        description="An API key or secret key is hardcoded in source code.",
        impact="Anyone with access to the code or the shipped bundle can use this key to access paid services or private data.",
        recommendation="Move the key to an environment variable and rotate the exposed key immediately.",
        confidence=1.0,
        patterns=(
            re.compile(
                r'[\'"`](?P<secret>(?:sk_live_|pk_live_|api[_-]?key|secret[_-]?key)[a-zA-Z0-9_-]{20,})[\'"`]',
                re.IGNORECASE,
            ),
        ),
        redact=True,
    ),
    Rule(
        id="aws-access-key",
        category=Category.secrets,
        severity=Severity.critical,
        title="AWS Access Key Exposed",
        description="An AWS access key id is present in source code.",
        impact="Leaked AWS credentials allow attackers to use your AWS account, run up costs and read stored data.",
        recommendation="Deactivate the key in IAM, issue a new one and load it from the environment or a secrets manager.",
        confidence=1.0,
        patterns=(re.compile(r"(?P<secret>\bAKIA[0-9A-Z]{16})\b"),),
        redact=True,
    ),
    Rule(
        id="private-key",
        category=Category.secrets,
        severity=Severity.critical,
        title="Private Key in Source Code",
        description="A PEM-encoded private key is committed to the repository.",
        impact="Attackers can impersonate your servers, decrypt traffic or sign data as you.",
        recommendation="Remove the key from the repository and its history, then generate and deploy a new key pair.",
        confidence=1.0,
        patterns=(re.compile(r"-----BEGIN (?:RSA |EC |DSA |OPENSSH )?PRIVATE KEY-----"),),
        include_snippet=False,
    ),
    Rule(
        id="hardcoded-password",
        category=Category.secrets,
        severity=Severity.high,
        title="Hardcoded Password",
        description="A password is assigned a literal value in source code.",
        impact="Anyone who can read the code can log in with this password.",
        recommendation="Load the password from an environment variable or secrets manager and rotate it.",
        confidence=0.8,
        patterns=(
            re.compile(
                r'(?:password|passwd|pwd)\w*[\'"]?\s*[:=]\s*[\'"](?P<secret>[^\'"\s]{6,})[\'"]',
                re.IGNORECASE,
            ),
        ),
        exclude=(re.compile(r"placeholder|example|changeme|your[_-]|<[a-z_]+>|\*{4,}", re.IGNORECASE),),
        redact=True,
    ),
    Rule(
        id="hardcoded-jwt",
        category=Category.secrets,
        severity=Severity.high,
        title="Hardcoded JWT Token",
        description="A signed JSON Web Token is embedded in source code.",
        impact="A valid token lets anyone act as the user or service it was issued to until it expires.",
        recommendation="Remove the token, revoke it if possible, and obtain tokens at runtime.",
        confidence=0.9,
        patterns=(re.compile(r"(?P<secret>\beyJ[A-Za-z0-9_-]{10,}\.eyJ[A-Za-z0-9_-]{10,}\.[A-Za-z0-9_-]{10,})"),),
        redact=True,
    ),
    # XSS / code execution
    Rule(
        id="dangerous-inner-html",
        category=Category.csrf_xss,
        severity=Severity.high,
        title="Potential XSS via dangerouslySetInnerHTML",
        description="HTML is rendered through dangerouslySetInnerHTML without visible sanitization.",
        impact="If the HTML contains user-controlled data, attackers can run scripts in your users' browsers.",
        recommendation="Sanitize the HTML with DOMPurify before rendering, or render the content as text.",
        confidence=0.9,
        patterns=(re.compile(r"dangerouslySetInnerHTML"),),
        exclude=(re.compile(r"DOMPurify|sanitize", re.IGNORECASE),),
    ),
    Rule(
        id="dom-html-write",
        category=Category.csrf_xss,
        severity=Severity.high,
        title="Unsafe DOM HTML Assignment",
        description="Markup is written to the DOM with innerHTML or document.write.",
        impact="User-controlled strings written this way execute as script in the page.",
        recommendation="Use textContent or build elements with DOM APIs; sanitize any HTML that must be inserted.",
        confidence=0.85,
        patterns=(
            re.compile(r"\.innerHTML\s*=(?!=)"),
            re.compile(r"\bdocument\.write(?:ln)?\s*\("),
        ),
        exclude=(re.compile(r"DOMPurify|sanitize", re.IGNORECASE),),
    ),
    Rule(
        id="unsafe-eval",
        category=Category.csrf_xss,
        severity=Severity.critical,
        title="Use of eval()",
        description="eval() or the Function constructor executes a string as code.",
        impact="If any part of the string is attacker-controlled, they can run arbitrary code.",
        recommendation="Remove eval(); parse data with JSON.parse or use an explicit dispatch table.",
        confidence=1.0,
        patterns=(
            re.compile(r"\beval\s*\("),
            re.compile(r"\bnew\s+Function\s*\("),
        ),
    ),
    # Injection
    Rule(
        id="sql-injection",
        category=Category.api_security,
        severity=Severity.critical,
        title="Potential SQL Injection",
        description="A SQL statement is built by interpolating or concatenating values into the query string.",
        impact="Attackers can read, modify or delete database contents by injecting SQL through the interpolated value.",
        recommendation="Use parameterized queries or the query builder of your ORM instead of string interpolation.",
        confidence=0.85,
        patterns=(
            re.compile(r"`[^`]*\b(?:SELECT|INSERT|UPDATE|DELETE|DROP|UNION)\b[^`]*\$\{"),
            re.compile(r"`[^`]*\$\{[^`]*\b(?:SELECT|INSERT|UPDATE|DELETE|DROP|UNION)\b"),
            re.compile(r"\.(?:query|execute|raw|\$queryRawUnsafe|\$executeRawUnsafe)\s*\(\s*`[^`]*\$\{"),
            re.compile(r"\.(?:execute|executemany|raw)\s*\(\s*f['\"]"),
            re.compile(r"['\"](?:SELECT|INSERT|UPDATE|DELETE)\b[^'\"]*['\"]\s*\+"),
        ),
    ),
    Rule(
        id="command-injection",
        category=Category.api_security,
        severity=Severity.critical,
        title="Potential Command Injection",
        description="A shell command is built from interpolated or request-supplied values.",
        impact="Attackers can execute arbitrary commands on the server.",
        recommendation="Avoid the shell; pass arguments as an array to execFile/spawn or subprocess.run and validate inputs against an allowlist.",
        confidence=0.8,
        patterns=(
            re.compile(r"\b(?:exec|execSync|spawn|spawnSync)\s*\([^)]*(?:\$\{|req\.(?:body|query|params))"),
            re.compile(r"\bos\.(?:system|popen)\s*\(\s*f['\"]"),
            re.compile(r"\bos\.(?:system|popen)\s*\([^)]*request\.(?:args|form|json|get_json)"),
            re.compile(r"\bsubprocess\.(?:run|call|Popen|check_output|check_call)\s*\(\s*f['\"]"),
        ),
    ),
    Rule(
        id="path-traversal",
        category=Category.file_handling,
        severity=Severity.high,
        title="Potential Path Traversal",
        description="A filesystem path is built from request input.",
        impact="Attackers can read or overwrite files outside the intended directory using ../ sequences.",
        recommendation="Resolve the path and check it stays inside an allowed base directory, or map inputs to known file names.",
        confidence=0.8,
        patterns=(
            re.compile(r"\bpath\.(?:join|resolve)\s*\([^)]*req\.(?:body|query|params)"),
            re.compile(
                r"\b(?:readFile|readFileSync|writeFile|writeFileSync|createReadStream|sendFile|open)\s*\("
                r"[^)]*(?:req\.(?:body|query|params)|request\.(?:args|form|json|files))"
            ),
        ),
    ),
    # Configuration
    Rule(
        id="open-cors",
        category=Category.configuration,
        severity=Severity.medium,
        title="Overly Permissive CORS Configuration",
        description="CORS is configured to accept requests from any origin.",
        impact="Any website can call your API from a visitor's browser.",
        recommendation="Restrict allowed origins to the domains that need access.",
        confidence=0.95,
        patterns=(
            re.compile(r"\bcors\s*\(\s*\)"),
            re.compile(r"origin\s*:\s*['\"]\*['\"]"),
            re.compile(r"allow_origins\s*=\s*\[\s*['\"]\*['\"]"),
            re.compile(r"Access-Control-Allow-Origin['\"]?\s*[:,]\s*['\"]?\*", re.IGNORECASE),
        ),
    ),
    Rule(
        id="weak-hash",
        category=Category.authentication,
        severity=Severity.high,
        title="Weak Cryptographic Hash",
        description="MD5 or SHA-1 is used for hashing.",
        impact="These hashes are broken; passwords or tokens hashed with them can be cracked or forged.",
        recommendation="Use bcrypt, scrypt or argon2 for passwords and SHA-256 or better elsewhere.",
        confidence=1.0,
        patterns=(
            re.compile(r"createHash\s*\(\s*['\"](?:md5|sha1)['\"]", re.IGNORECASE),
            re.compile(r"\bhashlib\.(?:md5|sha1)\s*\("),
        ),
    ),
    Rule(
        id="insecure-http-url",
        category=Category.configuration,
        severity=Severity.medium,
        title="Insecure HTTP URL",
        description="A plain http:// URL is used instead of https://.",
        impact="Traffic to this URL can be read or modified by anyone on the network path.",
        recommendation="Switch the URL to https://.",
        confidence=0.9,
        patterns=(re.compile(r"http://(?!localhost|127\.0\.0\.1|0\.0\.0\.0|www\.w3\.org|schema\.org)"),),
        extensions=JS_TS_EXTENSIONS,
    ),
    Rule(
        id="insecure-cookie",
        category=Category.configuration,
        severity=Severity.medium,
        title="Insecure Cookie Configuration",
        description="A cookie is configured with httpOnly or secure disabled.",
        impact="Cookies readable from script or sent over plain HTTP can be stolen and used to hijack sessions.",
        recommendation="Set httpOnly and secure to true for session and auth cookies.",
        confidence=0.95,
        patterns=(re.compile(r"\b(?:httpOnly|secure)\s*[:=]\s*false\b", re.IGNORECASE),),
    ),
)


def get_rule(rule_id: str) -> Rule:
    for rule in RULES:
        if rule.id == rule_id:
            return rule
    raise KeyError(rule_id)


def redact_secrets(line: str) -> str:
    """Mask every value on the line that a secret rule would flag."""
    for rule in RULES:
        if rule.redact:
            for pattern in rule.patterns:
                line = pattern.sub(_mask_secret, line)
    return line
