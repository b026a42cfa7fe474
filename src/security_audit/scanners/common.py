"""Shared helpers for the scanners."""

from ..config import MAX_LINE_LENGTH, SNIPPET_MAX_LENGTH

# Build output and dependency directories never contain project source
DEFAULT_SKIP_DIRS: frozenset[str] = frozenset({
    "node_modules",
    ".git",
    "dist",
    "build",
    ".next",
    ".nuxt",
    "coverage",
    "vendor",
    "__pycache__",
    ".venv",
    "venv",
    ".turbo",
    ".vercel",
    "out",
})

TEST_DIRS: frozenset[str] = frozenset({"tests", "test", "__tests__"})
TEST_NAME_MARKERS = (".test.", ".spec.", "_test.")


def normalize_path(path: str) -> str:
    """Return the path with forward slashes and a single leading slash."""
    normalized = path.replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return "/" + normalized.lstrip("/")


def _split(path: str) -> tuple[list[str], str]:
    parts = [p for p in normalize_path(path).split("/") if p]
    if not parts:
        return [], ""
    return parts[:-1], parts[-1]


def in_skipped_dir(path: str) -> bool:
    dirs, _ = _split(path)
    return any(d in DEFAULT_SKIP_DIRS for d in dirs)


def is_test_file(path: str) -> bool:
    """Check if a path looks like a test file or lives in a test directory."""
    dirs, name = _split(path)
    if any(d in TEST_DIRS for d in dirs):
        return True
    if name.startswith("test_"):
        return True
    return any(marker in name for marker in TEST_NAME_MARKERS)


def should_skip(path: str) -> bool:
    return in_skipped_dir(path) or is_test_file(path)


def is_binary_content(content: str) -> bool:
    """Treat content with a NUL character near the start as binary."""
    return "\x00" in content[:1024]


def is_api_route(path: str) -> bool:
    return "/api/" in normalize_path(path)


def cap_line(line: str) -> str:
    return line[:MAX_LINE_LENGTH]


def make_snippet(line: str) -> str:
    snippet = line.strip()
    if len(snippet) > SNIPPET_MAX_LENGTH:
        snippet = snippet[:SNIPPET_MAX_LENGTH] + "..."
    return snippet


def redact_secret(value: str) -> str:
    """Redact a secret value, showing only first 4 and last 4 chars."""
    if len(value) <= 8:
        return "*" * len(value)
    return f"{value[:4]}{'*' * (len(value) - 8)}{value[-4:]}"
