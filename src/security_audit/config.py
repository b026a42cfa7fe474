"""Runtime settings for the security audit engine.

Every value can be overridden with a SECURITY_AUDIT_* environment variable.
"""

import os

LOG_LEVEL = os.getenv("SECURITY_AUDIT_LOG_LEVEL", "INFO").upper()

# Snippets attached to findings are cut to this many characters
SNIPPET_MAX_LENGTH = 100

# Lines are cut to this length before any pattern is applied
MAX_LINE_LENGTH = int(os.getenv("SECURITY_AUDIT_MAX_LINE_LENGTH", "2000"))

# Files larger than this (in characters) are skipped by the static scanner
MAX_FILE_CHARS = int(os.getenv("SECURITY_AUDIT_MAX_FILE_CHARS", "500000"))

# Thread pool size for the static scanner; 1 scans files inline
SCAN_WORKERS = int(os.getenv("SECURITY_AUDIT_WORKERS", "1"))

REPORT_SIGNATURE = "*Generated by Security Audit*"
