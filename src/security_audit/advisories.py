"""Known vulnerable npm packages.

A static snapshot; matching is by package name only.
"""

from typing import NamedTuple, Optional

from .models import Severity


class Advisory(NamedTuple):
    severity: Severity
    cve: Optional[str]
    fix_version: Optional[str]
    description: str


KNOWN_VULNERABLE_PACKAGES: dict[str, Advisory] = {
    "lodash": Advisory(Severity.high, "CVE-2021-23337", "4.17.21", "Prototype pollution vulnerability"),
    "axios": Advisory(Severity.medium, "CVE-2023-45857", "1.6.0", "Cross-site request forgery vulnerability"),
    "express": Advisory(Severity.medium, "CVE-2024-29041", "4.19.2", "Open redirect vulnerability"),
    "jsonwebtoken": Advisory(Severity.high, "CVE-2022-23529", "9.0.0", "Key confusion attack"),
    "minimist": Advisory(Severity.critical, "CVE-2021-44906", "1.2.6", "Prototype pollution"),
    "node-fetch": Advisory(Severity.medium, "CVE-2022-0235", "2.6.7", "SSRF vulnerability"),
    "got": Advisory(Severity.medium, "CVE-2022-33987", "12.1.0", "SSRF redirect vulnerability"),
    "shell-quote": Advisory(Severity.critical, "CVE-2021-42740", "1.7.3", "Command injection"),
    "tar": Advisory(Severity.high, "CVE-2021-37713", "6.1.11", "Arbitrary file overwrite"),
    "moment": Advisory(Severity.medium, None, "2.29.4", "ReDoS vulnerability"),
    "underscore": Advisory(Severity.high, "CVE-2021-23358", "1.13.6", "Code injection"),
    "qs": Advisory(Severity.high, "CVE-2022-24999", "6.11.0", "Prototype pollution"),
}
