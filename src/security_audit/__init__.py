"""Pattern and heuristic security audit with free and full disclosure tiers."""

from .engine import run_full_audit, run_partial_scan, run_scan
from .report import export_markdown

__all__ = ["run_scan", "run_partial_scan", "run_full_audit", "export_markdown"]
