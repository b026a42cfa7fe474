"""Security scanners for source files and dependency manifests."""

from .static import scan_static
from .dependencies import scan_dependencies
from .heuristics import scan_heuristics

__all__ = ["scan_static", "scan_dependencies", "scan_heuristics"]
