"""
SCAP scan result parsing and checklist merge.

``parse_scan_results`` reads DISA SCC or Nessus results; the merger
applies them to a blank template or an existing checklist.
"""

from __future__ import annotations

from stig_rollup.scan.dialects import DisaSccDialect, NessusDialect, ScanDialect, detect_dialect
from stig_rollup.scan.loader import parse_scan_results
from stig_rollup.scan.merger import generate_checklist, merge_into_checklist, provenance_note
from stig_rollup.scan.models import RuleResult, ScanResultSet

__all__ = [
    "DisaSccDialect",
    "NessusDialect",
    "ScanDialect",
    "detect_dialect",
    "parse_scan_results",
    "generate_checklist",
    "merge_into_checklist",
    "provenance_note",
    "RuleResult",
    "ScanResultSet",
]
