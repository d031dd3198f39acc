"""STIG Rollup - checklist ingestion and NIST control compliance rollup.

Turns DISA STIG Viewer checklists and SCAP scan results into a canonical
model and rolls per-host findings up to one status per NIST 800-53 control.

Package Structure:
    core/           - Core infrastructure (config, logging, state management)
    xml/            - XML schema constants, sanitizer, utilities
    io/             - File operations (atomic writes, encoding detection)
    checklist/      - Checklist model, parser and writer
    processor/      - Field canonicalization and checklist updates
    scan/           - SCAP scan result parsing and checklist merge
    compliance/     - Control catalog and compliance aggregation
    templates/      - Blank checklist template store
    ui/             - Command-line interface
"""

from __future__ import annotations

from stig_rollup.core.constants import VERSION, BUILD_DATE, APP_NAME
from stig_rollup.exceptions import RollupError, ValidationError, FileError, ParseError

__version__ = VERSION
__build_date__ = BUILD_DATE
__app_name__ = APP_NAME

__all__ = [
    "VERSION",
    "BUILD_DATE",
    "APP_NAME",
    "RollupError",
    "ValidationError",
    "FileError",
    "ParseError",
]
