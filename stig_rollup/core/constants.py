"""STIG Rollup constants module.

This module defines application constants, enumerations, and limits.
These values control file handling, aggregation fan-out, and the status
vocabulary shared with DISA STIG Viewer checklists.
"""

from __future__ import annotations

import platform
import sys
from enum import Enum
from typing import Optional


# ──────────────────────────────────────────────────────────────────────────────
# VERSION INFORMATION
# ──────────────────────────────────────────────────────────────────────────────

VERSION = "1.0.0"
BUILD_DATE = "2026-10-19"
APP_NAME = "STIG Rollup"


# ──────────────────────────────────────────────────────────────────────────────
# PLATFORM DETECTION
# ──────────────────────────────────────────────────────────────────────────────

IS_WINDOWS = platform.system() == "Windows"
PLATFORM = platform.system()
PYTHON_VERSION = sys.version_info
MIN_PYTHON_VERSION = (3, 9)


# ──────────────────────────────────────────────────────────────────────────────
# FILE OPERATION CONSTANTS
# ──────────────────────────────────────────────────────────────────────────────

LARGE_FILE_THRESHOLD = 50 * 1024 * 1024  # 50MB - encoding sniffed from a sample
MAX_RETRIES = 3  # Number of retry attempts for I/O operations
RETRY_DELAY = 0.5  # Seconds between retries
MAX_FILE_SIZE = 500 * 1024 * 1024  # 500MB maximum file size


# ──────────────────────────────────────────────────────────────────────────────
# CHARACTER ENCODINGS
# ──────────────────────────────────────────────────────────────────────────────

ENCODINGS = [
    "utf-8",
    "utf-8-sig",
    "utf-16",
    "cp1252",
    "latin-1",
]


# ──────────────────────────────────────────────────────────────────────────────
# PROCESSING LIMITS
# ──────────────────────────────────────────────────────────────────────────────

MAX_CHECKLISTS = 5000  # Maximum checklists in one aggregation call
AGG_WORKERS = 8  # Thread pool size for per-checklist extraction
KEEP_BACKUPS = 30  # Number of backup files to retain


# ──────────────────────────────────────────────────────────────────────────────
# SCAN RESULT CONSTANTS
# ──────────────────────────────────────────────────────────────────────────────

RULE_ID_PREFIX = "xccdf_mil.disa.stig_rule_"
NESSUS_TITLE_SUFFIX = "_STIG_SCAP"
EMPTY_MAC = "00:00:00:00:00:00"
UNKNOWN_HOST = "Unknown"


# ──────────────────────────────────────────────────────────────────────────────
# ENUMERATIONS
# ──────────────────────────────────────────────────────────────────────────────


class Status(str, Enum):
    """STIG finding status values (STIG Viewer compatible).

    The values are written to checklists exactly as declared here.
    Reading is lenient, see :meth:`coerce`.
    """

    NOT_A_FINDING = "NotAFinding"
    OPEN = "Open"
    NOT_REVIEWED = "Not_Reviewed"
    NOT_APPLICABLE = "Not_Applicable"

    @classmethod
    def coerce(cls, value: Optional[str]) -> "Status":
        """Map free-form status text to a member.

        Comparison ignores case and underscores, so ``open``,
        ``notapplicable`` and ``Not_Applicable`` are all accepted. Anything
        unrecognised (including empty text) is ``NOT_REVIEWED``.
        """
        if isinstance(value, cls):
            return value
        key = (value or "").strip().replace("_", "").lower()
        return _STATUS_KEYS.get(key, cls.NOT_REVIEWED)


_STATUS_KEYS = {m.value.replace("_", "").lower(): m for m in Status}


class ImpactLevel(str, Enum):
    """NIST 800-53 baseline a control set is filtered to."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["ImpactLevel"]:
        """Return the member for ``value`` or None when no filter applies."""
        text = (value or "").strip().lower()
        if not text:
            return None
        return cls(text)
