"""Core infrastructure modules.

Configuration, logging, shutdown coordination and dependency detection
shared by every other package.
"""

from __future__ import annotations

from stig_rollup.core.constants import (
    VERSION,
    BUILD_DATE,
    APP_NAME,
    Status,
    ImpactLevel,
    ENCODINGS,
    MAX_FILE_SIZE,
    MAX_CHECKLISTS,
    AGG_WORKERS,
    KEEP_BACKUPS,
)
from stig_rollup.core.state import GlobalState, GLOBAL_STATE
from stig_rollup.core.deps import Deps
from stig_rollup.core.config import Cfg, CFG
from stig_rollup.core.logging import Log, LOG

__all__ = [
    "VERSION",
    "BUILD_DATE",
    "APP_NAME",
    "Status",
    "ImpactLevel",
    "ENCODINGS",
    "MAX_FILE_SIZE",
    "MAX_CHECKLISTS",
    "AGG_WORKERS",
    "KEEP_BACKUPS",
    "GlobalState",
    "GLOBAL_STATE",
    "Deps",
    "Cfg",
    "CFG",
    "Log",
    "LOG",
]
