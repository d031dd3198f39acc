"""
NIST control catalog and compliance rollup.

``aggregate`` maps checklist findings through the CCI catalog to NIST
800-53 control families and merges their status per checklist.
"""

from __future__ import annotations

from stig_rollup.compliance.aggregator import (
    aggregate,
    control_sort_key,
    finding_ids_for_control,
    merge_status,
)
from stig_rollup.compliance.catalog import ControlCatalog
from stig_rollup.compliance.models import (
    CciItem,
    CciReference,
    ComplianceRecord,
    ControlRecord,
    ControlTuple,
    StatusRecord,
)

__all__ = [
    "aggregate",
    "control_sort_key",
    "finding_ids_for_control",
    "merge_status",
    "ControlCatalog",
    "CciItem",
    "CciReference",
    "ComplianceRecord",
    "ControlRecord",
    "ControlTuple",
    "StatusRecord",
]
