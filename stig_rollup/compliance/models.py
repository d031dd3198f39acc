"""Compliance data models: catalog reference data and rollup output."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from stig_rollup.core.constants import Status


@dataclass(frozen=True)
class CciReference:
    """One NIST control index a CCI points at."""

    major_control: str
    index: str
    title: str = ""
    version: str = ""
    location: str = ""


@dataclass(frozen=True)
class CciItem:
    """A CCI and every control reference it carries."""

    cci_id: str
    references: Tuple[CciReference, ...] = ()
    definition: str = ""


@dataclass(frozen=True)
class ControlTuple:
    """Flattened ``(cci, control family, index, title)`` row of the catalog."""

    cci: str
    control: str
    index: str
    title: str = ""
    version: str = ""
    location: str = ""


@dataclass(frozen=True)
class ControlRecord:
    """NIST 800-53 control definition with its baseline memberships."""

    number: str
    title: str
    sub_control_number: str = ""
    low: bool = False
    moderate: bool = False
    high: bool = False
    pii: bool = False


@dataclass
class StatusRecord:
    """One checklist's merged status for one control."""

    checklist_id: str
    status: Status
    title: str = ""
    stig_type: str = ""
    stig_release: str = ""
    host_name: str = ""
    updated_on: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "checklistId": self.checklist_id,
            "status": self.status.value,
            "title": self.title,
            "stigType": self.stig_type,
            "stigRelease": self.stig_release,
            "hostName": self.host_name,
            "updatedOn": self.updated_on.isoformat() if self.updated_on else None,
        }


@dataclass
class ComplianceRecord:
    """Rolled-up status of one control family across a system's checklists."""

    control: str
    title: str
    sort_key: str
    records: List[StatusRecord] = field(default_factory=list)

    def record_for(self, checklist_id: str) -> Optional[StatusRecord]:
        for record in self.records:
            if record.checklist_id == checklist_id:
                return record
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "control": self.control,
            "title": self.title,
            "sortString": self.sort_key,
            "complianceRecords": [r.to_dict() for r in self.records],
        }
