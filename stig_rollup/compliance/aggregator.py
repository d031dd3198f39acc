"""
NIST compliance rollup.

Walks every finding of every checklist in a system, maps each finding's
CCI references through the control catalog to NIST control families, and
merges the per-checklist status for each family. Families in the catalog
that no finding touched are reported with no status records so that the
output covers the whole baseline.

Extraction (parsed checklist -> list of control observations) runs on a
thread pool; the reduction runs on the calling thread in checklist order
so the output never depends on scheduling.
"""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Set, Union

from stig_rollup.checklist.models import Checklist, StoredChecklist
from stig_rollup.compliance.catalog import ControlCatalog
from stig_rollup.compliance.models import ComplianceRecord, ControlRecord, ControlTuple, StatusRecord
from stig_rollup.core.config import Cfg
from stig_rollup.core.constants import ImpactLevel, Status
from stig_rollup.core.logging import LOG
from stig_rollup.core.state import GLOBAL_STATE
from stig_rollup.exceptions import ValidationError

UNKNOWN_TITLE = "Unknown"


@dataclass(frozen=True)
class _Observation:
    """A finding status seen against one catalog row."""

    row: ControlTuple
    status: Status


# ──────────────────────────────────────────────────────────────────────────────
# Pure helpers
# ──────────────────────────────────────────────────────────────────────────────


def merge_status(old: Union[str, Status], new: Union[str, Status]) -> Status:
    """
    Combine two statuses seen for the same control on one checklist.

    Any Open wins. A record that is already Open or Not_Reviewed keeps its
    status. Otherwise a new Not_Reviewed demotes it to Not_Reviewed and
    anything else (NotAFinding, Not_Applicable) leaves it NotAFinding.

    >>> merge_status("NotAFinding", "Not_Reviewed").value
    'Not_Reviewed'
    """
    old, new = Status.coerce(old), Status.coerce(new)
    if new is Status.OPEN:
        return Status.OPEN
    if old not in (Status.OPEN, Status.NOT_REVIEWED):
        if new is Status.NOT_REVIEWED:
            return Status.NOT_REVIEWED
        return Status.NOT_A_FINDING
    return old


def control_sort_key(index: str) -> str:
    """
    Sortable form of a control index.

    Keeps the family prefix through the first hyphen, then the number up to
    the first space or period after it, zero-padding a single digit.

    >>> control_sort_key("AC-2 (4)")
    'AC-02'
    >>> control_sort_key("SC-12.1")
    'SC-12'
    """
    dash = index.find("-") + 1
    prefix = index[:dash]
    cut = index
    space = cut.find(" ", dash)
    if space > -1:
        cut = cut[:space]
    period = cut.find(".", dash)
    if period > -1:
        cut = cut[:period]
    number = cut[dash:]
    if len(number) == 1:
        number = "0" + number
    return prefix + number


def parent_index(index: str) -> int:
    """Position of the first space or period in ``index`` (-1 when neither is past column 0)."""
    hits = [pos for pos in (index.find(" "), index.find(".")) if pos > 0]
    return min(hits) if hits else -1


def finding_ids_for_control(checklist: Union[Checklist, StoredChecklist], cci_ids: Iterable[str]) -> List[str]:
    """Sorted distinct Vuln_Num of findings that reference any of ``cci_ids``."""
    if isinstance(checklist, StoredChecklist):
        checklist = checklist.checklist
    wanted = set(cci_ids)
    found = {
        finding.vuln_num
        for finding in checklist.findings
        if finding.vuln_num and wanted.intersection(finding.cci_refs)
    }
    return sorted(found)


# ──────────────────────────────────────────────────────────────────────────────
# Title resolution
# ──────────────────────────────────────────────────────────────────────────────


class _TitleResolver:
    """Looks up control titles in a baseline, caching misses."""

    def __init__(self, controls: Sequence[ControlRecord]):
        self.controls = controls
        self._cache: Dict[tuple, Optional[str]] = {}

    def resolve(self, family: str, index: str) -> Optional[str]:
        """
        Title for ``family``; falls back to the parent of ``index``.

        Returns None when the control is not in the baseline.
        """
        key = (family, index)
        if key not in self._cache:
            self._cache[key] = self._lookup(family, index)
        return self._cache[key]

    def _lookup(self, family: str, index: str) -> Optional[str]:
        compact = family.replace(" ", "")
        for record in self.controls:
            if record.number == compact:
                return record.title

        cut = parent_index(index)
        if cut <= 0:
            return None
        parent = index[:cut]
        for record in self.controls:
            if parent in (record.number, record.sub_control_number):
                return record.title or UNKNOWN_TITLE
        return None


# ──────────────────────────────────────────────────────────────────────────────
# Aggregation
# ──────────────────────────────────────────────────────────────────────────────


def _observe(
    stored: StoredChecklist, by_cci: Dict[str, List[ControlTuple]], cancel: threading.Event
) -> List[_Observation]:
    if cancel.is_set():
        raise InterruptedError("Compliance aggregation cancelled")
    observations = []
    for finding in stored.checklist.findings:
        if not finding.is_usable():
            continue
        for cci in finding.cci_refs:
            for row in by_cci.get(cci, ()):
                observations.append(_Observation(row, finding.status))
    return observations


def aggregate(
    checklists: Optional[Sequence[StoredChecklist]],
    catalog: ControlCatalog,
    impact_filter: Optional[Union[str, ImpactLevel]] = None,
    major_control: Optional[str] = None,
    *,
    pii: bool = False,
    cancel: Optional[threading.Event] = None,
    workers: Optional[int] = None,
) -> List[ComplianceRecord]:
    """
    Roll a system's checklists up into per-control compliance records.

    Args:
        checklists: Stored checklists of one system
        catalog: CCI and control reference data
        impact_filter: Baseline (low/moderate/high); None for every control
        major_control: Restrict the rollup to one family, e.g. ``AC-2``
        pii: Include privacy-flagged controls in the baseline
        cancel: Cancellation event (default: process shutdown event)
        workers: Extraction thread count (default: ``Cfg.AGG_WORKERS``)

    Returns:
        Records ordered by sort key, one per control family

    Raises:
        ValueError: If ``checklists`` is None
        ValidationError: If more than ``Cfg.MAX_CHECKLISTS`` are supplied
        InterruptedError: If ``cancel`` is set during the run
    """
    if checklists is None:
        raise ValueError("checklists must not be None")
    if not checklists:
        return []
    if len(checklists) > Cfg.MAX_CHECKLISTS:
        raise ValidationError(
            "Too many checklists for one rollup",
            {"count": len(checklists), "limit": Cfg.MAX_CHECKLISTS},
        )

    cancel = GLOBAL_STATE.shutdown if cancel is None else cancel
    pool_size = max(1, min(workers or Cfg.AGG_WORKERS, len(checklists)))

    with LOG.scope(op="compliance", major_control=major_control or "*"):
        rows = catalog.control_tuples(major_control)
        by_cci: Dict[str, List[ControlTuple]] = {}
        for row in rows:
            by_cci.setdefault(row.cci, []).append(row)

        resolver = _TitleResolver(catalog.control_records(impact_filter, pii))
        LOG.d(f"{len(rows)} catalog rows, {len(resolver.controls)} baseline controls, {pool_size} workers")

        with ThreadPoolExecutor(max_workers=pool_size, thread_name_prefix="rollup") as pool:
            observed = list(pool.map(lambda c: _observe(c, by_cci, cancel), checklists))

        compliance: Dict[str, ComplianceRecord] = {}
        orphans: Set[str] = set()
        for stored, observations in zip(checklists, observed):
            if cancel.is_set():
                raise InterruptedError("Compliance aggregation cancelled")
            for obs in observations:
                record = compliance.get(obs.row.control)
                if record is None:
                    title = resolver.resolve(obs.row.control, obs.row.index)
                    if title is None:
                        orphans.add(obs.row.control)
                        continue
                    record = ComplianceRecord(
                        control=obs.row.control,
                        title=title,
                        sort_key=control_sort_key(obs.row.index),
                    )
                    compliance[obs.row.control] = record
                _record_status(record, stored, obs.status)

        untouched = 0
        for row in rows:
            if row.control in compliance:
                continue
            title = resolver.resolve(row.control, row.control)
            if title is None:
                orphans.add(row.control)
                continue
            compliance[row.control] = ComplianceRecord(
                control=row.control,
                title=title,
                sort_key=control_sort_key(row.control),
            )
            untouched += 1

        if orphans:
            LOG.d(f"Controls outside the baseline: {', '.join(sorted(orphans))}")
        LOG.i(f"Rolled up {len(checklists)} checklists into {len(compliance)} controls ({untouched} without findings)")
        return sorted(compliance.values(), key=lambda r: r.sort_key)


def _record_status(record: ComplianceRecord, stored: StoredChecklist, status: Status) -> None:
    existing = record.record_for(stored.id)
    if existing is not None:
        existing.status = merge_status(existing.status, status)
        return
    record.records.append(
        StatusRecord(
            checklist_id=stored.id,
            status=status,
            title=stored.title,
            stig_type=stored.stig_type,
            stig_release=stored.stig_release,
            host_name=stored.checklist.asset.host_name,
            updated_on=stored.updated_on,
        )
    )
