"""
Carry review results from a re-uploaded checklist into the stored one.

When a host/benchmark pair is uploaded again, the stored checklist is kept
(identity, asset data, findings order) and only the per-finding results
are copied across by Vuln_Num.
"""

from __future__ import annotations

from typing import Any, Dict

from stig_rollup.checklist.models import Checklist, Finding
from stig_rollup.checklist.parser import parse
from stig_rollup.checklist.writer import serialize
from stig_rollup.core.constants import Status
from stig_rollup.core.logging import LOG

# A scan can only prove pass or fail; other statuses are left to reviewers
SCAN_CARRIED_STATUSES = frozenset([Status.OPEN, Status.NOT_A_FINDING])


def apply_checklist_update(stored_xml: str, incoming_xml: str, from_scan: bool) -> str:
    """
    Merge ``incoming_xml`` results into ``stored_xml`` and re-serialize.

    Args:
        stored_xml: Checklist already held for this host and benchmark
        incoming_xml: Newly uploaded checklist (or one generated from a scan)
        from_scan: True when ``incoming_xml`` was seeded from scan results

    Returns:
        The stored checklist with updated findings, fully re-serialized
    """
    with LOG.scope(op="update", from_scan=from_scan):
        stored = parse(stored_xml)
        incoming = parse(incoming_xml)
        stats = update_checklist(stored, incoming, from_scan)
        LOG.i(f"Updated {stats['updated']} findings, skipped {stats['skipped']}")
        return serialize(stored)


def update_checklist(stored: Checklist, incoming: Checklist, from_scan: bool) -> Dict[str, Any]:
    """In-place variant of :func:`apply_checklist_update`. Returns counters."""
    by_vuln: Dict[str, Finding] = {}
    for finding in stored.findings:
        by_vuln.setdefault(finding.vuln_num, finding)

    updated = skipped = 0
    for new in incoming.findings:
        old = by_vuln.get(new.vuln_num) if new.vuln_num else None
        if old is None:
            skipped += 1
            continue
        if from_scan and new.status not in SCAN_CARRIED_STATUSES:
            skipped += 1
            continue

        old.status = new.status
        old.finding_details = new.finding_details
        if not from_scan:
            old.comments = new.comments
            old.severity_override = new.severity_override
            old.severity_justification = new.severity_justification
        updated += 1

    return {"ok": True, "updated": updated, "skipped": skipped}
