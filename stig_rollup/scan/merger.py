"""
Merge SCAP rule outcomes into a checklist.

A scan can seed a brand-new checklist from a blank benchmark template
(:func:`generate_checklist`) or refresh an existing checklist
(:func:`merge_into_checklist`). Either way only findings whose Rule_Ver
matches a rule result are touched.
"""

from __future__ import annotations

from typing import Dict, Optional, Tuple

from stig_rollup.checklist.models import Asset, Checklist
from stig_rollup.checklist.parser import parse
from stig_rollup.checklist.writer import serialize
from stig_rollup.core.constants import Status
from stig_rollup.core.logging import LOG
from stig_rollup.scan.models import ScanResultSet
from stig_rollup.templates.store import TemplateStore
from stig_rollup.xml.schema import Sch

# scan outcome (lower case) -> (status, text written after "Result: ")
OUTCOMES: Dict[str, Tuple[Status, str]] = {
    Sch.RESULT_FAIL: (Status.OPEN, "fail"),
    Sch.RESULT_PASS: (Status.NOT_A_FINDING, "pass"),
    Sch.RESULT_NOT_APPLICABLE: (Status.NOT_APPLICABLE, "Not Applicable"),
}


def provenance_note(results: ScanResultSet, outcome: str) -> str:
    """The three-line FINDING_DETAILS text written for a scanned finding."""
    return f"Tool: {results.scan_tool}\nTime: {results.scan_time}\nResult: {outcome}"


def apply_host_identity(asset: Asset, results: ScanResultSet) -> None:
    """Copy scan host facts onto ``asset``; empty scan values never blank a field."""
    if results.hostname:
        asset.host_name = results.hostname
    if results.ip_address:
        asset.host_ip = results.ip_address
    if results.mac_address:
        asset.host_mac = results.mac_address
    if results.fqdn:
        asset.host_fqdn = results.fqdn


def apply_results(checklist: Checklist, results: ScanResultSet) -> int:
    """Set status and details on matching findings. Returns how many changed."""
    changed = 0
    for finding in checklist.findings:
        if not (finding.attributes.has(Sch.RULE_VER) and finding.attributes.has(Sch.VULN_NUM)):
            continue
        match = results.result_for(finding.rule_ver)
        if match is None:
            continue
        outcome = OUTCOMES.get(match.result.strip().lower())
        if outcome is None:
            LOG.d(f"Ignoring '{match.result}' outcome for {finding.rule_ver}")
            continue
        finding.status, label = outcome
        finding.finding_details = provenance_note(results, label)
        changed += 1
    return changed


def merge_into_checklist(results: ScanResultSet, checklist_xml: str, is_new_checklist: bool) -> str:
    """
    Merge scan outcomes into ``checklist_xml`` and return the re-serialized document.

    ``fail`` opens a finding, ``pass`` closes it, ``notapplicable`` marks it
    Not_Applicable; any other outcome, and findings without a matching
    Rule_Ver, are left as they were.

    Raises:
        ParseError: If ``checklist_xml`` is not well-formed XML
    """
    with LOG.scope(op="merge_scan", new_checklist=is_new_checklist, title=results.title):
        checklist = parse(checklist_xml)
        apply_host_identity(checklist.asset, results)
        changed = apply_results(checklist, results)
        LOG.i(f"Applied {changed} of {len(results.rule_results)} rule results")
        return serialize(checklist)


def generate_checklist(results: ScanResultSet, templates: TemplateStore) -> str:
    """
    Seed a new checklist from the blank template for the scanned benchmark.

    Returns an empty string when the scan has no title or no template
    matches it.
    """
    if not results.has_title:
        return ""
    template: Optional[str] = templates.template_for_title(results.title)
    if not template:
        LOG.w(f"No checklist template for benchmark '{results.title}'")
        return ""
    return merge_into_checklist(results, template, True)
