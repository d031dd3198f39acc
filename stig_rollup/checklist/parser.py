"""Checklist parser: raw STIG Viewer XML to :class:`Checklist`."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import List, Optional, Tuple

from stig_rollup.checklist.models import Asset, AttributeList, Checklist, Finding
from stig_rollup.core.constants import Status
from stig_rollup.core.logging import LOG
from stig_rollup.xml.schema import Sch
from stig_rollup.xml.utils import XmlUtils


def parse(raw: str) -> Checklist:
    """
    Parse checklist XML into a fresh :class:`Checklist`.

    Tabs are stripped before parsing. A document lacking any of the ASSET,
    STIG_INFO or iSTIG blocks is treated as junk and yields an empty
    checklist. Unknown elements are ignored.

    Raises:
        ParseError: Only when the text is not well-formed XML
    """
    root = XmlUtils.parse(XmlUtils.strip_tabs(raw))
    return parse_element(root)


def parse_element(root: ET.Element) -> Checklist:
    """Build a :class:`Checklist` from an already parsed root element."""
    asset_elem = _first(root, Sch.ASSET_BLOCK)
    info_elem = _first(root, Sch.STIG_INFO)
    istig_elem = _first(root, Sch.ISTIG)

    if asset_elem is None or info_elem is None or istig_elem is None:
        LOG.d(
            "Checklist missing required sections "
            f"(asset={asset_elem is not None}, stig_info={info_elem is not None}, "
            f"istig={istig_elem is not None}); returning empty checklist"
        )
        return Checklist()

    return Checklist(
        asset=_parse_asset(asset_elem),
        stig_info=_parse_stig_info(info_elem),
        findings=[_parse_finding(vuln) for vuln in root.iter(Sch.VULN_BLOCK)],
    )


def _first(root: ET.Element, tag: str) -> Optional[ET.Element]:
    if root.tag == tag:
        return root
    return root.find(f".//{tag}")


def _parse_asset(elem: ET.Element) -> Asset:
    asset = Asset()
    known = set(Sch.ASSET)
    for child in elem:
        if child.tag in known:
            setattr(asset, Asset.field_for(child.tag), XmlUtils.text(child))
    return asset


def _parse_stig_info(elem: ET.Element) -> List[Tuple[str, str]]:
    pairs: List[Tuple[str, str]] = []
    for si_data in elem.findall(Sch.SI_DATA):
        pairs.append(
            (
                XmlUtils.child_text(si_data, Sch.SID_NAME),
                XmlUtils.child_text(si_data, Sch.SID_DATA),
            )
        )
    return pairs


def _parse_finding(vuln: ET.Element) -> Finding:
    attributes = AttributeList()
    finding = Finding(attributes=attributes)

    for child in vuln:
        tag = child.tag
        if tag == Sch.STIG_DATA:
            attributes.add(
                XmlUtils.child_text(child, Sch.VULN_ATTRIBUTE),
                XmlUtils.child_text(child, Sch.ATTRIBUTE_DATA),
            )
        elif tag == Sch.STATUS:
            finding.status = Status.coerce(XmlUtils.text(child))
        elif tag == Sch.FINDING_DETAILS:
            finding.finding_details = XmlUtils.text(child)
        elif tag == Sch.COMMENTS:
            finding.comments = XmlUtils.text(child)
        elif tag == Sch.SEVERITY_OVERRIDE:
            finding.severity_override = XmlUtils.text(child)
        elif tag == Sch.SEVERITY_JUSTIFICATION:
            finding.severity_justification = XmlUtils.text(child)

    return finding
