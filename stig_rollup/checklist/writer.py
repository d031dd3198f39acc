"""Checklist writer.

Two serializers share this module. :func:`serialize` builds the whole
document with ElementTree. :func:`render_asset_header` writes the fixed
``<?xml?><CHECKLIST><ASSET>..</ASSET>`` prefix byte-for-byte so the
canonicalizer can pair it with a structurally serialized STIGS section.
Neither adds indentation.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET

from stig_rollup.checklist.models import Asset, Checklist, Finding
from stig_rollup.xml.sanitizer import San
from stig_rollup.xml.schema import Sch


def _leaf(parent: ET.Element, tag: str, text: str) -> ET.Element:
    elem = ET.SubElement(parent, tag)
    elem.text = San.text(text)
    return elem


def _tostring(elem: ET.Element) -> str:
    return ET.tostring(elem, encoding="unicode", short_empty_elements=False)


def build_asset(asset: Asset) -> ET.Element:
    elem = ET.Element(Sch.ASSET_BLOCK)
    for tag, value in asset.items():
        _leaf(elem, tag, value)
    return elem


def build_finding(finding: Finding) -> ET.Element:
    vuln = ET.Element(Sch.VULN_BLOCK)
    for name, value in finding.attributes:
        stig_data = ET.SubElement(vuln, Sch.STIG_DATA)
        _leaf(stig_data, Sch.VULN_ATTRIBUTE, name)
        _leaf(stig_data, Sch.ATTRIBUTE_DATA, value)
    results = (
        finding.status.value,
        finding.finding_details,
        finding.comments,
        finding.severity_override,
        finding.severity_justification,
    )
    for tag, value in zip(Sch.RESULT_FIELDS, results):
        _leaf(vuln, tag, value)
    return vuln


def build_stigs(checklist: Checklist) -> ET.Element:
    """The ``<STIGS><iSTIG>`` subtree: STIG_INFO followed by every VULN."""
    stigs = ET.Element(Sch.STIGS)
    istig = ET.SubElement(stigs, Sch.ISTIG)
    info = ET.SubElement(istig, Sch.STIG_INFO)
    for name, value in checklist.stig_info:
        si_data = ET.SubElement(info, Sch.SI_DATA)
        _leaf(si_data, Sch.SID_NAME, name)
        _leaf(si_data, Sch.SID_DATA, value)
    for finding in checklist.findings:
        istig.append(build_finding(finding))
    return stigs


def serialize_stigs(checklist: Checklist) -> str:
    return _tostring(build_stigs(checklist))


def serialize(checklist: Checklist) -> str:
    """Full structural serialization with an XML declaration."""
    root = ET.Element(Sch.ROOT)
    root.append(build_asset(checklist.asset))
    root.append(build_stigs(checklist))
    return Sch.XML_DECLARATION + _tostring(root)


def render_asset_header(asset: Asset) -> str:
    """
    Hand-written document prefix up to and including ``</ASSET>``.

    Every ASSET field is emitted in STIG Viewer order, XML-escaped, with
    no whitespace between elements. The CHECKLIST element is left open.

    Example:
        >>> render_asset_header(Asset(host_name="web01"))[:62]
        '<?xml version="1.0" encoding="UTF-8"?><CHECKLIST><ASSET><ROLE>'
    """
    parts = [Sch.XML_DECLARATION, f"<{Sch.ROOT}>", f"<{Sch.ASSET_BLOCK}>"]
    for tag, value in asset.items():
        parts.append(f"<{tag}>{San.xml(value)}</{tag}>")
    parts.append(f"</{Sch.ASSET_BLOCK}>")
    return "".join(parts)


def render_document(checklist: Checklist) -> str:
    """Templated header, structural STIGS section, closing root tag."""
    return render_asset_header(checklist.asset) + serialize_stigs(checklist) + f"</{Sch.ROOT}>"
