"""
SCAP result dialects.

DISA SCC writes XCCDF 1.1 results with a ``cdf:`` prefix; Nessus writes
XCCDF 1.2 with ``xccdf:``. The two share element names but differ in
namespace and in where the benchmark title lives, so each dialect is a
small class and :func:`detect_dialect` picks one by probing the raw text
for its closing-tag signature.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Iterator, List, Optional, Tuple

from stig_rollup.core.constants import NESSUS_TITLE_SUFFIX, RULE_ID_PREFIX
from stig_rollup.core.logging import LOG
from stig_rollup.scan.models import RuleResult, ScanResultSet
from stig_rollup.xml.sanitizer import San
from stig_rollup.xml.schema import Sch
from stig_rollup.xml.utils import XmlUtils


class ScanDialect:
    """Field extraction shared by both dialects, keyed on one namespace URI."""

    name = ""
    prefix = ""

    def __init__(self, uri: Optional[str] = None):
        self.uri = uri or Sch.NS[self.prefix]

    @classmethod
    def signature(cls) -> str:
        return f"</{cls.prefix}:"

    @classmethod
    def matches(cls, raw: str) -> bool:
        return raw.find(cls.signature()) > 0

    @classmethod
    def for_document(cls, raw: str) -> "ScanDialect":
        """Instance bound to the URI the document declares for ``prefix``."""
        return cls(XmlUtils.namespace_uri(raw, cls.prefix))

    def q(self, tag: str) -> str:
        return Sch.ns(tag, self.uri)

    def iter(self, root: ET.Element, tag: str) -> Iterator[ET.Element]:
        return root.iter(self.q(tag))

    # Title

    def title(self, root: ET.Element) -> str:
        for elem in self.iter(root, Sch.SCAN_TITLE):
            return XmlUtils.text(elem)
        return ""

    def fallback_title(self, root: ET.Element) -> str:
        return ""

    # Target identity

    def target_addresses(self, root: ET.Element) -> List[str]:
        return [XmlUtils.text(e).strip() for e in self.iter(root, Sch.SCAN_TARGET_ADDRESS)]

    def target_name(self, root: ET.Element) -> str:
        for elem in self.iter(root, Sch.SCAN_TARGET):
            text = XmlUtils.text(elem).strip()
            if text:
                return text
        return ""

    def facts(self, root: ET.Element) -> Iterator[Tuple[str, str]]:
        """Yield ``(kind, value)`` for host_name/fqdn/mac/ipv4 facts."""
        kinds = (Sch.FACT_HOST_NAME, Sch.FACT_FQDN, Sch.FACT_MAC, Sch.FACT_IPV4)
        for elem in self.iter(root, Sch.SCAN_FACT):
            names = list(elem.attrib.values())
            for kind in kinds:
                if any(name.endswith(kind) for name in names):
                    yield kind, XmlUtils.text(elem).strip()
                    break

    def test_system(self, root: ET.Element) -> Tuple[str, str]:
        """``(tool, end time)`` from the TestResult attributes; the last one wins."""
        tool = end_time = ""
        for elem in self.iter(root, Sch.SCAN_TEST_RESULT):
            tool = elem.get(Sch.ATTR_TEST_SYSTEM, tool)
            end_time = elem.get(Sch.ATTR_END_TIME, end_time)
        return tool, end_time

    def rule_results(self, root: ET.Element) -> List[RuleResult]:
        results: List[RuleResult] = []
        result_tag = self.q(Sch.SCAN_RESULT)
        for elem in self.iter(root, Sch.SCAN_RULE_RESULT):
            outcome = elem.find(result_tag)
            results.append(
                RuleResult(
                    rule_id=elem.get(Sch.ATTR_IDREF, "").replace(RULE_ID_PREFIX, ""),
                    rule_version=elem.get(Sch.ATTR_VERSION, ""),
                    result=XmlUtils.text(outcome).strip(),
                )
            )
        return results

    def extract(self, root: ET.Element) -> ScanResultSet:
        """Pull every field; stops after the title when none is found."""
        results = ScanResultSet(dialect=self.name)
        results.title = self.title(root).strip() or self.fallback_title(root).strip()
        if not results.title:
            LOG.w(f"{self.name} scan has no benchmark title; no checklist can be matched")
            return results

        addresses = [a for a in self.target_addresses(root) if not San.is_loopback(a)]
        results.hostname = self.target_name(root)
        macs: List[str] = []
        for kind, value in self.facts(root):
            if kind == Sch.FACT_HOST_NAME:
                results.hostname = results.hostname or value
            elif kind == Sch.FACT_FQDN:
                results.fqdn = results.fqdn or value
            elif kind == Sch.FACT_MAC:
                if not San.is_placeholder_mac(value):
                    macs.append(value)
            elif kind == Sch.FACT_IPV4:
                if not San.is_loopback(value):
                    addresses.append(value)

        results.ip_address = San.join_unique(addresses)
        results.mac_address = San.join_unique(macs)
        results.scan_tool, results.scan_time = self.test_system(root)
        results.rule_results = self.rule_results(root)
        return results


class DisaSccDialect(ScanDialect):
    """DISA SCAP Compliance Checker (XCCDF 1.1, ``cdf:`` prefix)."""

    name = "disa-scc"
    prefix = "cdf"


class NessusDialect(ScanDialect):
    """Tenable Nessus SCAP export (XCCDF 1.2, ``xccdf:`` prefix)."""

    name = "nessus"
    prefix = "xccdf"

    def fallback_title(self, root: ET.Element) -> str:
        # <xccdf:benchmark href="U_..._STIG_SCAP_1-2_Benchmark.xml"/> inside TestResult
        for elem in self.iter(root, Sch.SCAN_BENCHMARK):
            href = elem.get(Sch.ATTR_HREF, "")
            if href:
                cut = href.find(NESSUS_TITLE_SUFFIX)
                return href[:cut] if cut >= 0 else href
        return ""


# Detection order matters: a later match overrides an earlier one
DIALECTS = (DisaSccDialect, NessusDialect)


def detect_dialect(raw: str) -> Optional[ScanDialect]:
    """Pick the dialect whose closing-tag signature appears in ``raw``."""
    chosen = None
    for dialect in DIALECTS:
        if dialect.matches(raw):
            chosen = dialect
    if chosen is None:
        return None
    return chosen.for_document(raw)
