"""Scan result parsing entry point."""

from __future__ import annotations

from stig_rollup.core.logging import LOG
from stig_rollup.scan.dialects import detect_dialect
from stig_rollup.scan.models import ScanResultSet
from stig_rollup.xml.utils import XmlUtils


def parse_scan_results(raw: str) -> ScanResultSet:
    """
    Parse a DISA SCC or Nessus SCAP result document.

    The dialect is chosen from the raw text before the document is parsed.
    When neither signature is present, or no benchmark title can be found,
    the returned set has an empty title and no other fields.

    Raises:
        ParseError: If a recognised document is not well-formed XML
    """
    with LOG.scope(op="parse_scan"):
        text = XmlUtils.strip_tabs(raw)
        dialect = detect_dialect(text)
        if dialect is None:
            LOG.w("Unrecognised scan result format (no cdf: or xccdf: elements)")
            return ScanResultSet()

        root = XmlUtils.parse(text)
        results = dialect.extract(root)
        if results.has_title:
            LOG.i(
                f"Parsed {dialect.name} scan '{results.title}' for host "
                f"'{results.hostname}' with {len(results.rule_results)} rule results"
            )
        return results
