"""
Finding attribute canonicalization.

Some exporters write STIG_DATA pairs out of STIG Viewer order, and at
least one scanner packs several CCIs into a single space-separated
CCI_REF. :func:`canonicalize` detects either condition and rewrites every
usable finding into the canonical layout:

    25 scalar attributes (Sch.VULN_SCALARS), then every LEGACY_ID,
    then one CCI_REF pair per CCI.

Documents already in that layout are returned untouched.
"""

from __future__ import annotations

from typing import List

from stig_rollup.checklist.models import AttributeList, Checklist, Finding
from stig_rollup.checklist.parser import parse
from stig_rollup.checklist.writer import render_document
from stig_rollup.core.logging import LOG
from stig_rollup.xml.schema import Sch


def canonicalize(raw: str) -> str:
    """
    Return ``raw`` in canonical attribute order.

    Idempotent. Returns the input unchanged when it has no findings or
    already passes :func:`needs_rebuild`.

    Raises:
        ParseError: If ``raw`` is not well-formed XML
    """
    with LOG.scope(op="canonicalize"):
        checklist = parse(raw)
        if not checklist.findings:
            LOG.d("No findings; leaving document as-is")
            return raw
        if not needs_rebuild(checklist):
            LOG.d("Attribute order already canonical")
            return raw

        rebuilt = 0
        for finding in checklist.findings:
            if not finding.is_usable():
                LOG.d(f"Skipping malformed finding {finding.vuln_num or '<no Vuln_Num>'}")
                continue
            finding.attributes = canonical_attributes(finding.attributes)
            rebuilt += 1

        LOG.i(f"Rebuilt attribute order for {rebuilt}/{len(checklist.findings)} findings")
        return render_document(checklist)


def needs_rebuild(checklist: Checklist) -> bool:
    """
    True when the first finding is out of order or any CCI_REF is packed.

    Only the first finding's order is checked (exporters write every VULN
    the same way), and only when it carries more than
    ``Sch.ORDER_CHECK_MIN`` pairs.
    """
    if not checklist.findings:
        return False
    if _first_out_of_order(checklist.findings[0]):
        return True
    return any(has_packed_cci(finding) for finding in checklist.findings)


def _first_out_of_order(finding: Finding) -> bool:
    names = finding.attributes.names()
    if len(names) <= Sch.ORDER_CHECK_MIN:
        return False
    for position, expected in Sch.ORDER_CHECK:
        if names[position].lower() != expected.lower():
            return True
    return False


def has_packed_cci(finding: Finding) -> bool:
    return any(len(split_cci(value)) > 1 for value in finding.attributes.get_all(Sch.CCI_REF))


def split_cci(value: str) -> List[str]:
    """
    Tokens of a CCI_REF value, split on every single space.

    Empty tokens from doubled or trailing spaces are kept, so a value with
    N spaces yields N + 1 tokens. A value starting with a space is left
    whole.

    >>> split_cci("CCI-000001  CCI-000002")
    ['CCI-000001', '', 'CCI-000002']
    """
    if value.find(" ") > 0:
        return value.split(" ")
    return [value]


def canonical_attributes(attributes: AttributeList) -> AttributeList:
    """
    Rebuild a pair list into canonical order.

    Missing scalars are written empty; when a scalar repeats, the first
    value wins. CCI_REF values are split by :func:`split_cci` into one
    pair per token, so ``"CCI-000001 CCI-000002"`` becomes two pairs.
    """
    ordered = AttributeList()
    for name in Sch.VULN_SCALARS:
        ordered.add(name, attributes.get(name))
    for legacy in attributes.get_all(Sch.LEGACY_ID):
        ordered.add(Sch.LEGACY_ID, legacy)
    for cci in attributes.get_all(Sch.CCI_REF):
        for token in split_cci(cci):
            ordered.add(Sch.CCI_REF, token)
    return ordered
