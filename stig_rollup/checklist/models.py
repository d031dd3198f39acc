"""Checklist data models.

A :class:`Checklist` is built fresh by every parse and carries everything
the writer needs to reproduce the document: asset identity, the STIG_INFO
pairs and the findings in document order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterator, List, Optional, Tuple

from stig_rollup.core.constants import Status, UNKNOWN_HOST
from stig_rollup.xml.schema import Sch


@dataclass
class Asset:
    """Host identity from the ASSET block. Empty string means unknown."""

    role: str = ""
    asset_type: str = ""
    marking: str = ""
    host_name: str = ""
    host_ip: str = ""
    host_mac: str = ""
    host_fqdn: str = ""
    target_comment: str = ""
    tech_area: str = ""
    target_key: str = ""
    web_or_database: str = ""
    web_db_site: str = ""
    web_db_instance: str = ""

    @staticmethod
    def field_for(element: str) -> str:
        """Attribute name for an ASSET child element (``HOST_NAME`` -> ``host_name``)."""
        return element.lower()

    def items(self) -> Iterator[Tuple[str, str]]:
        """Yield ``(ELEMENT, value)`` in STIG Viewer order."""
        for element in Sch.ASSET:
            yield element, getattr(self, self.field_for(element))

    @property
    def is_web_database(self) -> bool:
        return self.web_or_database.strip().lower() == "true"


class AttributeList:
    """
    Ordered ``(VULN_ATTRIBUTE, ATTRIBUTE_DATA)`` pairs of one finding.

    Behaves as a multi-map: ``LEGACY_ID`` and ``CCI_REF`` legitimately
    repeat, so lookups come in single (:meth:`get`) and all-values
    (:meth:`get_all`) flavours, and document order is kept for writing.
    """

    __slots__ = ("_pairs",)

    def __init__(self, pairs: Optional[List[Tuple[str, str]]] = None):
        self._pairs: List[Tuple[str, str]] = list(pairs or [])

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(self._pairs)

    def __len__(self) -> int:
        return len(self._pairs)

    def __getitem__(self, index: int) -> Tuple[str, str]:
        return self._pairs[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AttributeList):
            return NotImplemented
        return self._pairs == other._pairs

    def __repr__(self) -> str:
        return f"AttributeList({self._pairs!r})"

    def add(self, name: str, value: str) -> None:
        self._pairs.append((name, value))

    def get(self, name: str, default: str = "") -> str:
        """Value of the first pair named ``name``."""
        for key, value in self._pairs:
            if key == name:
                return value
        return default

    def get_all(self, name: str) -> List[str]:
        return [value for key, value in self._pairs if key == name]

    def has(self, name: str) -> bool:
        return any(key == name for key, _ in self._pairs)

    def count(self, name: str) -> int:
        return sum(1 for key, _ in self._pairs if key == name)

    def names(self) -> List[str]:
        return [key for key, _ in self._pairs]

    def set(self, name: str, value: str) -> None:
        """Replace the first pair named ``name`` or append a new one."""
        for idx, (key, _) in enumerate(self._pairs):
            if key == name:
                self._pairs[idx] = (name, value)
                return
        self._pairs.append((name, value))

    def copy(self) -> "AttributeList":
        return AttributeList(self._pairs)


@dataclass
class Finding:
    """One rule's evaluation within a checklist (a VULN element)."""

    attributes: AttributeList = field(default_factory=AttributeList)
    status: Status = Status.NOT_REVIEWED
    finding_details: str = ""
    comments: str = ""
    severity_override: str = ""
    severity_justification: str = ""

    @property
    def vuln_num(self) -> str:
        return self.attributes.get(Sch.VULN_NUM)

    @property
    def rule_ver(self) -> str:
        return self.attributes.get(Sch.RULE_VER)

    @property
    def severity(self) -> str:
        return self.attributes.get(Sch.SEVERITY)

    @property
    def cci_refs(self) -> List[str]:
        return self.attributes.get_all(Sch.CCI_REF)

    def is_usable(self) -> bool:
        """Exactly one pair each of Vuln_Num, Severity and Rule_Ver."""
        return all(self.attributes.count(name) == 1 for name in Sch.REQUIRED)


@dataclass
class Checklist:
    """One asset's findings against one benchmark."""

    asset: Asset = field(default_factory=Asset)
    stig_info: List[Tuple[str, str]] = field(default_factory=list)
    findings: List[Finding] = field(default_factory=list)

    def info(self, name: str, default: str = "") -> str:
        """First STIG_INFO value named ``name``."""
        for key, value in self.stig_info:
            if key == name:
                return value
        return default

    @property
    def title(self) -> str:
        return self.info(Sch.SI_TITLE)

    @property
    def version(self) -> str:
        return self.info(Sch.SI_VERSION)

    @property
    def release_info(self) -> str:
        return self.info(Sch.SI_RELEASE)

    def finding_by_vuln(self, vuln_num: str) -> Optional[Finding]:
        for finding in self.findings:
            if finding.vuln_num == vuln_num:
                return finding
        return None

    def is_empty(self) -> bool:
        return not self.stig_info and not self.findings and self.asset == Asset()


# Applied in order; "MS SQL Server" must be replaced before "Server"
STIG_TYPE_ABBREVIATIONS: Tuple[Tuple[str, str], ...] = (
    ("Security Technical Implementation Guide", "STIG"),
    ("Windows", "WIN"),
    ("Application Security and Development", "ASD"),
    ("Microsoft Internet Explorer", "MSIE"),
    ("Red Hat Enterprise Linux", "REL"),
    ("MS SQL Server", "MSSQL"),
    ("Server", "SVR"),
    ("Workstation", "WRK"),
)

RELEASE_ABBREVIATIONS: Tuple[Tuple[str, str], ...] = (
    ("Release: ", "R"),
    ("Benchmark Date:", "dated"),
)


def _abbreviate(text: str, table: Tuple[Tuple[str, str], ...]) -> str:
    for long_name, short_name in table:
        text = text.replace(long_name, short_name)
    return text


@dataclass
class StoredChecklist:
    """
    A checklist as held by the document store.

    Wraps the parsed model with the store's identity and timestamp and
    derives the display fields used in compliance reports.
    """

    id: str
    checklist: Checklist
    updated_on: Optional[datetime] = None
    raw: str = ""

    @property
    def host_name(self) -> str:
        return self.checklist.asset.host_name.strip() or UNKNOWN_HOST

    @property
    def stig_type(self) -> str:
        return _abbreviate(self.checklist.title, STIG_TYPE_ABBREVIATIONS).strip()

    @property
    def stig_release(self) -> str:
        return _abbreviate(self.checklist.release_info, RELEASE_ABBREVIATIONS).strip()

    @property
    def version(self) -> str:
        return self.checklist.version

    @property
    def title(self) -> str:
        """``host-type-V{version}-release`` with an optional ``(site, instance)`` tail."""
        title = f"{self.host_name}-{self.stig_type}-V{self.version}-{self.stig_release}"
        asset = self.checklist.asset
        if asset.is_web_database:
            qualifiers = [q for q in (asset.web_db_site.strip(), asset.web_db_instance.strip()) if q]
            if qualifiers:
                title += f" ({', '.join(qualifiers)})"
        return title


