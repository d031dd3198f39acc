"""SCAP scan result data models."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class RuleResult:
    """One ``rule-result`` from a scan: which rule, and what happened."""

    rule_id: str = ""
    rule_version: str = ""
    result: str = ""


@dataclass
class ScanResultSet:
    """Target identity and per-rule outcomes pulled from one scan file.

    An empty ``title`` means no blank checklist can be matched to the scan.
    """

    title: str = ""
    hostname: str = ""
    ip_address: str = ""
    fqdn: str = ""
    mac_address: str = ""
    scan_tool: str = ""
    scan_time: str = ""
    dialect: str = ""
    rule_results: List[RuleResult] = field(default_factory=list)

    @property
    def has_title(self) -> bool:
        return bool(self.title)

    def result_for(self, rule_version: str) -> Optional[RuleResult]:
        """First result whose version equals ``rule_version``, ignoring case."""
        wanted = rule_version.lower()
        for result in self.rule_results:
            if result.rule_version.lower() == wanted:
                return result
        return None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
