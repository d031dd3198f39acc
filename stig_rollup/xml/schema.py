"""
STIG Rollup XML Schema Definitions.

Element names and field orders for DISA STIG Viewer checklists and the
two SCAP result dialects (DISA SCC ``cdf:`` and Nessus ``xccdf:``).
"""

from __future__ import annotations
from typing import Dict, Tuple


class Sch:
    """
    XML schema definitions for checklist and scan result processing.

    Thread-safe: Yes (immutable class constants)
    """

    # Checklist structure
    ROOT = "CHECKLIST"
    ASSET_BLOCK = "ASSET"
    STIGS = "STIGS"
    ISTIG = "iSTIG"
    STIG_INFO = "STIG_INFO"
    VULN_BLOCK = "VULN"
    STIG_DATA = "STIG_DATA"
    VULN_ATTRIBUTE = "VULN_ATTRIBUTE"
    ATTRIBUTE_DATA = "ATTRIBUTE_DATA"
    SI_DATA = "SI_DATA"
    SID_NAME = "SID_NAME"
    SID_DATA = "SID_DATA"
    XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'

    # Asset metadata elements, in the order STIG Viewer writes them
    ASSET: Tuple[str, ...] = (
        "ROLE",
        "ASSET_TYPE",
        "MARKING",
        "HOST_NAME",
        "HOST_IP",
        "HOST_MAC",
        "HOST_FQDN",
        "TARGET_COMMENT",
        "TECH_AREA",
        "TARGET_KEY",
        "WEB_OR_DATABASE",
        "WEB_DB_SITE",
        "WEB_DB_INSTANCE",
    )

    # Well-known STIG_INFO names
    SI_TITLE = "title"
    SI_VERSION = "version"
    SI_RELEASE = "releaseinfo"

    # Per-finding attribute names used by the pipeline
    VULN_NUM = "Vuln_Num"
    SEVERITY = "Severity"
    RULE_VER = "Rule_Ver"
    RULE_TITLE = "Rule_Title"
    LEGACY_ID = "LEGACY_ID"
    CCI_REF = "CCI_REF"

    # Scalar attributes in canonical order; repeated LEGACY_ID then CCI_REF follow
    VULN_SCALARS: Tuple[str, ...] = (
        "Vuln_Num",
        "Severity",
        "Group_Title",
        "Rule_ID",
        "Rule_Ver",
        "Rule_Title",
        "Vuln_Discuss",
        "IA_Controls",
        "Check_Content",
        "Fix_Text",
        "False_Positives",
        "False_Negatives",
        "Documentable",
        "Mitigations",
        "Potential_Impact",
        "Third_Party_Tools",
        "Mitigation_Control",
        "Responsibility",
        "Security_Override_Guidance",
        "Check_Content_Ref",
        "Weight",
        "Class",
        "STIGRef",
        "TargetKey",
        "STIG_UUID",
    )

    # A finding needs exactly one pair of each of these to be usable
    REQUIRED: Tuple[str, ...] = ("Vuln_Num", "Severity", "Rule_Ver")

    # Positions checked by the canonical-order fast path
    ORDER_CHECK: Tuple[Tuple[int, str], ...] = (
        (0, "Vuln_Num"),
        (1, "Severity"),
        (4, "Rule_Ver"),
        (5, "Rule_Title"),
        (-1, "CCI_REF"),
    )
    ORDER_CHECK_MIN = 10

    # Result elements that follow the STIG_DATA pairs in a VULN
    STATUS = "STATUS"
    FINDING_DETAILS = "FINDING_DETAILS"
    COMMENTS = "COMMENTS"
    SEVERITY_OVERRIDE = "SEVERITY_OVERRIDE"
    SEVERITY_JUSTIFICATION = "SEVERITY_JUSTIFICATION"
    RESULT_FIELDS: Tuple[str, ...] = (
        STATUS,
        FINDING_DETAILS,
        COMMENTS,
        SEVERITY_OVERRIDE,
        SEVERITY_JUSTIFICATION,
    )

    # Scan result dialects: prefix -> default namespace URI
    NS: Dict[str, str] = {
        "cdf": "http://checklists.nist.gov/xccdf/1.1",
        "xccdf": "http://checklists.nist.gov/xccdf/1.2",
    }

    # Scan result element and attribute names (namespaced with the dialect URI)
    SCAN_TITLE = "title"
    SCAN_BENCHMARK = "benchmark"
    SCAN_TARGET = "target"
    SCAN_TARGET_ADDRESS = "target-address"
    SCAN_FACT = "fact"
    SCAN_TEST_RESULT = "TestResult"
    SCAN_RULE_RESULT = "rule-result"
    SCAN_RESULT = "result"
    ATTR_HREF = "href"
    ATTR_IDREF = "idref"
    ATTR_VERSION = "version"
    ATTR_END_TIME = "end-time"
    ATTR_TEST_SYSTEM = "test-system"

    # Fact name suffixes
    FACT_HOST_NAME = "host_name"
    FACT_FQDN = "fqdn"
    FACT_MAC = "mac"
    FACT_IPV4 = "ipv4"

    # Scan outcomes that change a finding
    RESULT_FAIL = "fail"
    RESULT_PASS = "pass"
    RESULT_NOT_APPLICABLE = "notapplicable"

    @staticmethod
    def ns(tag: str, uri: str) -> str:
        """
        Qualify ``tag`` with a namespace URI for ElementTree lookups.

        Example:
            >>> Sch.ns("title", "http://checklists.nist.gov/xccdf/1.1")
            '{http://checklists.nist.gov/xccdf/1.1}title'
        """
        if uri:
            return f"{{{uri}}}{tag}"
        return tag

    @staticmethod
    def strip_ns(tag: str) -> str:
        """
        Remove the namespace part of a qualified tag.

        Example:
            >>> Sch.strip_ns("{http://checklists.nist.gov/xccdf/1.2}Rule")
            'Rule'
        """
        if "}" in tag:
            return tag.split("}", 1)[1]
        return tag
