"""Tests for checklist data models."""

import unittest
from datetime import datetime

from stig_rollup.checklist.models import (
    Asset,
    AttributeList,
    Checklist,
    Finding,
    StoredChecklist,
)
from stig_rollup.core.constants import Status


def _checklist(title="", release="", version="", **asset):
    return Checklist(
        asset=Asset(**asset),
        stig_info=[("version", version), ("releaseinfo", release), ("title", title)],
    )


class TestAttributeList(unittest.TestCase):
    """Test the ordered multi-map of finding attributes."""

    def setUp(self):
        self.attrs = AttributeList([
            ("Vuln_Num", "V-1"),
            ("CCI_REF", "CCI-000001"),
            ("Severity", "high"),
            ("CCI_REF", "CCI-000002"),
        ])

    def test_get_returns_first(self):
        self.assertEqual(self.attrs.get("CCI_REF"), "CCI-000001")
        self.assertEqual(self.attrs.get("Rule_Ver"), "")
        self.assertEqual(self.attrs.get("Rule_Ver", "n/a"), "n/a")

    def test_get_all_keeps_order(self):
        self.assertEqual(self.attrs.get_all("CCI_REF"), ["CCI-000001", "CCI-000002"])
        self.assertEqual(self.attrs.count("CCI_REF"), 2)
        self.assertTrue(self.attrs.has("Severity"))
        self.assertFalse(self.attrs.has("severity"))

    def test_set_replaces_first_or_appends(self):
        self.attrs.set("Severity", "low")
        self.attrs.set("Rule_Ver", "R-1")
        self.assertEqual(self.attrs.names(), ["Vuln_Num", "CCI_REF", "Severity", "CCI_REF", "Rule_Ver"])
        self.assertEqual(self.attrs.get("Severity"), "low")

    def test_copy_is_independent(self):
        clone = self.attrs.copy()
        clone.add("LEGACY_ID", "V-9")
        self.assertEqual(len(self.attrs), 4)
        self.assertEqual(len(clone), 5)
        self.assertNotEqual(clone, self.attrs)
        self.assertEqual(self.attrs.copy(), self.attrs)


class TestFinding(unittest.TestCase):
    """Test finding accessors and usability."""

    def test_defaults(self):
        finding = Finding()
        self.assertIs(finding.status, Status.NOT_REVIEWED)
        self.assertEqual(finding.vuln_num, "")
        self.assertEqual(finding.cci_refs, [])

    def test_usable_requires_one_of_each(self):
        attrs = AttributeList([("Vuln_Num", "V-1"), ("Severity", "high"), ("Rule_Ver", "R-1")])
        self.assertTrue(Finding(attributes=attrs).is_usable())

        missing = AttributeList([("Vuln_Num", "V-1"), ("Severity", "high")])
        self.assertFalse(Finding(attributes=missing).is_usable())

        doubled = attrs.copy()
        doubled.add("Vuln_Num", "V-2")
        self.assertFalse(Finding(attributes=doubled).is_usable())


class TestChecklist(unittest.TestCase):
    """Test checklist-level helpers."""

    def test_info_lookups(self):
        ckl = _checklist(title="Test STIG", release="Release: 1", version="2")
        self.assertEqual(ckl.title, "Test STIG")
        self.assertEqual(ckl.release_info, "Release: 1")
        self.assertEqual(ckl.version, "2")
        self.assertEqual(ckl.info("stigid", "none"), "none")

    def test_empty(self):
        self.assertTrue(Checklist().is_empty())
        self.assertFalse(_checklist(title="x").is_empty())

    def test_finding_by_vuln(self):
        finding = Finding(attributes=AttributeList([("Vuln_Num", "V-7")]))
        ckl = Checklist(findings=[finding])
        self.assertIs(ckl.finding_by_vuln("V-7"), finding)
        self.assertIsNone(ckl.finding_by_vuln("V-8"))


class TestStoredChecklist(unittest.TestCase):
    """Test derived display fields."""

    def test_abbreviations(self):
        stored = StoredChecklist(
            id="1",
            checklist=_checklist(
                title="Microsoft Windows Server 2016 Security Technical Implementation Guide",
                release="Release: 9 Benchmark Date: 25 Oct 2019",
                version="1",
                host_name="web01",
            ),
        )
        self.assertEqual(stored.stig_type, "Microsoft WIN SVR 2016 STIG")
        self.assertEqual(stored.stig_release, "R9 dated 25 Oct 2019")
        self.assertEqual(stored.title, "web01-Microsoft WIN SVR 2016 STIG-V1-R9 dated 25 Oct 2019")

    def test_sql_server_before_server(self):
        stored = StoredChecklist(id="1", checklist=_checklist(title="MS SQL Server 2016 Instance"))
        self.assertEqual(stored.stig_type, "MSSQL 2016 Instance")

    def test_unknown_host(self):
        stored = StoredChecklist(id="1", checklist=_checklist(title="T", version="1", release="R"))
        self.assertEqual(stored.host_name, "Unknown")
        self.assertTrue(stored.title.startswith("Unknown-T-V1-"))

    def test_web_database_suffix(self):
        both = StoredChecklist(
            id="1",
            checklist=_checklist(
                title="IIS", version="1", release="R", host_name="h",
                web_or_database="true", web_db_site="Default", web_db_instance="inst1",
            ),
            updated_on=datetime(2020, 1, 1),
        )
        self.assertEqual(both.title, "h-IIS-V1-R (Default, inst1)")

        site_only = StoredChecklist(
            id="2",
            checklist=_checklist(title="IIS", version="1", release="R", host_name="h",
                                 web_or_database="True", web_db_site="Default"),
        )
        self.assertEqual(site_only.title, "h-IIS-V1-R (Default)")

        not_web = StoredChecklist(
            id="3",
            checklist=_checklist(title="IIS", version="1", release="R", host_name="h",
                                 web_or_database="false", web_db_site="Default"),
        )
        self.assertEqual(not_web.title, "h-IIS-V1-R")


if __name__ == "__main__":
    unittest.main()
