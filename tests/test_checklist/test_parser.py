"""Tests for the checklist parser."""

import unittest

from stig_rollup.checklist.parser import parse
from stig_rollup.core.constants import Status
from stig_rollup.exceptions import ParseError
from tests.builders import VULN_SCALARS, canonical_pairs, ckl_xml, sample_checklist, vuln_xml


class TestParse(unittest.TestCase):
    """Tests for parse()."""

    def setUp(self):
        self.raw = sample_checklist()

    def test_sample_checklist(self):
        """Asset, STIG_INFO and findings are read in document order."""
        ckl = parse(self.raw)

        self.assertEqual(ckl.asset.host_name, "TEST-SERVER")
        self.assertEqual(ckl.asset.role, "Member Server")
        self.assertEqual(ckl.asset.web_or_database, "false")
        self.assertEqual(ckl.version, "1")
        self.assertEqual(ckl.release_info, "Release: 9 Benchmark Date: 25 Oct 2019")
        self.assertIn(("classification", ""), ckl.stig_info)
        self.assertEqual([f.vuln_num for f in ckl.findings], ["V-1", "V-2", "V-3"])

    def test_finding_fields(self):
        ckl = parse(self.raw)
        first, second, third = ckl.findings

        self.assertIs(first.status, Status.OPEN)
        self.assertIs(second.status, Status.NOT_A_FINDING)
        self.assertIs(third.status, Status.NOT_REVIEWED)
        self.assertEqual(second.cci_refs, ["CCI-000002", "CCI-000005"])
        self.assertEqual(third.attributes.get_all("LEGACY_ID"), ["SV-3_rule", "V-3"])
        self.assertEqual(first.attributes.names()[:25], list(VULN_SCALARS))
        self.assertTrue(all(f.is_usable() for f in ckl.findings))

    def test_tabs_are_stripped(self):
        """Literal tabs inside values are removed before parsing."""
        pairs = canonical_pairs("V-1", "R-1")
        pairs[5] = ("Rule_Title", "Title\twith\ttabs")
        ckl = parse(ckl_xml([vuln_xml(pairs)]))
        self.assertEqual(ckl.findings[0].attributes.get("Rule_Title"), "Titlewithtabs")

    def test_result_fields(self):
        raw = ckl_xml([
            vuln_xml(
                canonical_pairs("V-1", "R-1"),
                status="not_applicable",
                details="Checked <registry> & policy",
                comments="multi\nline",
                override="low",
                justification="Mitigated",
            )
        ])
        finding = parse(raw).findings[0]

        self.assertIs(finding.status, Status.NOT_APPLICABLE)
        self.assertEqual(finding.finding_details, "Checked <registry> & policy")
        self.assertEqual(finding.comments, "multi\nline")
        self.assertEqual(finding.severity_override, "low")
        self.assertEqual(finding.severity_justification, "Mitigated")

    def test_unknown_status_is_not_reviewed(self):
        raw = ckl_xml([vuln_xml(canonical_pairs("V-1", "R-1"), status="Pending")])
        self.assertIs(parse(raw).findings[0].status, Status.NOT_REVIEWED)

    def test_unknown_elements_ignored(self):
        vuln = vuln_xml(canonical_pairs("V-1", "R-1")).replace(
            "<STATUS>", "<EXTRA>ignored</EXTRA><STATUS>"
        )
        ckl = parse(ckl_xml([vuln]))
        self.assertEqual(len(ckl.findings), 1)
        self.assertIs(ckl.findings[0].status, Status.NOT_REVIEWED)


class TestParseEdgeCases(unittest.TestCase):
    """Junk and malformed input."""

    def test_missing_sections_yield_empty(self):
        junk = [
            "<CHECKLIST><STIGS><iSTIG><STIG_INFO/></iSTIG></STIGS></CHECKLIST>",
            "<CHECKLIST><ASSET/><STIGS><iSTIG/></STIGS></CHECKLIST>",
            "<CHECKLIST><ASSET/><STIG_INFO/></CHECKLIST>",
            "<Benchmark><title>not a checklist</title></Benchmark>",
        ]
        for raw in junk:
            with self.subTest(raw=raw):
                ckl = parse(raw)
                self.assertTrue(ckl.is_empty())
                self.assertEqual(ckl.findings, [])

    def test_no_findings(self):
        ckl = parse("<CHECKLIST><ASSET><HOST_NAME>h</HOST_NAME></ASSET>"
                    "<STIGS><iSTIG><STIG_INFO/></iSTIG></STIGS></CHECKLIST>")
        self.assertEqual(ckl.asset.host_name, "h")
        self.assertEqual(ckl.findings, [])

    def test_malformed_raises(self):
        with self.assertRaises(ParseError):
            parse("<CHECKLIST><ASSET>")

    def test_each_parse_is_fresh(self):
        raw = sample_checklist()
        first = parse(raw)
        first.findings[0].status = Status.NOT_A_FINDING
        self.assertIs(parse(raw).findings[0].status, Status.OPEN)


if __name__ == "__main__":
    unittest.main()
