"""Tests for the control catalog."""

import json
import shutil
import tempfile
import unittest
from pathlib import Path

from stig_rollup.compliance.catalog import ControlCatalog
from stig_rollup.compliance.models import CciItem, CciReference, ControlRecord
from stig_rollup.core.constants import ImpactLevel
from stig_rollup.exceptions import ValidationError
from tests.builders import CCI_DATA, CONTROL_DATA


class TestControlCatalog(unittest.TestCase):
    """Catalog queries."""

    def setUp(self):
        self.catalog = ControlCatalog.from_dicts(CCI_DATA, CONTROL_DATA)

    def test_from_dicts(self):
        self.assertEqual(len(self.catalog), 5)
        item = self.catalog.cci_items[4]
        self.assertEqual(item.cci_id, "CCI-000005")
        self.assertEqual(item.references[1], CciReference("AC-2", "AC-2 (1)", "NIST SP 800-53", "4", ""))

    def test_control_tuples_one_per_reference(self):
        rows = self.catalog.control_tuples()
        self.assertEqual(len(rows), 6)
        self.assertEqual(
            [(r.cci, r.control) for r in rows[-2:]],
            [("CCI-000005", "AU-2"), ("CCI-000005", "AC-2")],
        )

    def test_major_control_filter(self):
        rows = self.catalog.control_tuples("AC-2")
        self.assertEqual([r.cci for r in rows], ["CCI-000002", "CCI-000005"])
        self.assertTrue(all(r.control == "AC-2" for r in rows))

    def test_control_records_by_impact(self):
        self.assertEqual(len(self.catalog.control_records()), 5)
        self.assertEqual(len(self.catalog.control_records("")), 5)
        high = [r.number for r in self.catalog.control_records("high")]
        self.assertEqual(high, ["AC-1", "AC-2", "AC-10", "AU-2"])
        moderate = [r.number for r in self.catalog.control_records(ImpactLevel.MODERATE)]
        self.assertEqual(moderate, ["AC-1", "AC-2", "AU-2"])

    def test_pii_adds_privacy_controls(self):
        numbers = [r.number for r in self.catalog.control_records("low", pii=True)]
        self.assertEqual(numbers, ["AC-1", "AC-2", "AU-2", "AR-1"])

    def test_cci_ids_for_control(self):
        self.assertEqual(self.catalog.cci_ids_for_control("AC-2"), ["CCI-000002", "CCI-000005"])
        self.assertEqual(self.catalog.cci_ids_for_control("AC-10.1"), ["CCI-000003"])
        self.assertEqual(self.catalog.cci_ids_for_control("XX-1"), [])

    def test_direct_construction(self):
        catalog = ControlCatalog(
            [CciItem("CCI-1", (CciReference("AC-1", "AC-1 a"),))],
            [ControlRecord("AC-1", "Policy", low=True)],
        )
        self.assertEqual(catalog.control_tuples()[0].index, "AC-1 a")
        self.assertEqual(catalog.control_records("low")[0].title, "Policy")


class TestLoadJson(unittest.TestCase):
    """Loading from files."""

    def setUp(self):
        self.test_dir = Path(tempfile.mkdtemp())

    def tearDown(self):
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def test_load(self):
        cci_path = self.test_dir / "cci.json"
        controls_path = self.test_dir / "controls.json"
        cci_path.write_text(json.dumps(CCI_DATA), encoding="utf-8")
        controls_path.write_text(json.dumps(CONTROL_DATA), encoding="utf-8")

        catalog = ControlCatalog.load_json(cci_path, controls_path)
        self.assertEqual(len(catalog), len(CCI_DATA))
        self.assertEqual(len(catalog.control_records()), len(CONTROL_DATA))

    def test_not_a_list(self):
        path = self.test_dir / "bad.json"
        path.write_text('{"cciId": "CCI-1"}', encoding="utf-8")
        with self.assertRaises(ValidationError):
            ControlCatalog.load_json(path, path)

    def test_invalid_json(self):
        path = self.test_dir / "bad.json"
        path.write_text("[{", encoding="utf-8")
        with self.assertRaises(ValidationError):
            ControlCatalog.load_json(path, path)

    def test_missing_file(self):
        with self.assertRaises(ValidationError):
            ControlCatalog.load_json(self.test_dir / "nope.json", self.test_dir / "nope.json")


if __name__ == "__main__":
    unittest.main()
