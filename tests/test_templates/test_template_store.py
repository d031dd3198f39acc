"""Tests for blank checklist template stores."""

import shutil
import tempfile
import unittest
from pathlib import Path

from stig_rollup.templates.store import DirectoryTemplateStore, MemoryTemplateStore
from tests.builders import WIN2016_TITLE, ckl_xml, win2016_template


class TestMemoryTemplateStore(unittest.TestCase):
    def test_lookup(self):
        store = MemoryTemplateStore({"A": "<CHECKLIST/>"})
        store.add("B", "<b/>")
        self.assertEqual(store.template_for_title("A"), "<CHECKLIST/>")
        self.assertEqual(store.template_for_title("B"), "<b/>")
        self.assertIsNone(store.template_for_title("C"))


class TestDirectoryTemplateStore(unittest.TestCase):
    """Title indexing of a template directory."""

    def setUp(self):
        self.test_dir = Path(tempfile.mkdtemp())

    def tearDown(self):
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def test_indexes_by_title(self):
        template = win2016_template()
        (self.test_dir / "win2016.ckl").write_text(template, encoding="utf-8")
        (self.test_dir / "rhel.ckl").write_text(
            ckl_xml([], title="Red Hat Enterprise Linux 7 STIG"), encoding="utf-8"
        )
        (self.test_dir / "notes.txt").write_text("ignored", encoding="utf-8")

        store = DirectoryTemplateStore(self.test_dir)
        self.assertEqual(store.titles(), ["Red Hat Enterprise Linux 7 STIG", WIN2016_TITLE])
        self.assertEqual(store.template_for_title(WIN2016_TITLE), template)
        self.assertIsNone(store.template_for_title("Unknown STIG"))

    def test_first_file_wins_on_duplicate_title(self):
        (self.test_dir / "a.ckl").write_text(ckl_xml([], title="Same", version="1"), encoding="utf-8")
        (self.test_dir / "b.ckl").write_text(ckl_xml([], title="Same", version="2"), encoding="utf-8")

        raw = DirectoryTemplateStore(self.test_dir).template_for_title("Same")
        self.assertIn("<SID_DATA>1</SID_DATA>", raw)

    def test_bad_files_skipped(self):
        (self.test_dir / "broken.ckl").write_text("<CHECKLIST><ASSET>", encoding="utf-8")
        (self.test_dir / "untitled.ckl").write_text("<CHECKLIST/>", encoding="utf-8")
        (self.test_dir / "good.ckl").write_text(win2016_template(), encoding="utf-8")

        store = DirectoryTemplateStore(self.test_dir)
        self.assertEqual(len(store.load()), 1)

    def test_missing_directory(self):
        store = DirectoryTemplateStore(self.test_dir / "absent")
        self.assertEqual(store.titles(), [])
        self.assertIsNone(store.template_for_title("x"))


if __name__ == "__main__":
    unittest.main()
