"""Unit tests for file operations module.

Tests cover:
- Retry decorator and shutdown handling
- Atomic writes with backup and rollback
- Encoding detection
- Error handling and edge cases
"""

import shutil
import tempfile
import unittest
from pathlib import Path

from stig_rollup.core.config import Cfg
from stig_rollup.core.state import GLOBAL_STATE
from stig_rollup.io.file_ops import FO, retry
from stig_rollup.checklist.parser import parse
from stig_rollup.exceptions import FileError, ValidationError
from tests.builders import sample_checklist


class TestRetryDecorator(unittest.TestCase):
    """Tests for retry decorator."""

    def tearDown(self):
        GLOBAL_STATE.reset()

    def test_retry_success_on_first_attempt(self):
        """Test that retry decorator succeeds on first attempt."""
        call_count = [0]

        @retry(attempts=3)
        def successful_func():
            call_count[0] += 1
            return "success"

        self.assertEqual(successful_func(), "success")
        self.assertEqual(call_count[0], 1)

    def test_retry_success_after_failures(self):
        """Test that retry decorator retries on failure."""
        call_count = [0]

        @retry(attempts=3, delay=0.01)
        def failing_then_success():
            call_count[0] += 1
            if call_count[0] < 3:
                raise IOError("Temporary failure")
            return "success"

        self.assertEqual(failing_then_success(), "success")
        self.assertEqual(call_count[0], 3)

    def test_retry_exhausts_attempts(self):
        """Test that retry decorator raises after exhausting attempts."""
        @retry(attempts=2, delay=0.01)
        def always_fails():
            raise OSError("Permanent failure")

        with self.assertRaises(OSError) as ctx:
            always_fails()
        self.assertIn("Permanent failure", str(ctx.exception))

    def test_retry_ignores_other_exceptions(self):
        """Exceptions outside the retry list propagate immediately."""
        call_count = [0]

        @retry(attempts=3, delay=0.01)
        def bad_value():
            call_count[0] += 1
            raise ValueError("not retried")

        with self.assertRaises(ValueError):
            bad_value()
        self.assertEqual(call_count[0], 1)

    def test_retry_stops_on_shutdown(self):
        """A pending shutdown aborts before the first attempt."""
        GLOBAL_STATE.shutdown.set()

        @retry(attempts=3, delay=0.01)
        def never_called():
            self.fail("should not run")

        with self.assertRaises(InterruptedError):
            never_called()


class TestFileOperations(unittest.TestCase):
    """Tests for FO class file operations."""

    def setUp(self):
        """Create temporary directory for tests."""
        self.test_dir = Path(tempfile.mkdtemp())
        self.addCleanup(self._cleanup)

    def _cleanup(self):
        """Clean up test directory."""
        if self.test_dir.exists():
            shutil.rmtree(self.test_dir)

    def test_atomic_write_creates_new_file(self):
        """Test atomic write creates a new file."""
        test_file = self.test_dir / "test.ckl"

        with FO.atomic(test_file) as f:
            f.write("<CHECKLIST/>")

        self.assertEqual(test_file.read_text(encoding="utf-8"), "<CHECKLIST/>")

    def test_atomic_write_creates_backup(self):
        """Overwriting an existing file leaves a copy in Cfg.BACKUP_DIR."""
        test_file = self.test_dir / "backup_sample.ckl"
        test_file.write_text("original content", encoding="utf-8")

        FO.write_text(test_file, "new content")

        self.assertEqual(test_file.read_text(encoding="utf-8"), "new content")
        backups = list(Cfg.BACKUP_DIR.glob("backup_sample_*.ckl.bak"))
        self.assertTrue(backups)
        self.assertIn("original content", [b.read_text(encoding="utf-8") for b in backups])
        for backup in backups:
            backup.unlink()

    def test_atomic_write_rollback_on_exception(self):
        """A failure inside the block leaves the original file in place."""
        test_file = self.test_dir / "test.ckl"
        test_file.write_text("original content", encoding="utf-8")

        with self.assertRaises(FileError):
            with FO.atomic(test_file, bak=True) as f:
                f.write("new content")
                raise ValueError("Simulated error")

        self.assertEqual(test_file.read_text(encoding="utf-8"), "original content")
        leftovers = list(self.test_dir.glob(".rollup_tmp_*"))
        self.assertEqual(leftovers, [])

    def test_atomic_write_creates_parent_directory(self):
        """Test that atomic write creates parent directories."""
        test_file = self.test_dir / "subdir" / "nested" / "test.ckl"

        FO.write_text(test_file, "content", bak=False)

        self.assertEqual(test_file.read_text(encoding="utf-8"), "content")

    def test_read_utf8_file(self):
        """Test reading UTF-8 encoded file."""
        test_file = self.test_dir / "utf8.ckl"
        content = "Hello, 世界!"
        test_file.write_text(content, encoding="utf-8")

        self.assertEqual(FO.read(test_file), content)

    def test_read_utf16_file(self):
        """Test reading UTF-16 encoded file (STIG Viewer exports)."""
        test_file = self.test_dir / "utf16.ckl"
        content = "<CHECKLIST/>"
        test_file.write_text(content, encoding="utf-16")

        self.assertEqual(FO.read(test_file), content)

    def test_read_latin1_file(self):
        """Test reading Latin-1 encoded file."""
        test_file = self.test_dir / "latin1.ckl"
        content = "Café résumé"
        test_file.write_text(content, encoding="latin-1")

        self.assertEqual(FO.read(test_file), content)

    def test_read_cp1252_file(self):
        """Windows-1252 punctuation decodes to the typographic characters."""
        test_file = self.test_dir / "cp1252.ckl"
        test_file.write_bytes(sample_checklist().replace("TEST-SERVER", "Bob’s host").encode("cp1252"))

        content = FO.read(test_file)

        self.assertIn("Bob’s host", content)
        self.assertNotIn("\x92", content)
        self.assertEqual(parse(content).asset.host_name, "Bob’s host")

    def test_read_falls_back_to_latin1(self):
        """Even-length text without a BOM is not read as UTF-16."""
        test_file = self.test_dir / "latin1_only.ckl"
        test_file.write_bytes(b"<CHECKLIST>\x81</CHECKLIST>")

        self.assertEqual(FO.read(test_file), "<CHECKLIST>\x81</CHECKLIST>")

    def test_read_file_with_bom(self):
        """Test reading file with BOM (Byte Order Mark)."""
        test_file = self.test_dir / "bom.ckl"
        test_file.write_text("Content with BOM", encoding="utf-8-sig")

        self.assertEqual(FO.read(test_file), "Content with BOM")

    def test_read_nonexistent_file_raises_error(self):
        """Test that reading nonexistent file raises error."""
        with self.assertRaises(ValidationError):
            FO.read(self.test_dir / "nonexistent.ckl")

    def test_read_directory_raises_error(self):
        with self.assertRaises(ValidationError):
            FO.read(self.test_dir)


if __name__ == "__main__":
    unittest.main()
