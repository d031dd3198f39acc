"""
I/O and file operations modules.

Atomic writes with backups, and encoding detection for checklist and
scan result files.
"""

from __future__ import annotations

from stig_rollup.io.file_ops import FO, retry

__all__ = ["FO", "retry"]
