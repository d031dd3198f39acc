"""
XML processing modules.

Schema constants, sanitization, and parsing helpers shared by the
checklist and scan result packages.
"""

from __future__ import annotations

from stig_rollup.xml.schema import Sch
from stig_rollup.xml.sanitizer import San
from stig_rollup.xml.utils import XmlUtils

__all__ = [
    "Sch",
    "San",
    "XmlUtils",
]
