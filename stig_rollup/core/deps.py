"""Optional dependency detection and XML parser selection."""

from __future__ import annotations
from contextlib import suppress
import sys


class Deps:
    """Detects defusedxml and hands out the safest available parser."""

    HAS_DEFUSEDXML = False

    @classmethod
    def check(cls) -> None:
        """Check for defusedxml by parsing a trivial document with it."""
        with suppress(Exception):
            from defusedxml import ElementTree as DET

            DET.fromstring("<test/>")
            cls.HAS_DEFUSEDXML = True

    @classmethod
    def get_xml(cls):
        """Return ``(ElementTree module, ParseError class)``.

        defusedxml only hardens parsing, so element construction and
        serialization always go through the standard library module.
        """
        if cls.HAS_DEFUSEDXML:
            from defusedxml import ElementTree as ET
            from defusedxml.ElementTree import ParseError as XMLParseError
        else:
            import xml.etree.ElementTree as ET  # noqa: N813
            from xml.etree.ElementTree import ParseError as XMLParseError

        return ET, XMLParseError

    @classmethod
    def warn_if_unsafe(cls) -> None:
        """Warn on stderr when falling back to the standard library parser."""
        if not cls.HAS_DEFUSEDXML:
            print(
                "WARNING: defusedxml not installed; checklist and scan files are parsed "
                "with xml.etree, which is exposed to entity-expansion attacks. "
                "Install with: pip install defusedxml",
                file=sys.stderr,
            )


Deps.check()
