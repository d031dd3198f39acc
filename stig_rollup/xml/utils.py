"""
STIG Rollup XML Utility Functions.

Shared helpers for turning raw checklist and scan text into element trees.
"""

from __future__ import annotations
import re
import xml.etree.ElementTree as ET
from typing import Optional

from stig_rollup.core.deps import Deps
from stig_rollup.core.logging import LOG
from stig_rollup.exceptions import ParseError


class XmlUtils:
    """
    Stateless XML helpers.

    Provides:
    - Raw text normalization before parsing (tabs, XML declaration)
    - Hardened parsing through :class:`Deps`
    - Namespace prefix discovery from the raw document
    - Null-safe text access

    Thread-safe: Yes (stateless utility class)
    """

    DECLARATION = re.compile(r"^\s*<\?xml[^>]*\?>")

    @staticmethod
    def strip_tabs(raw: str) -> str:
        """Remove every literal tab character."""
        return raw.replace("\t", "")

    @staticmethod
    def parse(raw: str) -> ET.Element:
        """
        Parse document text into its root element.

        The XML declaration is dropped first: text read through
        :meth:`FO.read` is already decoded, and a stale ``encoding=``
        declaration (utf-16 exports) would otherwise be rejected.

        Raises:
            ParseError: If the text is not well-formed XML, or is rejected
                by defusedxml (DTD entities, external references)
        """
        ET_mod, XMLParseError = Deps.get_xml()
        body = XmlUtils.DECLARATION.sub("", raw.lstrip("\ufeff"), count=1)
        try:
            return ET_mod.fromstring(body)
        except XMLParseError as exc:
            raise ParseError(f"Document is not well-formed XML: {exc}") from exc
        except ValueError as exc:
            # defusedxml reports forbidden constructs as ValueError subclasses
            raise ParseError(f"Document rejected by XML parser: {exc}") from exc

    @staticmethod
    def namespace_uri(raw: str, prefix: str) -> Optional[str]:
        """
        Return the URI bound to ``prefix`` in the document's own declarations.

        Example:
            >>> XmlUtils.namespace_uri('<cdf:Benchmark xmlns:cdf="urn:x"/>', "cdf")
            'urn:x'
        """
        match = re.search(
            r"xmlns:" + re.escape(prefix) + r"\s*=\s*([\"'])(.*?)\1",
            raw,
        )
        if not match:
            LOG.d(f"No namespace declaration for prefix '{prefix}'")
            return None
        return match.group(2)

    @staticmethod
    def text(elem: Optional[ET.Element]) -> str:
        """Inner text of ``elem`` including descendants; empty for None."""
        if elem is None:
            return ""
        return "".join(elem.itertext())

    @staticmethod
    def child_text(elem: ET.Element, tag: str) -> str:
        """Text of the first direct child named ``tag``, or empty."""
        return XmlUtils.text(elem.find(tag))
