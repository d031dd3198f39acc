"""
Checklist model, parser and writer.

``parse`` turns STIG Viewer XML into a :class:`Checklist`; ``serialize``
and ``render_document`` turn it back into text.
"""

from __future__ import annotations

from stig_rollup.checklist.models import (
    Asset,
    AttributeList,
    Checklist,
    Finding,
    StoredChecklist,
)
from stig_rollup.checklist.parser import parse
from stig_rollup.checklist.writer import (
    render_asset_header,
    render_document,
    serialize,
    serialize_stigs,
)

__all__ = [
    "Asset",
    "AttributeList",
    "Checklist",
    "Finding",
    "StoredChecklist",
    "parse",
    "render_asset_header",
    "render_document",
    "serialize",
    "serialize_stigs",
]
