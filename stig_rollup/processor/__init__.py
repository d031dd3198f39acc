"""Checklist processors.

Attribute canonicalization of uploaded checklists and carrying results
from a re-uploaded checklist into the stored one.
"""

from __future__ import annotations

from stig_rollup.processor.canonicalizer import canonicalize, canonical_attributes, needs_rebuild
from stig_rollup.processor.updater import apply_checklist_update, update_checklist

__all__ = [
    "canonicalize",
    "canonical_attributes",
    "needs_rebuild",
    "apply_checklist_update",
    "update_checklist",
]
