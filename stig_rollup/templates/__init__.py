"""Blank checklist template stores, keyed by benchmark title."""

from __future__ import annotations

from stig_rollup.templates.store import DirectoryTemplateStore, MemoryTemplateStore, TemplateStore

__all__ = [
    "DirectoryTemplateStore",
    "MemoryTemplateStore",
    "TemplateStore",
]
