"""
Blank checklist template stores.

A template is an unreviewed checklist for one benchmark. The scan merger
asks for one by benchmark title when a scan arrives for a host that has
no checklist yet.
"""

from __future__ import annotations
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Union

from stig_rollup.checklist.parser import parse
from stig_rollup.core.config import Cfg
from stig_rollup.core.logging import LOG
from stig_rollup.io.file_ops import FO
from stig_rollup.exceptions import RollupError


class TemplateStore(Protocol):
    """Anything that can return a blank checklist for a benchmark title."""

    def template_for_title(self, title: str) -> Optional[str]:
        ...


class MemoryTemplateStore:
    """Title-keyed templates held in a dict (tests and embedding callers)."""

    def __init__(self, templates: Optional[Dict[str, str]] = None):
        self.templates: Dict[str, str] = dict(templates or {})

    def add(self, title: str, raw: str) -> None:
        self.templates[title] = raw

    def template_for_title(self, title: str) -> Optional[str]:
        return self.templates.get(title)


class DirectoryTemplateStore:
    """
    Templates loaded from ``*.ckl`` files in a directory.

    Files are indexed by their STIG_INFO ``title`` on first lookup; file
    names are not significant. Files that fail to read or parse are logged
    and skipped. When two files share a title the first in name order wins.

    Thread-safe: No (index once, then read)
    """

    PATTERN = "*.ckl"

    def __init__(self, directory: Optional[Union[str, Path]] = None):
        if directory is None:
            directory = Cfg.TEMPLATE_DIR
        self.directory = Path(directory)
        self._index: Optional[Dict[str, Path]] = None

    def load(self) -> Dict[str, Path]:
        """(Re)build the title index."""
        index: Dict[str, Path] = {}
        if not self.directory.is_dir():
            LOG.w(f"Template directory not found: {self.directory}")
            self._index = index
            return index

        for path in sorted(self.directory.glob(self.PATTERN)):
            try:
                title = parse(FO.read(path)).title
            except RollupError as exc:
                LOG.w(f"Skipping template {path.name}: {exc}")
                continue
            if not title:
                LOG.d(f"Template {path.name} has no title")
                continue
            index.setdefault(title, path)

        LOG.i(f"Indexed {len(index)} checklist templates from {self.directory}")
        self._index = index
        return index

    def titles(self) -> List[str]:
        if self._index is None:
            self.load()
        return sorted(self._index)

    def template_for_title(self, title: str) -> Optional[str]:
        if self._index is None:
            self.load()
        path = self._index.get(title)
        if path is None:
            return None
        return FO.read(path)
