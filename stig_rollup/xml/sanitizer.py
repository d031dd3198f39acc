"""Input sanitization and validation utilities.

Path checks for files handed to the CLI and stores, escaping for the
hand-written checklist header, and the address filters applied to scan
result target facts.
"""

from __future__ import annotations
import ipaddress
import os
import re
from pathlib import Path
from typing import Any, Iterable, List, Union

from stig_rollup.core.constants import EMPTY_MAC, IS_WINDOWS, MAX_FILE_SIZE
from stig_rollup.exceptions import ValidationError


class San:
    """Input sanitization and validation utilities.

    Path validation raises ValidationError. The text helpers never raise:
    checklist content is audit data of uncertain provenance and is passed
    through rather than rejected.

    Thread-safe: Yes (stateless utility class)
    """

    CTRL = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")

    MAX_PATH = 260 if IS_WINDOWS else 4096

    @staticmethod
    def path(
        value: Union[str, Path],
        *,
        exist: bool = False,
        file: bool = False,
        dir: bool = False,
        mkpar: bool = False,
    ) -> Path:
        """Validate and resolve a file system path.

        Args:
            value: Path string or Path object to validate
            exist: If True, path must exist
            file: If True, path must be a file (if it exists)
            dir: If True, path must be a directory (if it exists)
            mkpar: If True, create parent directories

        Returns:
            Resolved Path object

        Raises:
            ValidationError: If the path is empty, too long, or fails a requirement
        """
        if not value or (isinstance(value, str) and not value.strip()):
            raise ValidationError("Empty path")

        as_str = str(value).strip()
        if "\x00" in as_str:
            raise ValidationError("Null byte in path")

        path = Path(as_str).expanduser().resolve(strict=False)

        if len(str(path)) > San.MAX_PATH:
            raise ValidationError(f"Path too long: {len(str(path))}")

        if mkpar:
            path.parent.mkdir(parents=True, exist_ok=True)

        if exist and not path.exists():
            raise ValidationError(f"Not found: {path}")

        if file and path.exists() and not path.is_file():
            raise ValidationError(f"Not a file: {path}")

        if dir and path.exists() and not path.is_dir():
            raise ValidationError(f"Not a directory: {path}")

        if path.exists() and path.is_file():
            size = path.stat().st_size
            if size > MAX_FILE_SIZE:
                raise ValidationError(f"File too large: {size}")
            if not os.access(path, os.R_OK):
                raise ValidationError(f"File not readable: {path}")

        return path

    @staticmethod
    def xml(value: Any) -> str:
        """Escape a value for direct interpolation into XML text.

        Control characters are dropped and the five XML entities escaped.
        None becomes an empty string.
        """
        if value is None:
            return ""
        if not isinstance(value, str):
            value = str(value)

        value = San.CTRL.sub("", value)
        return (
            value.replace("&", "&amp;")
            .replace("<", "&lt;")
            .replace(">", "&gt;")
            .replace('"', "&quot;")
            .replace("'", "&apos;")
        )

    @staticmethod
    def text(value: Any) -> str:
        """Return ``value`` as element text with control characters removed."""
        if value is None:
            return ""
        return San.CTRL.sub("", str(value))

    @staticmethod
    def is_loopback(value: str) -> bool:
        """True for loopback IP addresses; unparseable text is not loopback."""
        try:
            return ipaddress.ip_address(value.strip()).is_loopback
        except ValueError:
            return False

    @staticmethod
    def is_placeholder_mac(value: str) -> bool:
        """True for the all-zero MAC that scanners report for virtual adapters."""
        return value.strip().replace("-", ":").upper() == EMPTY_MAC

    @staticmethod
    def join_unique(values: Iterable[str], sep: str = ", ") -> str:
        """Join non-empty values in first-seen order, dropping repeats."""
        seen: List[str] = []
        for value in values:
            value = (value or "").strip()
            if value and value not in seen:
                seen.append(value)
        return sep.join(seen)
