"""
STIG Rollup Configuration.

Application configuration and runtime settings.
"""

from __future__ import annotations

import os
import platform
import sys
import tempfile
import threading
from contextlib import suppress
from pathlib import Path
from typing import List, Optional, Tuple

from stig_rollup.core import constants


class Cfg:
    """
    Application configuration and directory management.

    Provides:
    - Platform detection
    - Directory management for logs, backups, templates and catalog data
    - File size and aggregation limits

    Thread-safe: Yes (uses RLock for initialization)
    """

    IS_WIN = platform.system() == "Windows"
    PY_VER = sys.version_info
    MIN_PY = constants.MIN_PYTHON_VERSION

    # Directory paths (initialized on first use)
    HOME: Optional[Path] = None
    APP_DIR: Optional[Path] = None
    LOG_DIR: Optional[Path] = None
    BACKUP_DIR: Optional[Path] = None
    TEMPLATE_DIR: Optional[Path] = None
    CATALOG_DIR: Optional[Path] = None

    # Limits and thresholds
    MAX_FILE = constants.MAX_FILE_SIZE
    MAX_CHECKLISTS = constants.MAX_CHECKLISTS
    AGG_WORKERS = constants.AGG_WORKERS
    KEEP_BACKUPS = constants.KEEP_BACKUPS

    ENV_HOME = "STIG_ROLLUP_HOME"

    _lock = threading.RLock()
    _done = False

    @classmethod
    def init(cls) -> None:
        """
        Initialize configuration directories.

        Picks the first writable home directory and creates the application
        tree beneath it. ``$STIG_ROLLUP_HOME`` wins over every other candidate.
        """
        with cls._lock:
            if cls._done:
                return

            candidates: List[Path] = []

            override = os.environ.get(cls.ENV_HOME)
            if override:
                candidates.append(Path(override))

            with suppress(Exception):
                candidates.append(Path.home())

            for env_var in ("USERPROFILE", "HOME"):
                val = os.environ.get(env_var)
                if val and os.path.exists(val):
                    candidates.append(Path(val))

            candidates.append(Path(tempfile.gettempdir()) / "stig_rollup_user")
            with suppress(Exception):
                candidates.append(Path.cwd() / ".stig_rollup_home")

            attempted_paths: List[str] = []
            for candidate in candidates:
                attempted_paths.append(str(candidate))
                try:
                    candidate.mkdir(parents=True, exist_ok=True)
                    tmp = candidate / f".rollup_test_{os.getpid()}"
                    tmp.write_text("ok", encoding="utf-8")
                    tmp.unlink()
                    cls.HOME = candidate
                    break
                except OSError:
                    continue

            if not cls.HOME:
                raise RuntimeError(
                    f"Cannot find writable home directory. Tried: {', '.join(attempted_paths[:5])}. "
                    f"Set ${cls.ENV_HOME} to a writable directory."
                )

            cls.APP_DIR = cls.HOME / ".stig_rollup"
            cls.LOG_DIR = cls.APP_DIR / "logs"
            cls.BACKUP_DIR = cls.APP_DIR / "backups"
            cls.TEMPLATE_DIR = cls.APP_DIR / "templates"
            cls.CATALOG_DIR = cls.APP_DIR / "catalog"

            required = [cls.APP_DIR, cls.LOG_DIR, cls.BACKUP_DIR]
            optional = [cls.TEMPLATE_DIR, cls.CATALOG_DIR]

            for directory in required:
                directory.mkdir(parents=True, exist_ok=True)
                tmp = directory / f".write_test_{os.getpid()}"
                tmp.write_text("ok", encoding="utf-8")
                tmp.unlink()

            for directory in optional:
                directory.mkdir(parents=True, exist_ok=True)

            cls._done = True

    @classmethod
    def check(cls) -> Tuple[bool, List[str]]:
        """Check the interpreter version, XML parser and directory permissions."""
        from stig_rollup.core.deps import Deps

        ET, _ = Deps.get_xml()
        errs: List[str] = []

        if cls.PY_VER < cls.MIN_PY:
            errs.append(f"Python {cls.MIN_PY[0]}.{cls.MIN_PY[1]}+ required")

        try:
            ET.fromstring("<test/>")
        except Exception:
            errs.append("XML parser failed")

        if cls.APP_DIR and not os.access(cls.APP_DIR, os.W_OK):
            errs.append(f"No write permission: {cls.APP_DIR}")

        return len(errs) == 0, errs


CFG = Cfg
Cfg.init()
