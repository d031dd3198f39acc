"""
File operations module.

Atomic writes with backup and rollback, and encoding detection for
checklist and scan result files exported by assorted Windows tools.
"""

from __future__ import annotations
import codecs
import functools
import os
import shutil
import tempfile
import time
from contextlib import contextmanager, suppress
from datetime import datetime, timezone
from pathlib import Path
from typing import Generator, IO, Optional, Tuple, Union

from stig_rollup.core.config import Cfg
from stig_rollup.core.constants import (
    ENCODINGS,
    LARGE_FILE_THRESHOLD,
    MAX_RETRIES,
    RETRY_DELAY,
)
from stig_rollup.core.logging import LOG
from stig_rollup.core.state import GLOBAL_STATE
from stig_rollup.exceptions import FileError
from stig_rollup.xml.sanitizer import San


def retry(
    attempts: int = MAX_RETRIES,
    delay: float = RETRY_DELAY,
    exceptions: Tuple[type, ...] = (OSError,),
):
    """Retry decorator with exponential backoff.

    Raises InterruptedError without another attempt once a shutdown has
    been requested.
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            wait = delay
            last_err: Optional[BaseException] = None
            for attempt in range(1, attempts + 1):
                if GLOBAL_STATE.shutdown.is_set():
                    raise InterruptedError("Shutdown requested")
                try:
                    return func(*args, **kwargs)
                except exceptions as err:
                    last_err = err
                    LOG.d(f"{func.__name__} attempt {attempt}/{attempts} failed: {err}")
                    if attempt < attempts:
                        time.sleep(wait)
                        wait *= 2
            if last_err:
                raise last_err
            raise RuntimeError("Retry failed without captured exception")

        return wrapper

    return decorator


class FO:
    """Safe file operations: atomic writes with rollback, tolerant reads."""

    @staticmethod
    @contextmanager
    def atomic(target: Union[str, Path], enc: str = "utf-8", bak: bool = True) -> Generator[IO[str], None, None]:
        """Atomic text write with automatic rollback on failure.

        Content goes to a temp file beside ``target`` which replaces it only
        after the ``with`` block completes. An existing target is first
        copied to ``Cfg.BACKUP_DIR`` and restored if the replace fails.

        Raises:
            FileError: On write or rollback failure
        """
        target = San.path(target, mkpar=True)
        tmp_path: Optional[Path] = None
        backup_path: Optional[Path] = None

        try:
            if bak and target.is_file():
                timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S_%f")
                backup_path = Cfg.BACKUP_DIR / f"{target.stem}_{timestamp}{target.suffix}.bak"
                shutil.copy2(str(target), str(backup_path))

            fd, tmp_name = tempfile.mkstemp(
                dir=str(target.parent),
                prefix=f".rollup_tmp_{os.getpid()}_",
                suffix=".tmp",
                text=True,
            )
            tmp_path = Path(tmp_name)
            GLOBAL_STATE.add_temp(tmp_path)

            with os.fdopen(fd, "w", encoding=enc, newline="\n") as fh:
                yield fh
                fh.flush()
                with suppress(OSError):
                    os.fsync(fh.fileno())

            tmp_path.replace(target)
            tmp_path = None

            if bak:
                FO._clean_baks(target.stem)

        except Exception as exc:
            if backup_path and backup_path.exists():
                try:
                    shutil.copy2(str(backup_path), str(target))
                    LOG.i(f"Restored from backup: {backup_path}")
                except OSError as rollback_err:
                    LOG.c(f"Rollback failed, manual recovery needed. Backup: {backup_path}", exc=True)
                    raise FileError(
                        f"Atomic write failed AND rollback failed: {exc}",
                        {"backup": str(backup_path)},
                    ) from rollback_err
            raise FileError(f"Atomic write failed: {exc}", {"path": str(target)}) from exc
        finally:
            if tmp_path and tmp_path.exists():
                with suppress(OSError):
                    tmp_path.unlink()

    @staticmethod
    @retry(exceptions=(FileError,))
    def write_text(target: Union[str, Path], content: str, bak: bool = True) -> Path:
        """Atomically replace ``target`` with ``content``."""
        with FO.atomic(target, bak=bak) as fh:
            fh.write(content)
        LOG.d(f"Wrote {len(content)} chars to {target}")
        return Path(target)

    @staticmethod
    def _clean_baks(stem: str) -> None:
        """Remove old backups, keeping only the most recent ones."""
        backups = sorted(
            Cfg.BACKUP_DIR.glob(f"{stem}_*.bak"),
            key=lambda p: p.stat().st_mtime,
            reverse=True,
        )
        for old in backups[Cfg.KEEP_BACKUPS:]:
            with suppress(OSError):
                old.unlink()

    @staticmethod
    def read(path: Union[str, Path]) -> str:
        """Read a text file, trying each of ``ENCODINGS`` in turn.

        UTF-16 is only attempted when the file starts with a UTF-16 BOM.

        Large files have their encoding sniffed from an 8 KB sample before
        the full read. A leading BOM is removed.

        Raises:
            ValidationError: If the path does not name a readable file
            FileError: If no known encoding decodes the file
        """
        path = San.path(path, exist=True, file=True)
        file_size = path.stat().st_size
        with open(path, "rb") as handle:
            head = handle.read(2)
        # BOM-less UTF-16 decodes almost any even-length byte string
        candidates = [
            enc for enc in ENCODINGS
            if not enc.startswith("utf-16") or head in (codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)
        ]

        detected: Optional[str] = None
        if file_size > LARGE_FILE_THRESHOLD:
            for encoding in candidates:
                try:
                    with open(path, "r", encoding=encoding, errors="strict") as handle:
                        handle.read(8192)
                    detected = encoding
                    break
                except UnicodeError:
                    continue

        for encoding in [detected] if detected else candidates:
            try:
                with open(path, "r", encoding=encoding, errors="strict") as handle:
                    data = handle.read()
            except UnicodeError:
                continue
            if data.startswith("\ufeff"):
                data = data[1:]
            return data

        raise FileError(f"Unable to decode file with any known encoding: {path}")


__all__ = ["FO", "retry"]
