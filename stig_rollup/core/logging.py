"""Thread-safe logging with contextual metadata."""

from __future__ import annotations
from typing import Any, Dict, Iterator
from contextlib import contextmanager, suppress
import threading
import logging
import logging.handlers
import sys


class Log:
    """
    Named logger carrying per-thread key/value context.

    One instance exists per name. Context set with :meth:`ctx` is prefixed
    to every message logged from the same thread until :meth:`clear`, which
    keeps aggregation workers from mixing up each other's checklist ids.

    Thread-safe: Yes
    """

    _instances: Dict[str, "Log"] = {}
    _lock = threading.RLock()

    def __new__(cls, name: str) -> "Log":
        with cls._lock:
            if name not in cls._instances:
                inst = super().__new__(cls)
                inst._initialised = False
                cls._instances[name] = inst
            return cls._instances[name]

    def __init__(self, name: str):
        if getattr(self, "_initialised", False):
            return

        with self._lock:
            if getattr(self, "_initialised", False):
                return
            self._initialised = True
            self.name = name
            self.log = logging.getLogger(name)
            self.log.setLevel(logging.INFO)
            self.log.handlers.clear()
            self.log.propagate = False
            self._ctx = threading.local()
            self._setup()

    def _setup(self) -> None:
        """Attach a stderr handler and a rotating file handler under LOG_DIR."""
        # Deferred: config imports nothing from here but core/__init__ loads both
        from stig_rollup.core.config import Cfg

        console = logging.StreamHandler(sys.stderr)
        console.setLevel(logging.WARNING)
        console.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        self.log.addHandler(console)

        if Cfg.LOG_DIR is None:
            return
        with suppress(OSError):
            file_handler = logging.handlers.RotatingFileHandler(
                str(Cfg.LOG_DIR / f"{self.name}.log"),
                maxBytes=10 * 1024 * 1024,
                backupCount=5,
                encoding="utf-8",
                delay=True,
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(
                logging.Formatter(
                    "[%(asctime)s] [%(levelname)-8s] [%(threadName)s] %(message)s",
                    "%Y-%m-%d %H:%M:%S",
                )
            )
            self.log.addHandler(file_handler)

    def set_verbose(self, verbose: bool = True) -> None:
        """Switch between DEBUG and INFO on the underlying logger."""
        self.log.setLevel(logging.DEBUG if verbose else logging.INFO)

    def ctx(self, **kw: Any) -> None:
        """Add contextual metadata to log messages."""
        if not hasattr(self._ctx, "data"):
            self._ctx.data = {}
        self._ctx.data.update(kw)

    def clear(self) -> None:
        """Clear contextual metadata."""
        if hasattr(self._ctx, "data"):
            self._ctx.data.clear()

    @contextmanager
    def scope(self, **kw: Any) -> Iterator[None]:
        """Set context for the duration of a ``with`` block."""
        self.ctx(**kw)
        try:
            yield
        finally:
            self.clear()

    def _context_str(self) -> str:
        data = getattr(self._ctx, "data", None)
        if data:
            return "[" + ", ".join(f"{k}={v}" for k, v in data.items()) + "] "
        return ""

    def _log(self, level: int, message: str, exc: bool = False) -> None:
        self.log.log(level, self._context_str() + str(message), exc_info=exc)

    def d(self, msg: str) -> None:
        """Log debug message."""
        self._log(logging.DEBUG, msg)

    def i(self, msg: str) -> None:
        """Log info message."""
        self._log(logging.INFO, msg)

    def w(self, msg: str) -> None:
        """Log warning message."""
        self._log(logging.WARNING, msg)

    def e(self, msg: str, exc: bool = False) -> None:
        """Log error message."""
        self._log(logging.ERROR, msg, exc)

    def c(self, msg: str, exc: bool = False) -> None:
        """Log critical message."""
        self._log(logging.CRITICAL, msg, exc)


LOG = Log("stig_rollup")
