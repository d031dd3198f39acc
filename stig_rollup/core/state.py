"""Global state management and shutdown coordination."""

from __future__ import annotations
from typing import Optional, List, Callable
from pathlib import Path
from contextlib import suppress
import threading
import signal
import atexit
import sys


class GlobalState:
    """
    Process-wide shutdown coordinator (Singleton).

    ``shutdown`` is the default cancellation signal for long aggregation
    runs and for retried file operations. Temp files registered with
    :meth:`add_temp` are removed on exit. Signal handlers are only
    installed on request so that importing the package never changes the
    host process's SIGINT behaviour.

    Thread Safety:
        All public methods are guarded by an internal RLock.
    """

    _instance: Optional["GlobalState"] = None
    _lock = threading.RLock()

    def __new__(cls) -> "GlobalState":
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._init()
        return cls._instance

    def _init(self) -> None:
        self.shutdown = threading.Event()
        self.temps: List[Path] = []
        self.cleanups: List[Callable[[], None]] = []
        self._signals_installed = False
        atexit.register(self.cleanup)

    def install_signals(self) -> None:
        """Route SIGINT/SIGTERM to the shutdown event (main thread only)."""
        if self._signals_installed or threading.current_thread() is not threading.main_thread():
            return

        def handler(sig, frame):
            print(f"\n[SIGNAL {sig}] Shutting down gracefully...", file=sys.stderr)
            self.shutdown.set()
            raise KeyboardInterrupt

        for sig in (signal.SIGINT, signal.SIGTERM):
            with suppress(ValueError, OSError):
                signal.signal(sig, handler)
        self._signals_installed = True

    def add_temp(self, path: Path) -> None:
        with self._lock:
            self.temps.append(path)

    def add_cleanup(self, func: Callable[[], None]) -> None:
        """Add a cleanup function to be called on shutdown."""
        with self._lock:
            self.cleanups.append(func)

    def reset(self) -> None:
        """Clear a previous shutdown request so work may start again."""
        self.shutdown.clear()

    def cleanup(self) -> None:
        with self._lock:
            for func in reversed(self.cleanups):
                with suppress(Exception):
                    func()

            for temp in self.temps:
                with suppress(OSError):
                    if temp and temp.exists():
                        temp.unlink()

            self.temps.clear()
            self.cleanups.clear()


GLOBAL_STATE = GlobalState()
