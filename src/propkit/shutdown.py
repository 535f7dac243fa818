"""Cleanup-on-exit registry.

Some commands leave the package in a temporary state (the production
tsconfig swap) that must be undone however the process ends: normal exit,
Ctrl-C or termination. The entry point owns one ``CleanupRegistry`` and
installs its handlers; commands register their restore callbacks with it.

Philosophy:
- Explicit ownership (no module-level callback lists)
- Every callback runs at most once
- Callbacks run in reverse registration order
"""

import atexit
import logging
import signal
from collections.abc import Callable

logger = logging.getLogger(__name__)

HANDLED_SIGNALS = ("SIGINT", "SIGTERM")


class CleanupRegistry:
    """Runs registered callbacks once on exit or on a termination signal.

    Example:
        >>> registry = CleanupRegistry()
        >>> registry.install()
        >>> registry.register(restore_tsconfig)
        >>> ...
        >>> registry.run()  # or automatically at exit
    """

    def __init__(self):
        self._callbacks: list[Callable[[], None]] = []
        self._installed = False
        self._previous_handlers: dict[int, object] = {}

    def __len__(self) -> int:
        return len(self._callbacks)

    def register(self, callback: Callable[[], None]) -> Callable[[], None]:
        self._callbacks.append(callback)
        return callback

    def unregister(self, callback: Callable[[], None]) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def run(self) -> None:
        """Run pending callbacks, newest first; failures are logged."""
        while self._callbacks:
            callback = self._callbacks.pop()
            try:
                callback()
            except Exception as e:
                logger.error(f"Cleanup callback failed: {e}")

    def install(self) -> None:
        """Register with atexit and take over SIGINT/SIGTERM."""
        if self._installed:
            return
        atexit.register(self.run)
        for name in HANDLED_SIGNALS:
            signum = getattr(signal, name, None)
            if signum is None:
                continue
            self._previous_handlers[signum] = signal.signal(signum, self._handle_signal)
        self._installed = True

    def uninstall(self) -> None:
        if not self._installed:
            return
        atexit.unregister(self.run)
        for signum, handler in self._previous_handlers.items():
            signal.signal(signum, handler)
        self._previous_handlers.clear()
        self._installed = False

    def _handle_signal(self, signum, frame):
        logger.info(f"Received signal {signum}, restoring files...")
        self.run()
        raise SystemExit(128 + signum)


__all__ = ["CleanupRegistry"]
