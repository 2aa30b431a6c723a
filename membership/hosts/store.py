"""Include/exclude host membership store.

Loads the include and exclude hosts files and keeps the parsed sets in memory.
Each refresh parses into fresh sets and swaps them in only when they differ,
so readers always see a complete set and references handed out earlier stay
valid (all sets are frozensets).

Thread-safety:
    One threading.Lock guards both sets, both file bindings and the
    initialized flag. Accessors and the whole read-compare-swap of refresh()
    run inside it, so two refreshes (timer thread + direct caller) serialize.
"""

from __future__ import annotations

import threading
from typing import Optional

from membership.hosts.parser import read_hosts_file
from membership.utils.logger import get_logger

logger = get_logger(__name__)


# ─── Exceptions ───────────────────────────────────────────────────────────────


class MembershipError(Exception):
    """Base class for all membership reader errors."""


class NotInitializedError(MembershipError, RuntimeError):
    """Raised when hosts are read or refreshed before mark_initialized()."""

    def __init__(self, operation: str) -> None:
        super().__init__(f"{operation}() called before the hosts reader was initialized")
        self.operation = operation


class HostsFileReadError(MembershipError, OSError):
    """Raised when a hosts file exists but cannot be read or decoded.

    The previously loaded set for that file is kept.
    """

    def __init__(self, path: str, cause: Exception) -> None:
        super().__init__(f"Could not read hosts file {path}: {cause}")
        self.path = path
        self.cause = cause


# ─── MembershipStore ──────────────────────────────────────────────────────────


class MembershipStore:
    """Holds the include and exclude host sets loaded from two files.

    Usage:
        store = MembershipStore()
        store.configure("/etc/hosts.include", "/etc/hosts.exclude")
        store.mark_initialized()
        store.refresh()
        if host in store.get_hosts() and host not in store.get_excluded_hosts():
            ...
    """

    def __init__(self) -> None:
        self._includes: frozenset[str] = frozenset()
        self._excludes: frozenset[str] = frozenset()
        self._includes_file: Optional[str] = None
        self._excludes_file: Optional[str] = None
        self._initialized = False
        self._lock = threading.Lock()

    # ── Setup ─────────────────────────────────────────────────────────────────

    def configure(self, includes_path: Optional[str], excludes_path: Optional[str]) -> None:
        """Bind the include and exclude files.

        An empty path (or None) means that list is not file-backed; it keeps
        its current contents (empty unless populated earlier).
        """
        with self._lock:
            if not includes_path:
                logger.info("Not using a hosts include file as its value is unspecified")
            else:
                logger.info("Setting includes file", path=includes_path)
                self._includes_file = includes_path

            if not excludes_path:
                logger.info("Not using a hosts exclude file as its value is unspecified")
            else:
                logger.info("Setting excludes file", path=excludes_path)
                self._excludes_file = excludes_path

    def mark_initialized(self) -> None:
        """Allow reads and refreshes. Call once, after configure()."""
        with self._lock:
            self._initialized = True

    # ── Public read API ───────────────────────────────────────────────────────

    @property
    def initialized(self) -> bool:
        with self._lock:
            return self._initialized

    @property
    def includes_file(self) -> Optional[str]:
        with self._lock:
            return self._includes_file

    @property
    def excludes_file(self) -> Optional[str]:
        with self._lock:
            return self._excludes_file

    def get_hosts(self) -> frozenset[str]:
        """Return the current include set (immutable snapshot, no I/O).

        Raises:
            NotInitializedError: before mark_initialized().
        """
        with self._lock:
            self._check_initialized("get_hosts")
            return self._includes

    def get_excluded_hosts(self) -> frozenset[str]:
        """Return the current exclude set (immutable snapshot, no I/O).

        Raises:
            NotInitializedError: before mark_initialized().
        """
        with self._lock:
            self._check_initialized("get_excluded_hosts")
            return self._excludes

    # ── Refresh ───────────────────────────────────────────────────────────────

    def refresh(self) -> bool:
        """Re-read both bound files and swap in any set whose contents changed.

        A bound file that does not exist leaves its set untouched.

        Returns:
            True if the include set or the exclude set changed.

        Raises:
            NotInitializedError: before mark_initialized().
            HostsFileReadError: a bound file exists but could not be read.
                An include file failure aborts before the exclude file is read.
        """
        with self._lock:
            self._check_initialized("refresh")
            logger.info(
                "Refreshing hosts lists",
                includes=self._includes_file,
                excludes=self._excludes_file,
            )
            updated = False

            if self._includes_file is not None:
                new_includes = _load(self._includes_file)
                if new_includes is not None and new_includes != self._includes:
                    self._includes = new_includes
                    updated = True
                    logger.debug("Updated includes", hosts=sorted(new_includes))

            if self._excludes_file is not None:
                new_excludes = _load(self._excludes_file)
                if new_excludes is not None and new_excludes != self._excludes:
                    self._excludes = new_excludes
                    updated = True
                    logger.debug("Updated excludes", hosts=sorted(new_excludes))

            return updated

    def require_initialized(self, operation: str) -> None:
        """Raise NotInitializedError on behalf of ``operation`` if not yet initialized."""
        with self._lock:
            self._check_initialized(operation)

    def _check_initialized(self, operation: str) -> None:
        if not self._initialized:
            raise NotInitializedError(operation)


def _load(path: str) -> Optional[frozenset[str]]:
    """Parse one hosts file; None if it is missing."""
    try:
        hosts = read_hosts_file(path)
    except (OSError, UnicodeDecodeError) as exc:
        logger.error(
            "Could not read hosts file — keeping prior hosts",
            path=path,
            error=str(exc),
            error_type=type(exc).__name__,
        )
        raise HostsFileReadError(path, exc) from exc
    if hosts is None:
        logger.debug("Hosts file not found — hosts unchanged", path=path)
    return hosts
