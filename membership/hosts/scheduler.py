"""Periodic hosts refresh with node re-evaluation callbacks.

RefreshScheduler drives MembershipStore.refresh() either once (one-shot mode)
or on a fixed period from a background daemon thread. After each periodic tick
that changed membership it calls ``target.refresh_nodes()`` so the cluster
manager can re-evaluate which nodes are live.

Tick policy:
  - start_periodic() refreshes once synchronously, then the first tick fires
    one full period later and every period after that.
  - The target is notified only when a tick changed the include or exclude set.
  - A failed refresh or a failed refresh_nodes() is logged and the schedule
    continues. No retry beyond the next tick.
"""

from __future__ import annotations

import threading
from typing import Optional, Protocol, runtime_checkable

from membership.constants import SCHEDULER_STOP_TIMEOUT_S, SCHEDULER_THREAD_NAME
from membership.hosts.store import MembershipStore
from membership.utils.logger import get_logger

logger = get_logger(__name__)


# ─── NotificationTarget Protocol ──────────────────────────────────────────────


@runtime_checkable
class NotificationTarget(Protocol):
    """Whatever re-evaluates cluster nodes after membership changes."""

    def refresh_nodes(self) -> None:
        """Re-read membership from the store and update live nodes. May raise."""
        ...


# ─── RefreshScheduler ─────────────────────────────────────────────────────────


class RefreshScheduler:
    """Runs the store's refresh once or periodically.

    One periodic task per scheduler. stop() signals the loop through a
    threading.Event and joins the thread; callers that never stop it rely on
    the thread being a daemon.
    """

    def __init__(self, store: MembershipStore) -> None:
        self._store = store
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._target: Optional[NotificationTarget] = None
        self._period_seconds: float = 0
        self._lock = threading.Lock()

    @property
    def store(self) -> MembershipStore:
        return self._store

    @property
    def running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive()

    @property
    def period_seconds(self) -> float:
        return self._period_seconds

    # ── Entry points ──────────────────────────────────────────────────────────

    def refresh_once_now(self) -> bool:
        """One-shot refresh. Errors propagate to the caller."""
        return self._store.refresh()

    def start_periodic(self, target: NotificationTarget, period_seconds: float) -> bool:
        """Refresh now, then every ``period_seconds`` on a background thread.

        The immediate refresh does not notify ``target``; its errors propagate
        and the schedule is not started.

        Returns:
            Result of the immediate refresh (True if membership changed).

        Raises:
            ValueError: period_seconds <= 0.
            RuntimeError: a periodic task is already running.
            NotInitializedError: the store is not initialized.
        """
        if period_seconds <= 0:
            raise ValueError(f"period_seconds must be positive, got {period_seconds!r}")
        self._store.require_initialized("start_periodic")

        with self._lock:
            if self.running:
                raise RuntimeError("Periodic hosts refresh is already running")

        # Refresh outside the lock: stop() must not wait on file I/O.
        updated = self._store.refresh()

        with self._lock:
            if self.running:
                raise RuntimeError("Periodic hosts refresh is already running")

            logger.info(
                "Enabling automatic refresh_nodes",
                period_seconds=period_seconds,
            )
            self._target = target
            self._period_seconds = period_seconds
            self._stop_event.clear()
            self._thread = threading.Thread(
                target=self._run,
                name=SCHEDULER_THREAD_NAME,
                daemon=True,
            )
            self._thread.start()
            return updated

    def select_and_refresh(self, target: NotificationTarget, refresh_sec: float) -> bool:
        """Pick the refresh mode from a configured interval.

        ``refresh_sec <= 0`` refreshes once; a positive value starts periodic
        refresh at that many seconds.
        """
        if refresh_sec > 0:
            return self.start_periodic(target, refresh_sec)
        return self.refresh_once_now()

    def stop(self, timeout: Optional[float] = SCHEDULER_STOP_TIMEOUT_S) -> None:
        """Signal the periodic loop to exit and wait for it."""
        with self._lock:
            thread = self._thread
            self._stop_event.set()
        if thread is None:
            return
        thread.join(timeout)
        if thread.is_alive():
            logger.warning(
                "Periodic hosts refresh did not stop in time",
                timeout_s=timeout,
            )
        else:
            logger.info("Periodic hosts refresh stopped")

    # ── Background loop ───────────────────────────────────────────────────────

    def _run(self) -> None:
        while not self._stop_event.wait(self._period_seconds):
            self._tick()

    def _tick(self) -> None:
        """One scheduled refresh. NEVER propagates exceptions."""
        try:
            updated = self._store.refresh()
        except Exception as exc:
            logger.error(
                "Failed refreshing hosts lists",
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return

        if not updated:
            return

        target = self._target
        if target is None:
            return
        try:
            target.refresh_nodes()
        except Exception as exc:
            logger.error(
                "Failed refreshing nodes",
                error=str(exc),
                error_type=type(exc).__name__,
            )
