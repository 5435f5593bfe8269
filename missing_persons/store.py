"""
Data-loading service: holds the latest feed snapshot and tells listeners
when it changes.

    store = MissingPersonsStore()
    unsubscribe = store.subscribe(lambda snap: print(len(snap.records)))
    store.refetch()               # initial load, manual retry, revalidation
    snapshot = store.get_snapshot()

Every refetch() gets a monotonically increasing sequence number. Only the
result of the most recently issued request is applied; a slow request that
resolves after a newer one was issued is discarded. A failed fetch keeps the
previous records and sets the localized error message. A fetcher or
listener that raises never leaves the snapshot stuck in the fetching state.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from datetime import datetime, timezone

from .client import fetch_missing_persons
from .config import Settings
from .exceptions import DataUnavailableError
from .models import MissingPerson, Snapshot

logger = logging.getLogger(__name__)

Fetcher = Callable[[], "list[MissingPerson | None]"]
Listener = Callable[[Snapshot], None]


class MissingPersonsStore:
    """Pull-based accessor plus change notifications over the feed.

    Args:
        fetcher: Zero-argument callable returning the raw feed. Defaults to
            fetch_missing_persons() against `settings.api_url`.
        settings: Runtime settings (retry count, backoff, endpoint).
    """

    def __init__(self, fetcher: Fetcher | None = None, settings: Settings | None = None):
        self.settings = settings or Settings()
        self._fetcher = fetcher
        self._lock = threading.Lock()
        self._snapshot = Snapshot()
        self._listeners: list[Listener] = []
        self._issued = 0
        self._in_flight = 0

    # ─── Accessors ──────────────────────────────────────────────────

    def get_snapshot(self) -> Snapshot:
        return self._snapshot

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that removes it again."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    # ─── Fetching ───────────────────────────────────────────────────

    def refetch(self) -> Snapshot:
        """Fetch the feed again and apply the result if it is still current.

        Safe to call while another fetch is outstanding.

        Returns:
            The snapshot after this request settled (which may reflect a
            newer request if this one was superseded).
        """
        with self._lock:
            self._issued += 1
            seq = self._issued
            self._in_flight += 1
            self._snapshot = self._snapshot.model_copy(update={"fetching": True})
            started = self._snapshot
        self._notify(started)

        records: list[MissingPerson | None] | None = None
        error: DataUnavailableError | None = None
        try:
            records = self._fetch_with_retry(seq)
        except DataUnavailableError as e:
            error = e
        finally:
            if records is None and error is None:
                error = DataUnavailableError()
            settled = self._settle(seq, records, error)
        self._notify(settled)
        return settled

    def _settle(
        self,
        seq: int,
        records: list[MissingPerson | None] | None,
        error: DataUnavailableError | None,
    ) -> Snapshot:
        with self._lock:
            self._in_flight -= 1
            if seq != self._issued:
                logger.info("Discarding stale response #%d (latest is #%d)", seq, self._issued)
                self._snapshot = self._snapshot.model_copy(
                    update={"fetching": self._in_flight > 0}
                )
            elif error is not None:
                self._snapshot = self._snapshot.model_copy(
                    update={
                        "loading": False,
                        "fetching": self._in_flight > 0,
                        "error": str(error),
                        "version": seq,
                    }
                )
            else:
                self._snapshot = Snapshot(
                    records=[r for r in records or [] if r is not None],
                    loading=False,
                    fetching=self._in_flight > 0,
                    error=None,
                    last_updated=datetime.now(timezone.utc),
                    version=seq,
                )
            return self._snapshot

    def _fetch_with_retry(self, seq: int) -> list[MissingPerson | None]:
        attempts = max(1, self.settings.retry_count)
        last_error: DataUnavailableError | None = None

        for attempt in range(1, attempts + 1):
            try:
                return self._fetch()
            except DataUnavailableError as e:
                last_error = e
                logger.warning(
                    "Fetch #%d attempt %d/%d failed: %s", seq, attempt, attempts, e.details or e
                )

            if attempt == attempts or seq != self._issued:
                break
            delay = self.settings.retry_backoff * (2 ** (attempt - 1))
            if delay > 0:
                time.sleep(delay)

        assert last_error is not None
        raise last_error

    def _fetch(self) -> list[MissingPerson | None]:
        """Run the fetcher once; any failure comes out as DataUnavailableError."""
        try:
            if self._fetcher is not None:
                return self._fetcher()
            return fetch_missing_persons(self.settings.api_url, timeout=self.settings.timeout)
        except DataUnavailableError:
            raise
        except Exception as e:
            logger.error("Fetcher failed unexpectedly: %r", e)
            raise DataUnavailableError(details={"reason": repr(e)}) from e

    def _notify(self, snapshot: Snapshot) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Snapshot listener %r failed", listener)
