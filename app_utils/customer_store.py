from __future__ import annotations

"""Remote customer list cache.

One ``CustomerListStore`` per endpoint URL. It owns the last-known list and
its loading/error status, and refetches on ``revalidate()``.

Ordering rule: each GET takes the next sequence number when it is issued,
and a completion only lands if its number is still the latest issued. A
slow, older response arriving after a newer one is dropped, so state never
regresses. Superseded requests run to completion; they are not cancelled.

Fetches run on a small thread pool; ``_state`` is the only shared cell and
is swapped under ``_lock``. Listeners are called outside the lock, on the
thread that completed the transition.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Generic, List, Optional, TypeVar

from app_utils.customer_api import ApiRequestError, list_customers
from schemas.customer import ApiError, Customer

logger = logging.getLogger(__name__)

T = TypeVar("T")

UNEXPECTED_ERROR_CODE = "unexpected_error"


class RemoteStatus(str, Enum):
    LOADING = "loading"
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class RemoteState(Generic[T]):
    """Snapshot of a remote resource; never carries data and error together."""

    status: RemoteStatus
    data: Optional[T] = None
    error: Optional[ApiError] = None
    validating: bool = False

    @classmethod
    def loading(cls) -> "RemoteState[T]":
        return cls(RemoteStatus.LOADING, validating=True)

    @classmethod
    def success(cls, data: T) -> "RemoteState[T]":
        return cls(RemoteStatus.SUCCESS, data=data)

    @classmethod
    def failure(cls, error: ApiError) -> "RemoteState[T]":
        return cls(RemoteStatus.FAILURE, error=error)

    @property
    def is_loading(self) -> bool:
        return self.status is RemoteStatus.LOADING


Listener = Callable[[RemoteState[List[Customer]]], None]
Loader = Callable[[str], List[Customer]]


class CustomerListStore:
    def __init__(
        self,
        url: str,
        loader: Loader = list_customers,
        max_workers: int = 2,
    ) -> None:
        self.url = url
        self._loader = loader
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="customer-list"
        )
        self._lock = threading.Lock()
        # Serializes first reads so only one initial GET is issued
        self._mount_lock = threading.Lock()
        self._state: RemoteState[List[Customer]] = RemoteState.loading()
        self._seq = 0
        self._latest: Optional[Future] = None
        self._listeners: List[Listener] = []
        self._closed = False

    @property
    def key(self) -> str:
        return self.url

    @property
    def state(self) -> RemoteState[List[Customer]]:
        with self._lock:
            return self._state

    @property
    def sequence(self) -> int:
        """Number of the most recently issued GET (0 before the first)."""
        with self._lock:
            return self._seq

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that removes it."""
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, state: RemoteState[List[Customer]]) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(state)
            except Exception:
                logger.exception("customer list listener %r failed", listener)

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------
    def mount(self) -> Future:
        """Start the initial GET on first use; later calls reuse it."""
        with self._mount_lock:
            with self._lock:
                latest = self._latest
            if latest is not None:
                return latest
            return self.revalidate()

    def revalidate(self) -> Future:
        """Refetch the list. The future resolves True if the response landed."""
        with self._lock:
            if self._closed:
                raise RuntimeError(f"customer store for {self.url} is closed")
            self._seq += 1
            seq = self._seq
            if self._state.status is RemoteStatus.SUCCESS:
                self._state = replace(self._state, validating=True)
            else:
                self._state = RemoteState.loading()
            state = self._state
        logger.debug("revalidate #%s %s", seq, self.url)
        # Listeners see the pending state before the response can land
        self._notify(state)
        future = self._executor.submit(self._load, seq)
        with self._lock:
            if seq == self._seq:
                self._latest = future
        return future

    def _load(self, seq: int) -> bool:
        try:
            customers = self._loader(self.url)
        except ApiRequestError as err:
            return self._settle(seq, RemoteState.failure(err.error))
        except Exception as err:
            logger.exception("customer list loader crashed for %s", self.url)
            return self._settle(
                seq,
                RemoteState.failure(
                    ApiError(
                        code=UNEXPECTED_ERROR_CODE,
                        message=f"Could not load customers ({type(err).__name__})",
                    )
                ),
            )
        return self._settle(seq, RemoteState.success(customers))

    def _settle(self, seq: int, state: RemoteState[List[Customer]]) -> bool:
        with self._lock:
            if seq != self._seq or self._closed:
                logger.debug(
                    "discarding response #%s for %s (latest is #%s)",
                    seq,
                    self.url,
                    self._seq,
                )
                return False
            self._state = state
        if state.status is RemoteStatus.FAILURE and state.error is not None:
            logger.warning(
                "customer list fetch failed: %s %s", state.error.code, state.error.message
            )
        else:
            logger.info("loaded %s customers from %s", len(state.data or []), self.url)
        self._notify(state)
        return True

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the latest issued GET completes; False if none or stale."""
        with self._lock:
            latest = self._latest
        if latest is None:
            return False
        return latest.result(timeout=timeout)

    def close(self) -> None:
        with self._lock:
            self._closed = True
            self._listeners.clear()
        self._executor.shutdown(wait=False)
