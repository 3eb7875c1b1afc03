from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Callable, Generic, Hashable, Optional, Sequence, TypeVar

from ..core.enums import ErrorKind
from ..core.exceptions import (
    ComputationHazard,
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True)
class ItemError:
    """One failed (or skipped) item of a batch run."""

    item_id: Hashable
    kind: ErrorKind
    reason: str

    def describe(self) -> str:
        return f"{self.item_id}: {self.reason}"


@dataclass
class BatchOutcome(Generic[R]):
    results: list[R] = field(default_factory=list)
    errors: list[ItemError] = field(default_factory=list)
    cancelled: bool = False
    not_started: int = 0


_KIND_BY_ERROR: tuple[tuple[type[DomainError], ErrorKind], ...] = (
    (ValidationError, ErrorKind.VALIDATION),
    (NotFoundError, ErrorKind.NOT_FOUND),
    (ConflictError, ErrorKind.CONFLICT),
    (ComputationHazard, ErrorKind.COMPUTATION),
)


def error_kind(exc: BaseException) -> ErrorKind:
    for exc_type, kind in _KIND_BY_ERROR:
        if isinstance(exc, exc_type):
            return kind
    return ErrorKind.ERROR


_NOT_STARTED = object()


def run_bounded(
    items: Sequence[T],
    work: Callable[[T], R],
    *,
    key: Callable[[T], Hashable],
    max_workers: int,
    cancel_event: Optional[threading.Event] = None,
) -> BatchOutcome[R]:
    """Run ``work`` over ``items`` on a bounded thread pool.

    Each item is independent. A failure in one item is recorded as an
    ``ItemError`` and never stops the others. Cancellation is cooperative: the
    event is checked before an item starts, so an item already running always
    completes. Results keep the input order.
    """

    outcome: BatchOutcome[R] = BatchOutcome()
    if not items:
        return outcome

    def guarded(item: T):
        if cancel_event is not None and cancel_event.is_set():
            return _NOT_STARTED
        return work(item)

    ordered: dict[int, R] = {}
    failed: dict[int, ItemError] = {}
    with ThreadPoolExecutor(max_workers=max(1, int(max_workers))) as pool:
        futures = {pool.submit(guarded, item): (index, item) for index, item in enumerate(items)}
        for future in as_completed(futures):
            index, item = futures[future]
            try:
                result = future.result()
            except DomainError as exc:
                logger.warning("Batch item %s failed: %s", key(item), exc)
                failed[index] = ItemError(key(item), error_kind(exc), str(exc))
                continue
            except Exception as exc:
                logger.exception("Unexpected error for batch item %s", key(item))
                failed[index] = ItemError(key(item), ErrorKind.ERROR, str(exc) or type(exc).__name__)
                continue

            if result is _NOT_STARTED:
                outcome.not_started += 1
            else:
                ordered[index] = result

    outcome.results = [ordered[i] for i in sorted(ordered)]
    outcome.errors = [failed[i] for i in sorted(failed)]
    outcome.cancelled = outcome.not_started > 0
    return outcome
