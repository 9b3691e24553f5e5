"""Salary cache.

Explicit invalidation only: nothing here notices when schedules, events,
waivers or bonuses change after a result was cached. Whoever edits that data
(in practice an admin) has to clear the cache for the affected teacher or
school, otherwise the old figure is served until then.

Classes dated after today are left out of a ledger, so a result cached for a
period that is still running keeps the figure of the day it was computed.
Recomputing the same key on a later day can give a different amount.
"""

from __future__ import annotations

import threading
from concurrent.futures import Future
from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, Optional, Protocol

from ..core.logging_config import get_logger
from .model import SalaryResult

logger = get_logger("payroll.cache")


@dataclass(frozen=True)
class SalaryCacheKey:
    tenant_id: str
    teacher_id: str
    start: date
    end: date


class SalaryCache(Protocol):
    def get_or_compute(self, key: SalaryCacheKey, compute: Callable[[], SalaryResult]) -> SalaryResult:
        raise NotImplementedError

    def get(self, key: SalaryCacheKey) -> Optional[SalaryResult]:
        raise NotImplementedError

    def clear_all(self) -> int:
        raise NotImplementedError

    def clear_tenant(self, tenant_id: str) -> int:
        raise NotImplementedError

    def clear_teacher(self, tenant_id: str, teacher_id: str) -> int:
        raise NotImplementedError


class InMemorySalaryCache(SalaryCache):
    """Process-local read-through cache with single-flight computation.

    Concurrent first reads of one key wait on the same Future; failures are
    handed to every waiter and are not cached.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._entries: Dict[SalaryCacheKey, SalaryResult] = {}
        self._inflight: Dict[SalaryCacheKey, Future] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, key: SalaryCacheKey) -> Optional[SalaryResult]:
        with self._lock:
            return self._entries.get(key)

    def get_or_compute(self, key: SalaryCacheKey, compute: Callable[[], SalaryResult]) -> SalaryResult:
        with self._lock:
            cached = self._entries.get(key)
            if cached is not None:
                logger.debug("cache hit %s", key)
                return cached

            future = self._inflight.get(key)
            owner = future is None
            if owner:
                future = Future()
                self._inflight[key] = future

        if not owner:
            logger.debug("cache wait %s", key)
            return future.result()

        logger.debug("cache miss %s", key)
        try:
            result = compute()
        except BaseException as exc:
            with self._lock:
                self._inflight.pop(key, None)
            future.set_exception(exc)
            raise

        with self._lock:
            # A clear issued while computing drops the in-flight marker; don't resurrect the entry then.
            if self._inflight.pop(key, None) is future:
                self._entries[key] = result
        future.set_result(result)
        return result

    def _drop(self, predicate: Callable[[SalaryCacheKey], bool]) -> int:
        with self._lock:
            keys = [k for k in self._entries if predicate(k)]
            for k in keys:
                del self._entries[k]
            for k in [k for k in self._inflight if predicate(k)]:
                del self._inflight[k]
        return len(keys)

    def clear_all(self) -> int:
        removed = self._drop(lambda k: True)
        logger.info("salary cache cleared (%d entries)", removed)
        return removed

    def clear_tenant(self, tenant_id: str) -> int:
        removed = self._drop(lambda k: k.tenant_id == tenant_id)
        logger.info("salary cache cleared for tenant %s (%d entries)", tenant_id, removed)
        return removed

    def clear_teacher(self, tenant_id: str, teacher_id: str) -> int:
        removed = self._drop(lambda k: k.tenant_id == tenant_id and k.teacher_id == teacher_id)
        logger.info("salary cache cleared for teacher %s in %s (%d entries)", teacher_id, tenant_id, removed)
        return removed
