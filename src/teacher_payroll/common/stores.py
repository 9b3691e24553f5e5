from __future__ import annotations

from typing import Any, Callable, TypeVar

from ..core.exceptions import DomainError, PartialDataUnavailable
from ..core.logging_config import get_logger

logger = get_logger("stores")

T = TypeVar("T")


def call_store(store: str, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Call a collaborator store, turning infrastructure failures into PartialDataUnavailable.

    Domain errors (unknown teacher, missing config...) pass through untouched.
    """
    try:
        return fn(*args, **kwargs)
    except DomainError:
        raise
    except Exception as exc:
        logger.error("%s store failed: %s", store, exc)
        raise PartialDataUnavailable(store, f"{store} store unavailable: {exc}") from exc
