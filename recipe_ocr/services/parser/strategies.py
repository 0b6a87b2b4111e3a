"""Helpers for running ordered heuristic strategies."""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable, Iterable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def first_match(strategies: Iterable[Callable[..., Optional[T]]], *args: Any) -> Optional[T]:
    """Return the first truthy result, trying strategies from highest to lowest confidence."""
    for strategy in strategies:
        result = strategy(*args)
        if result:
            logger.debug("[parser] strategy %s matched", getattr(strategy, "__name__", strategy))
            return result
    return None


def contained(default: Any) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Wrap a field extractor so an unexpected error yields its safe default.

    ``default`` may be a value or a zero-argument factory (e.g. ``list``).
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                logger.warning(
                    "[parser] %s failed, falling back to default: %s", func.__name__, e, exc_info=True
                )
                return default() if callable(default) else default

        return wrapper

    return decorator
