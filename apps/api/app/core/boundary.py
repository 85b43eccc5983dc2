"""Bounded execution of service operations."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
import functools
import logging
from typing import Any, TypeVar

from app.errors import ApiError, internal_error

logger = logging.getLogger(__name__)

T = TypeVar("T")


class OperationBoundary:
    """Runs a blocking service call in the default executor with a deadline.

    On timeout the caller gets its answer immediately; the worker thread is
    left to finish on its own.

    ApiError passes through untouched. Anything else raised by storage or
    signing becomes a 500 carrying the underlying message.
    """

    def __init__(self, *, timeout_seconds: float) -> None:
        self._timeout_seconds = timeout_seconds

    async def run(self, operation: Callable[..., T], /, *args: Any, **kwargs: Any) -> T:
        name = getattr(operation, "__qualname__", repr(operation))
        call = functools.partial(operation, *args, **kwargs)
        try:
            loop = asyncio.get_running_loop()
            return await asyncio.wait_for(loop.run_in_executor(None, call), timeout=self._timeout_seconds)
        except ApiError:
            raise
        except TimeoutError as exc:
            logger.error("operation.timeout operation=%s timeout_seconds=%s", name, self._timeout_seconds)
            raise internal_error("Operation timed out") from exc
        except Exception as exc:
            logger.exception("operation.failed operation=%s", name)
            raise internal_error(str(exc) or exc.__class__.__name__) from exc


__all__ = ["OperationBoundary"]
