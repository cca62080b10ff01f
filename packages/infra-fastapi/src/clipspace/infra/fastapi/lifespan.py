"""Lifespan composition for the clipspace app factory."""

from __future__ import annotations

import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable
    from contextlib import AbstractAsyncContextManager

    from fastapi import FastAPI

    from clipspace.foundation.application import LifespanContribution

logger = logging.getLogger(__name__)


def compose_lifespan(
    hooks: list[LifespanContribution],
) -> Callable[[Any], AbstractAsyncContextManager[None]]:
    """Combine lifespan hooks into one FastAPI ``lifespan`` callable.

    Hooks start in ascending priority and shut down in reverse, so
    persistence (75) is up before auth (100) needs it and outlives it. A hook
    that fails to start unwinds the ones already entered and the error
    propagates, aborting startup.
    """
    sorted_hooks = sorted(hooks, key=lambda h: h.priority)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        async with AsyncExitStack() as stack:
            for contrib in sorted_hooks:
                logger.info(
                    "Entering lifespan hook (priority=%d): %s",
                    contrib.priority,
                    getattr(contrib.hook, "__qualname__", repr(contrib.hook)),
                )
                await stack.enter_async_context(contrib.hook(app))
            yield

    return lifespan
