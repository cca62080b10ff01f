"""Entry-point-based auto-discovery of application contributions.

Clipspace packages advertise their routers, middleware, error handlers and
lifespan hooks under four entry point groups (see :class:`ContributionGroup`).
The app factory loads them with :func:`discover`, so a deployment only needs
the right distributions installed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from importlib.metadata import entry_points
from typing import Any

logger = logging.getLogger(__name__)


class ContributionGroup(StrEnum):
    """Entry point groups scanned by the app factory."""

    ROUTERS = "clipspace.routers"
    MIDDLEWARE = "clipspace.middleware"
    ERROR_HANDLERS = "clipspace.error_handlers"
    LIFESPAN = "clipspace.lifespan"


@dataclass(frozen=True, slots=True)
class DiscoveredContribution:
    """One loaded entry point.

    Attributes:
        name: Entry point name (e.g., ``"auth"``).
        group: Entry point group (e.g., ``"clipspace.routers"``).
        value: The loaded Python object.
    """

    name: str
    group: str
    value: Any


def discover(
    group: str,
    *,
    exclude_names: frozenset[str] = frozenset(),
) -> list[DiscoveredContribution]:
    """Load every entry point registered in ``group``.

    Entry points are visited in name order so registration is deterministic
    across installs. One that fails to import is logged and skipped; the
    remaining contributions still load.

    Args:
        group: The entry point group name (e.g., ``"clipspace.routers"``).
        exclude_names: Entry point names to skip.

    Returns:
        Loaded contributions, sorted by entry point name.
    """
    contributions: list[DiscoveredContribution] = []

    for ep in sorted(entry_points(group=str(group)), key=lambda e: e.name):
        if ep.name in exclude_names:
            logger.debug("discovery_skipped", extra={"group": str(group), "name": ep.name})
            continue
        try:
            loaded = ep.load()
        except Exception:
            logger.exception("discovery_load_failed", extra={"group": str(group), "name": ep.name})
            continue
        contributions.append(DiscoveredContribution(name=ep.name, group=str(group), value=loaded))

    logger.info(
        "discovery_completed",
        extra={"group": str(group), "count": len(contributions)},
    )
    return contributions
