"""Unit tests for clipspace.foundation.application.discovery."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from clipspace.foundation.application.discovery import (
    ContributionGroup,
    DiscoveredContribution,
    discover,
)


def _entry_point(name: str, value: object = None, error: Exception | None = None) -> MagicMock:
    ep = MagicMock()
    ep.name = name
    if error is not None:
        ep.load.side_effect = error
    else:
        ep.load.return_value = value
    return ep


class TestContributionGroup:
    @pytest.mark.unit
    def test_group_names(self) -> None:
        assert ContributionGroup.ROUTERS == "clipspace.routers"
        assert ContributionGroup.MIDDLEWARE == "clipspace.middleware"
        assert ContributionGroup.ERROR_HANDLERS == "clipspace.error_handlers"
        assert ContributionGroup.LIFESPAN == "clipspace.lifespan"


class TestDiscover:
    @pytest.mark.unit
    def test_empty_group_returns_empty_list(self) -> None:
        assert discover("clipspace.nonexistent.group.for.testing") == []

    @pytest.mark.unit
    def test_loads_in_name_order(self) -> None:
        eps = [_entry_point("zeta", 2), _entry_point("alpha", 1)]
        with patch(
            "clipspace.foundation.application.discovery.entry_points", return_value=eps
        ):
            result = discover(ContributionGroup.ROUTERS)

        assert [c.name for c in result] == ["alpha", "zeta"]
        assert [c.value for c in result] == [1, 2]
        assert all(isinstance(c, DiscoveredContribution) for c in result)
        assert result[0].group == "clipspace.routers"

    @pytest.mark.unit
    def test_exclude_names_skips_without_loading(self) -> None:
        skipped = _entry_point("auth", 1)
        with patch(
            "clipspace.foundation.application.discovery.entry_points",
            return_value=[skipped, _entry_point("health", 2)],
        ):
            result = discover(ContributionGroup.ROUTERS, exclude_names=frozenset({"auth"}))

        assert [c.name for c in result] == ["health"]
        skipped.load.assert_not_called()

    @pytest.mark.unit
    def test_broken_entry_point_is_skipped(self) -> None:
        eps = [_entry_point("broken", error=ImportError("no module")), _entry_point("ok", 1)]
        with patch(
            "clipspace.foundation.application.discovery.entry_points", return_value=eps
        ):
            result = discover(ContributionGroup.LIFESPAN)

        assert [c.name for c in result] == ["ok"]
