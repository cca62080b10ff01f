"""Tests for token and session value objects."""

from __future__ import annotations

import pytest

from clipspace.foundation.domain.tokens import SessionState, TokenPair, TokenPurpose


@pytest.mark.unit
class TestTokenPurpose:
    def test_values(self) -> None:
        assert TokenPurpose.ACCESS == "access"
        assert TokenPurpose.REFRESH == "refresh"


@pytest.mark.unit
class TestSessionState:
    def test_values(self) -> None:
        assert SessionState.LOGGED_OUT == "logged_out"
        assert SessionState.ACTIVE == "active"


@pytest.mark.unit
class TestTokenPair:
    def test_repr_is_redacted(self) -> None:
        pair = TokenPair(access_token="aaa.bbb.ccc", refresh_token="ddd.eee.fff")
        text = repr(pair)
        assert "aaa.bbb.ccc" not in text
        assert "ddd.eee.fff" not in text

    def test_values_accessible(self) -> None:
        pair = TokenPair(access_token="a", refresh_token="r")
        assert pair.access_token == "a"
        assert pair.refresh_token == "r"
