"""Unit tests for clipspace.foundation.application.registration."""

from __future__ import annotations

import pytest

from clipspace.foundation.application.registration import AccountRegistrar
from clipspace.foundation.domain.exceptions import ConflictError, ValidationError


def _register(registrar: AccountRegistrar, **overrides: str):
    fields = {
        "username": "Bob",
        "email": "Bob@Example.com",
        "full_name": " Bob Builder ",
        "password": "s3cret",
        "avatar_url": "https://cdn.example.com/bob.png",
    }
    fields.update(overrides)
    return registrar.register(**fields)


class TestRegister:
    @pytest.mark.unit
    def test_creates_normalised_account(self, registrar: AccountRegistrar, accounts) -> None:
        principal = _register(registrar)
        assert principal.username == "bob"
        assert principal.email == "bob@example.com"
        assert principal.full_name == "Bob Builder"

        stored = accounts.get_by_id(principal.id)
        assert stored is not None
        assert stored.credential_hash == "hashed:s3cret"
        assert stored.refresh_token is None
        assert stored.created_at is not None

    @pytest.mark.unit
    def test_principal_has_no_secret_fields(self, registrar: AccountRegistrar) -> None:
        principal = _register(registrar)
        assert not hasattr(principal, "credential_hash")

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("username", ""),
            ("username", "has space"),
            ("email", "nope"),
            ("full_name", "   "),
            ("password", ""),
            ("avatar_url", ""),
        ],
    )
    def test_invalid_field(self, registrar: AccountRegistrar, field: str, value: str) -> None:
        with pytest.raises(ValidationError) as exc_info:
            _register(registrar, **{field: value})
        assert exc_info.value.field == field

    @pytest.mark.unit
    def test_duplicate_username(self, registrar: AccountRegistrar) -> None:
        _register(registrar)
        with pytest.raises(ConflictError) as exc_info:
            _register(registrar, email="other@example.com")
        assert exc_info.value.context["field"] == "username"

    @pytest.mark.unit
    def test_duplicate_email_case_insensitive(self, registrar: AccountRegistrar) -> None:
        _register(registrar)
        with pytest.raises(ConflictError):
            _register(registrar, username="bobby", email="BOB@example.com")
