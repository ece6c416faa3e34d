"""Shared pytest fixtures for rulecast tests."""

import typing

import pydantic
import pytest

from rulecast.registry import Registry, default_registry


class SignupForm(pydantic.BaseModel):
    """Test model representing a submitted signup form."""

    name: str
    email: str
    age: str


@pytest.fixture
def registry() -> Registry:
    """Fixture providing the built-in registry."""
    return default_registry()


@pytest.fixture
def signup_model() -> type[pydantic.BaseModel]:
    """Fixture providing the SignupForm Pydantic model."""
    return SignupForm


@pytest.fixture
def signup_schema() -> dict[str, typing.Any]:
    """Fixture providing a signup schema in mixed definition styles."""
    return {
        "name": "require|string|minLength(2)",
        "email": {"preTrim": True, "require": True, "email": "Enter a real address", "cast": "case::lower"},
        "age": "require|integer|between(18,65)",
    }


@pytest.fixture
def valid_signups() -> list[dict[str, typing.Any]]:
    """Fixture providing valid signup value bags."""
    return [
        {"name": "Alice", "email": " ALICE@Example.com ", "age": "30"},
        {"name": "Bob", "email": "bob@example.com", "age": 25},
        {"name": "Charlie", "email": "charlie@example.org", "age": "65"},
    ]


@pytest.fixture
def invalid_signups() -> list[dict[str, typing.Any]]:
    """Fixture providing invalid signup value bags."""
    return [
        {"name": "A", "email": "alice@example.com", "age": "30"},  # Name too short
        {"name": "Bob", "email": "not-an-email", "age": "30"},  # Bad email
        {"name": "Charlie", "email": "charlie@example.org", "age": "70"},  # Too old
    ]


@pytest.fixture
def mixed_signups() -> list[dict[str, typing.Any]]:
    """Fixture providing a mix of valid and invalid signup value bags."""
    return [
        {"name": "Alice", "email": "alice@example.com", "age": "30"},  # Valid
        {"name": "Bob", "email": "", "age": "30"},  # Missing email
        {"name": "Charlie", "email": "charlie@example.org", "age": "40"},  # Valid
        {"name": "Dana"},  # Missing email and age
    ]


@pytest.fixture
def signup_jsons() -> list[str]:
    """Fixture providing JSON-encoded signups, one of them malformed."""
    return [
        '{"name": "Alice", "email": "alice@example.com", "age": "30"}',
        '{"name": "Bob", "email": "bob@example.com", "age": "17"}',
        "not json at all",
    ]
