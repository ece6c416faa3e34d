"""Tests for rulecast.async_validate module."""

import asyncio

import pytest

from rulecast import ErrorOption, ValidationError
from rulecast.async_validate import (
    async_validate,
    async_validate_field,
    async_validate_record,
    async_validate_records,
)


async def _collect(iterator):
    return [item async for item in iterator]


async def _agen(items):
    for item in items:
        await asyncio.sleep(0)
        yield item


def test_async_validate_matches_sync_result():
    """Test the async entry point gives the same verdicts."""
    results = asyncio.run(async_validate({"age": "require|integer|between(18,65)"}, {"age": "70"}))

    assert results["age"].valid is False
    assert results["age"].error == "Age must be between 18 and 65"


def test_async_rule_is_awaited():
    """Test that suspending custom rules work through the async API."""
    taken = {"alice", "bob"}

    async def is_available(value, *_):
        await asyncio.sleep(0)
        return value not in taken

    schema = {"username": {"require": True, "custom": is_available, "messages": {"custom": "@{value} is taken"}}}

    results = asyncio.run(async_validate(schema, {"username": "alice"}))
    assert results["username"].error == "alice is taken"

    results = asyncio.run(async_validate(schema, {"username": "carol"}))
    assert results["username"].valid is True


def test_async_validate_field():
    """Test async single-field validation."""
    response = asyncio.run(async_validate_field("", ("email", "require|email")))

    assert response.error == "Email is required"


def test_async_validate_record_json(signup_schema):
    """Test async record validation decodes JSON."""
    result = asyncio.run(
        async_validate_record('{"name": "Ann", "email": "ANN@example.com", "age": "33"}', signup_schema)
    )

    assert result.error is None
    assert result.result["email"] == "ann@example.com"


def test_async_validate_record_bad_json_raises(signup_schema):
    """Test that malformed JSON raises with raise_errors=True."""
    with pytest.raises(ValidationError):
        asyncio.run(async_validate_record("{oops", signup_schema, raise_errors=True))


def test_async_validate_records_keeps_order(signup_schema, mixed_signups):
    """Test that sync iterables are yielded in input order."""
    results = asyncio.run(_collect(async_validate_records(mixed_signups, signup_schema, max_workers=2)))

    assert len(results) == 4
    assert [r.value for r in results] == mixed_signups
    assert [r.error is None for r in results] == [True, False, True, False]


def test_async_validate_records_skip(signup_schema, mixed_signups):
    """Test ErrorOption.SKIP in async batches."""
    results = asyncio.run(
        _collect(async_validate_records(mixed_signups, signup_schema, error_option=ErrorOption.SKIP))
    )

    assert [r.result["name"] for r in results] == ["Alice", "Charlie"]


def test_async_validate_records_raise(signup_schema, mixed_signups):
    """Test ErrorOption.RAISE in async batches."""
    with pytest.raises(ValidationError):
        asyncio.run(
            _collect(async_validate_records(mixed_signups, signup_schema, error_option=ErrorOption.RAISE))
        )


def test_async_validate_records_async_iterator(signup_schema, valid_signups):
    """Test async iterators are consumed with progress reporting."""
    progress = []

    results = asyncio.run(
        _collect(
            async_validate_records(
                _agen(valid_signups),
                signup_schema,
                on_progress=lambda index, total, result: progress.append((index, total)),
            )
        )
    )

    assert len(results) == 3
    assert progress == [(0, None), (1, None), (2, None)]


def test_async_progress_callback_errors_are_ignored(signup_schema, valid_signups):
    """Test a raising progress callback does not stop the batch."""

    def broken(*_):
        raise RuntimeError("boom")

    results = asyncio.run(_collect(async_validate_records(valid_signups, signup_schema, on_progress=broken)))

    assert len(results) == 3
