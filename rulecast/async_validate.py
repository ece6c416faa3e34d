"""Async validation functions.

These await rule predicates, custom callbacks and processors that return
coroutines (e.g. a uniqueness lookup against a database), which the
synchronous API refuses to block on.
"""

import asyncio
import logging
import os
import typing as _typing
from collections.abc import AsyncIterator, Iterable

import pydantic as _pydantic

from . import options as _options
from . import record as _record
from . import registry as _registry
from . import result as _result
from . import schema as _schema
from . import validate as _validate

logger = logging.getLogger(__name__)

ProgressCallback = _validate.ProgressCallback


async def async_validate(
    schema: _validate.SchemaLike,
    values: _record.Record,
    registry: _registry.Registry | None = None,
) -> _result.Results:
    """Asynchronously validate a value bag against a schema.

    Args:
        schema: Raw or parsed schema
        values: Mapping, pydantic model or object holding the field values
        registry: Registry used when ``schema`` still needs parsing

    Returns:
        ValidationResponse per schema field
    """
    parsed = _schema.parse_schema(schema, registry)
    return await _validate.evaluate_schema(parsed, values)


async def async_validate_field(
    value: _typing.Any,
    field: tuple[str, _validate.FieldRules],
    values: _record.Record | None = None,
    registry: _registry.Registry | None = None,
) -> _result.ValidationResponse:
    """Asynchronously validate a single field.

    Args:
        value: Current value of the field
        field: ``(name, rules)`` where rules are FieldRules or a raw definition
        values: Whole value bag for cross-field rules
        registry: Registry used when ``rules`` still need parsing
    """
    name, rules = _validate.field_rules(field, registry)
    bag = _validate.as_values(values) if values is not None else {}
    return await _validate.evaluate_field(value, name, rules, _validate.field_context(bag))


async def async_validate_record(
    record: _record.Record | _record.Json,
    schema: _validate.SchemaLike,
    *,
    registry: _registry.Registry | None = None,
    raise_errors: bool = False,
) -> _result.RecordValidationResult:
    """Asynchronously validate one value bag (or JSON document) and summarize it.

    Raises:
        ValidationError: If raise_errors is True and a field fails
    """
    if isinstance(record, (str, bytes, bytearray)):
        try:
            values = _validate.JSON_OBJECT.validate_json(record)
        except _pydantic.ValidationError as e:
            result = _validate.json_error(record, e)
            if raise_errors:
                raise result.error from e
            return result
    else:
        values = record
    results = await async_validate(schema, values, registry)
    return _validate.record_result(record, results, raise_errors)


async def async_validate_records(
    records: AsyncIterator[_record.Record | _record.Json]
    | Iterable[_record.Record | _record.Json],
    schema: _validate.SchemaLike,
    *,
    registry: _registry.Registry | None = None,
    error_option: _options.ErrorOption = _options.ErrorOption.RETURN,
    max_workers: int | None = None,
    on_progress: ProgressCallback | None = None,
) -> AsyncIterator[_result.RecordValidationResult]:
    """Asynchronously validate many value bags against one schema.

    Sync iterables are validated concurrently, bounded by ``max_workers``,
    and yielded in input order. Async iterators are consumed one value bag
    at a time.

    Args:
        records: Async or sync iterable of mappings, models or JSON strings
        schema: Raw or parsed schema
        registry: Registry used when ``schema`` still needs parsing
        error_option: How to handle errors (RETURN, RAISE, or SKIP)
        max_workers: Maximum number of concurrent validations (default: CPU count)
        on_progress: Optional callback function(index, total, result) called after each validation

    Yields:
        RecordValidationResult for each value bag (skipped if error_option=SKIP and error occurs)

    Raises:
        ValidationError: If error_option=RAISE and validation fails
    """
    if max_workers is None:
        max_workers = min(32, os.cpu_count() or 1)

    parsed = _schema.parse_schema(schema, registry)
    semaphore = asyncio.Semaphore(max_workers)

    async def validate_with_semaphore(
        record: _record.Record | _record.Json,
    ) -> _result.RecordValidationResult:
        async with semaphore:
            return await async_validate_record(record, parsed)

    def report(index: int, total: int | None, result: _result.RecordValidationResult) -> None:
        if on_progress is None:
            return
        try:
            on_progress(index, total, result)
        except Exception:
            logger.warning("Progress callback raised; ignoring", exc_info=True)

    if isinstance(records, AsyncIterator):
        index = 0
        async for record in records:
            result = await validate_with_semaphore(record)
            report(index, None, result)
            index += 1

            if result.error is not None and error_option == _options.ErrorOption.SKIP:
                continue

            if result.error is not None and error_option == _options.ErrorOption.RAISE:
                raise result.error

            yield result
    else:
        records_list = list(records)
        total = len(records_list)

        results = await asyncio.gather(
            *(validate_with_semaphore(record) for record in records_list)
        )

        for index, result in enumerate(results):
            report(index, total, result)

            if result.error is not None and error_option == _options.ErrorOption.SKIP:
                continue

            if result.error is not None and error_option == _options.ErrorOption.RAISE:
                raise result.error

            yield result
