"""Result types for validation operations."""

from __future__ import annotations

import typing as _t

import pydantic as _pydantic

from . import errors as _errors
from . import record as _record


class RuleResult(_t.NamedTuple):
    """Outcome of running one rule function against a value.

    Attributes:
        valid: Whether every validation step passed
        function: Canonical name of the rule function that ran
        value: The value that was checked
        param: The coerced rule parameter
        error: Unformatted message template of the first failing step
    """

    valid: bool
    function: str
    value: _t.Any
    param: _t.Any = None
    error: str | None = None


class ValidationResponse(_pydantic.BaseModel):
    """Verdict for one field (or one nested item).

    Instances are frozen; callers merge them into their own state rather
    than mutating them.

    Attributes:
        valid: Whether the field passed every rule
        rule: Type of the failing rule (e.g. ``integer``), when invalid
        function: Function of the failing rule (e.g. ``between``), when invalid
        error: Formatted, human-readable error message, when invalid
        processed_value: Value after pre/post processing, when valid
        children: Nested results for ``schema`` / ``arrayOfSchema`` fields
    """

    model_config = _pydantic.ConfigDict(frozen=True, arbitrary_types_allowed=True)

    valid: bool
    rule: str | None = None
    function: str | None = None
    error: str | None = None
    processed_value: _t.Any = None
    children: dict[str, ValidationResponse] | None = None


ValidationResponse.model_rebuild()


Results = dict[str, ValidationResponse]
"""Per-field results of validating one value bag."""


class RecordValidationResult(_t.NamedTuple):
    """Result of validating a single value bag in a batch.

    Attributes:
        error: ValidationError if any field failed, None otherwise
        result: Processed values keyed by field if valid, None otherwise
        value: Original value bag that was validated
        fields: Per-field ValidationResponse map
    """

    error: _errors.ValidationError | None
    result: dict[str, _t.Any] | None
    value: _record.Record | _record.Json
    fields: Results
