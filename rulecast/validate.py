"""Validation engine and batch helpers.

The engine is written once as coroutines that await rule predicates,
callbacks and processors in order. The functions in this module drive it
synchronously; ``async_validate`` awaits the same coroutines.

Per field, in order: pre-processors, default substitution, the empty-value
branch (optional fields and presence rules), the rule chain with
short-circuit on the first failure (including nested schemas), and
post-processors on success.
"""

import logging
import types
import typing as _typing

import pydantic as _pydantic

from . import coro as _coro
from . import errors as _errors
from . import export as _export
from . import hooks as _hooks
from . import options as _options
from . import predicates as _predicates
from . import record as _record
from . import registry as _registry
from . import result as _result
from . import schema as _schema
from .casing import to_label
from .formatter import ErrorFormatter
from .rules import PRESENCE_FUNCTIONS

logger = logging.getLogger(__name__)

ProgressCallback = _typing.Callable[[int, int | None, _result.RecordValidationResult], None]

SchemaLike = _record.RawSchema | _schema.ParsedSchema
FieldRules = _typing.Sequence[_schema.FieldRule] | _record.RawFieldSchema

CUSTOM_MESSAGE = "@{field} is invalid"
OBJECT_MESSAGE = "@{field} must be an object"
ARRAY_MESSAGE = "@{field} must be an array"
ARRAY_OF_OBJECT_MESSAGE = "@{field} must be an array of object"

JSON_OBJECT = _pydantic.TypeAdapter(dict[str, _typing.Any])


def as_values(record: _typing.Any) -> dict[str, _typing.Any]:
    """Convert a value bag (mapping, pydantic model or object) to a dict."""
    if isinstance(record, _typing.Mapping):
        return dict(record)
    if isinstance(record, _pydantic.BaseModel):
        return record.model_dump()
    if hasattr(record, "__dict__"):
        return dict(vars(record))
    raise TypeError(f"Cannot validate a {type(record).__name__}; expected a mapping")


def field_context(values: _typing.Mapping[str, _typing.Any]) -> _record.Fields:
    """Read-only snapshot of every field, with labels for error messages."""
    return types.MappingProxyType(
        {str(name): _record.Field(to_label(str(name)), value) for name, value in values.items()}
    )


def _label(fields: _record.Fields, name: str) -> str:
    field = fields.get(name)
    return field.name if field is not None else to_label(name)


def _other(rule: _schema.FieldRule, fields: _record.Fields) -> _typing.Any:
    """Label(s) of the field(s) a cross-field rule refers to."""
    param = rule.param
    target = rule.target
    if param is None or target is None:
        return None
    if target.param_type == "fieldEquals":
        return _label(fields, param.field)
    if target.param_type == "fieldReference":
        return _label(fields, param)
    if target.argument_type == "fieldName" and isinstance(param, (list, tuple)):
        return [_label(fields, name) for name in param]
    return None


def _failure(
    name: str,
    rule: _schema.FieldRule,
    template: str | None,
    value: _typing.Any,
    fields: _record.Fields,
    children: _result.Results | None = None,
) -> _result.ValidationResponse:
    context = {
        "field": _label(fields, name),
        "value": value,
        "param": rule.param,
        "rule": rule.type,
        "function": rule.function,
        "other": _other(rule, fields),
        "fields": fields,
    }
    error = ErrorFormatter.format(rule.message or template, context)
    return _result.ValidationResponse(
        valid=False, rule=rule.type, function=rule.function, error=error, children=children
    )


def _nested_failure(
    name: str,
    rule: _schema.FieldRule,
    error: str | None,
    value: _typing.Any,
    fields: _record.Fields,
    children: _result.Results,
) -> _result.ValidationResponse:
    """Fail a nested rule with the child's rendered error.

    The child error is already formatted and may contain submitted text, so
    it is only copied. A message override on the field is still rendered.
    """
    if rule.message:
        return _failure(name, rule, None, value, fields, children)
    return _result.ValidationResponse(
        valid=False, rule=rule.type, function=rule.function, error=error, children=children
    )


async def _check_custom(
    rule: _schema.FieldRule, value: _typing.Any, fields: _record.Fields
) -> bool:
    custom: _schema.CustomRule = rule.param
    if custom.callback is not None:
        try:
            return bool(await _coro.resolve(custom.callback(value, None, fields)))
        except _errors.RulecastError:
            raise
        except Exception:
            logger.debug("Custom callback raised for %r, rule failed", value, exc_info=True)
            return False
    return custom.pattern.search(str(value)) is not None


def _first_error(results: _result.Results) -> str | None:
    for response in results.values():
        if not response.valid:
            return response.error
    return None


def _merge(item: _typing.Mapping[str, _typing.Any], results: _result.Results) -> dict[str, _typing.Any]:
    merged = dict(item)
    for name, response in results.items():
        if name in merged or response.processed_value is not None:
            merged[name] = response.processed_value
    return merged


async def _evaluate_nested(
    name: str,
    rule: _schema.FieldRule,
    value: _typing.Any,
    fields: _record.Fields,
) -> tuple[_result.ValidationResponse | None, _typing.Any, _result.Results]:
    """Recurse into a ``schema``/``arrayOfSchema`` rule.

    Returns:
        (failure or None, processed value, children)
    """
    if rule.stage == "schema":
        if not _predicates.is_object(value):
            return _failure(name, rule, OBJECT_MESSAGE, value, fields), value, {}
        children = await evaluate_schema(rule.param, value)
        if not _export.is_valid(children):
            failure = _nested_failure(name, rule, _first_error(children), value, fields, children)
            return failure, value, children
        return None, _merge(value, children), children

    if not _predicates.is_array(value):
        return _failure(name, rule, ARRAY_MESSAGE, value, fields), value, {}
    if not all(_predicates.is_object(item) for item in value):
        return _failure(name, rule, ARRAY_OF_OBJECT_MESSAGE, value, fields), value, {}

    children: _result.Results = {}
    processed = []
    for index, item in enumerate(value):
        item_results = await evaluate_schema(rule.param, item)
        valid = _export.is_valid(item_results)
        merged = _merge(item, item_results)
        processed.append(merged)
        children[str(index)] = _result.ValidationResponse(
            valid=valid,
            error=None if valid else _first_error(item_results),
            processed_value=merged if valid else None,
            children=item_results,
        )
    if not _export.is_valid(children):
        failed = next(r for r in children.values() if not r.valid)
        return _nested_failure(name, rule, failed.error, value, fields, children), value, children
    return None, processed, children


async def evaluate_field(
    value: _typing.Any,
    name: str,
    rules: _typing.Sequence[_schema.FieldRule],
    fields: _record.Fields,
) -> _result.ValidationResponse:
    """Validate one field against its parsed rules.

    Args:
        value: Raw value of the field
        name: Field name, used for the error label
        rules: The field's FieldRules in declared order
        fields: Cross-field context of the whole value bag

    Returns:
        ValidationResponse for the field
    """
    for rule in rules:
        if rule.stage == "pre":
            value = await rule.target.evaluate(value, rule.param)

    family_rules = [rule for rule in rules if rule.stage == "rule" and rule.type == "field"]
    if _predicates.is_empty(value):
        default = next((rule for rule in family_rules if rule.function == "default"), None)
        if default is not None:
            value = default.param

    if _predicates.is_empty(value):
        presence = [rule for rule in family_rules if rule.function in PRESENCE_FUNCTIONS]
        optional = any(rule.function == "optional" for rule in family_rules)
        if optional or not presence:
            return _result.ValidationResponse(valid=True, processed_value=value)
        for rule in presence:
            checked = await rule.target.evaluate(value, rule.param, fields)
            if not checked.valid:
                return _failure(name, rule, checked.error, value, fields)
        return _result.ValidationResponse(valid=True, processed_value=value)

    children: _result.Results | None = None
    for rule in rules:
        if rule.stage == "rule":
            checked = await rule.target.evaluate(value, rule.param, fields)
            if not checked.valid:
                return _failure(name, rule, checked.error, value, fields)
        elif rule.stage == "custom":
            if not await _check_custom(rule, value, fields):
                return _failure(name, rule, CUSTOM_MESSAGE, value, fields)
        elif rule.stage in _schema.NESTED_KEYS:
            failure, value, children = await _evaluate_nested(name, rule, value, fields)
            if failure is not None:
                return failure

    for rule in rules:
        if rule.stage == "post":
            value = await rule.target.evaluate(value, rule.param)

    return _result.ValidationResponse(valid=True, processed_value=value, children=children)


async def evaluate_schema(
    schema: _schema.ParsedSchema,
    values: _typing.Any,
    fields: _record.Fields | None = None,
) -> _result.Results:
    """Validate every field of ``schema`` against one value bag.

    Fields are validated independently; they only share the raw context.
    """
    values = as_values(values)
    fields = fields if fields is not None else field_context(values)
    results: _result.Results = {}
    for name, rules in schema.items():
        results[name] = await evaluate_field(values.get(name), name, rules, fields)
    return results


def field_rules(
    field: tuple[str, FieldRules], registry: _registry.Registry | None
) -> tuple[str, _typing.Sequence[_schema.FieldRule]]:
    name, rules = field
    if isinstance(rules, (str, _typing.Mapping)) or (
        rules and not all(isinstance(rule, _schema.FieldRule) for rule in rules)
    ):
        rules = _schema.parse_schema({name: rules}, registry)[name]
    return name, rules


def validate(
    schema: SchemaLike,
    values: _record.Record,
    registry: _registry.Registry | None = None,
) -> _result.Results:
    """Validate a value bag against a schema.

    Args:
        schema: Raw or parsed schema
        values: Mapping, pydantic model or object holding the field values
        registry: Registry used when ``schema`` still needs parsing

    Returns:
        ValidationResponse per schema field

    Raises:
        SchemaError: If a raw schema cannot be parsed
        AsyncRuleError: If a rule awaits a pending operation

    Example:
        >>> results = validate({"age": "require|integer|between(18,65)"}, {"age": "70"})
        >>> results["age"].error
        'Age must be between 18 and 65'
    """
    parsed = _schema.parse_schema(schema, registry)
    return _coro.run_sync(evaluate_schema(parsed, values))


def validate_field(
    value: _typing.Any,
    field: tuple[str, FieldRules],
    values: _record.Record | None = None,
    registry: _registry.Registry | None = None,
) -> _result.ValidationResponse:
    """Validate a single field, e.g. on a form's blur event.

    Args:
        value: Current value of the field
        field: ``(name, rules)`` where rules are FieldRules or a raw definition
        values: Whole value bag for cross-field rules
        registry: Registry used when ``rules`` still need parsing

    Returns:
        ValidationResponse for the field
    """
    name, rules = field_rules(field, registry)
    bag = as_values(values) if values is not None else {}
    return _coro.run_sync(evaluate_field(value, name, rules, field_context(bag)))


def record_result(
    record: _typing.Any, results: _result.Results, raise_errors: bool = False
) -> _result.RecordValidationResult:
    """Wrap a results map into a RecordValidationResult."""
    errors = _export.collect_errors(results)
    if errors or not _export.is_valid(results):
        error = _errors.ValidationError(errors)
        if raise_errors:
            raise error
        return _result.RecordValidationResult(error, None, record, results)
    return _result.RecordValidationResult(None, _export.processed_values(results), record, results)


def json_error(json: _record.Json, e: _pydantic.ValidationError) -> _result.RecordValidationResult:
    detail = e.errors()[0]["msg"] if e.errors() else str(e)
    error = _errors.ValidationError(
        {"__root__": {"field": "__root__", "rule": "json", "error": detail}}
    )
    return _result.RecordValidationResult(error, None, json, {})


def validate_record(
    record: _record.Record,
    schema: SchemaLike,
    *,
    registry: _registry.Registry | None = None,
    raise_errors: bool = False,
) -> _result.RecordValidationResult:
    """Validate one value bag and summarize it.

    Args:
        record: Mapping, pydantic model or object to validate
        schema: Raw or parsed schema
        registry: Registry used when ``schema`` still needs parsing
        raise_errors: Raise ValidationError instead of returning it

    Returns:
        RecordValidationResult with processed values when valid

    Raises:
        ValidationError: If raise_errors is True and a field fails
    """
    return record_result(record, validate(schema, record, registry), raise_errors)


def validate_json(
    json: _record.Json,
    schema: SchemaLike,
    *,
    registry: _registry.Registry | None = None,
    raise_errors: bool = False,
) -> _result.RecordValidationResult:
    """Validate a JSON-encoded object.

    Invalid JSON, or JSON that is not an object, fails with a ``__root__``
    error.

    Raises:
        ValidationError: If raise_errors is True and validation fails
    """
    try:
        values = JSON_OBJECT.validate_json(json)
    except _pydantic.ValidationError as e:
        result = json_error(json, e)
        if raise_errors:
            raise result.error from e
        return result
    return record_result(json, validate(schema, values, registry), raise_errors)


def _iterate(
    records: _typing.Iterable[_typing.Any],
    check: _typing.Callable[[_typing.Any, bool], _result.RecordValidationResult],
    error_option: _options.ErrorOption,
    on_progress: ProgressCallback | None,
    hooks: _hooks.ValidationHooks | None,
) -> _typing.Generator[_result.RecordValidationResult, None, None]:
    total = len(records) if isinstance(records, _typing.Sized) else None

    for index, record in enumerate(records):
        if hooks is not None:
            hooks.call_before_validate(record)

        record_result = check(record, error_option == _options.ErrorOption.RAISE)

        if hooks is not None and not hooks.dispatch(record_result):
            break

        if on_progress is not None:
            try:
                on_progress(index, total, record_result)
            except Exception:
                logger.warning("Progress callback raised; ignoring", exc_info=True)

        if record_result.error is not None and error_option == _options.ErrorOption.SKIP:
            continue

        yield record_result


def validate_records(
    records: _typing.Iterable[_record.Record | _record.Json],
    schema: SchemaLike,
    *,
    registry: _registry.Registry | None = None,
    error_option: _options.ErrorOption = _options.ErrorOption.RETURN,
    on_progress: ProgressCallback | None = None,
    hooks: _hooks.ValidationHooks | None = None,
) -> _typing.Generator[_result.RecordValidationResult, None, None]:
    """Validate many value bags against one schema.

    JSON strings/bytes in ``records`` are decoded first. The schema is parsed
    once for the whole batch.

    Args:
        records: Mappings, pydantic models, objects or JSON strings
        schema: Raw or parsed schema
        registry: Registry used when ``schema`` still needs parsing
        error_option: How to handle failed value bags (RETURN, RAISE, or SKIP)
        on_progress: Optional callback(index, total, result) after each value bag
        hooks: Optional ValidationHooks instance for event callbacks

    Yields:
        RecordValidationResult for each value bag (failed ones are left out
        with SKIP)

    Raises:
        ValidationError: If error_option=RAISE and a value bag fails
    """
    parsed = _schema.parse_schema(schema, registry)

    def check(record: _typing.Any, raise_errors: bool) -> _result.RecordValidationResult:
        if isinstance(record, (str, bytes, bytearray)):
            return validate_json(record, parsed, raise_errors=raise_errors)
        return validate_record(record, parsed, raise_errors=raise_errors)

    yield from _iterate(records, check, error_option, on_progress, hooks)


def validate_jsons(
    records: _typing.Iterable[_record.Json],
    schema: SchemaLike,
    *,
    registry: _registry.Registry | None = None,
    error_option: _options.ErrorOption = _options.ErrorOption.RETURN,
    on_progress: ProgressCallback | None = None,
    hooks: _hooks.ValidationHooks | None = None,
) -> _typing.Generator[_result.RecordValidationResult, None, None]:
    """Validate many JSON-encoded objects against one schema.

    Yields:
        RecordValidationResult for each JSON document

    Raises:
        ValidationError: If error_option=RAISE and a document fails
    """
    parsed = _schema.parse_schema(schema, registry)

    def check(record: _typing.Any, raise_errors: bool) -> _result.RecordValidationResult:
        return validate_json(record, parsed, raise_errors=raise_errors)

    yield from _iterate(records, check, error_option, on_progress, hooks)


class Validator:
    """A parsed schema bundled with the registry it was parsed against.

    Args:
        schema: Raw or parsed schema
        registry: Registry for name resolution (default registry if None)

    Example:
        >>> signup = Validator({"email": "require|email", "password": "require|strongPassword"})
        >>> signup.is_valid({"email": "a@b.co", "password": "Secr3t!pass"})
        True
    """

    def __init__(self, schema: SchemaLike, *, registry: _registry.Registry | None = None) -> None:
        self.registry = registry if registry is not None else _registry.default_registry()
        self.schema = _schema.parse_schema(schema, self.registry)

    def __repr__(self) -> str:
        return f"Validator(fields={list(self.schema)!r})"

    def validate(self, values: _record.Record) -> _result.Results:
        return _coro.run_sync(evaluate_schema(self.schema, values))

    async def async_validate(self, values: _record.Record) -> _result.Results:
        return await evaluate_schema(self.schema, values)

    def validate_field(
        self, name: str, value: _typing.Any, values: _record.Record | None = None
    ) -> _result.ValidationResponse:
        """Validate one field of the schema.

        Raises:
            KeyError: If the schema has no such field
        """
        return validate_field(value, (name, self.schema[name]), values)

    def is_valid(self, values: _record.Record) -> bool:
        return _export.is_valid(self.validate(values))

    def validate_record(
        self, record: _record.Record, *, raise_errors: bool = False
    ) -> _result.RecordValidationResult:
        return validate_record(record, self.schema, raise_errors=raise_errors)

    def validate_records(
        self,
        records: _typing.Iterable[_record.Record | _record.Json],
        **kwargs: _typing.Any,
    ) -> _typing.Generator[_result.RecordValidationResult, None, None]:
        return validate_records(records, self.schema, **kwargs)
