"""Parse user schemas into an immutable, registry-resolved execution plan.

A field can be declared three ways::

    {
        "age": "require|integer|between(18,65)",
        "email": {"require": True, "email": "Enter a real address", "cast": "trim|case::lower"},
        "tags": ["array", {"name": "maxItems", "value": 5, "message": "Too many"}],
    }

Every name is resolved when the schema is parsed; unknown names and
malformed parameters raise SchemaError naming the field.
"""

import logging
import re
import types
import typing

import pydantic

from . import errors as _errors
from . import params as _params
from . import processors as _processors
from . import record as _record
from . import registry as _registry

logger = logging.getLogger(__name__)

TOKEN_SEPARATOR = re.compile(r"\|(?![^(]*\))")

Stage = typing.Literal["rule", "pre", "post", "custom", "schema", "arrayOfSchema"]

NESTED_KEYS = ("schema", "arrayOfSchema")

_REGEX_LITERAL = re.compile(r"^/(.*)/([a-z]*)$", re.DOTALL)
_REGEX_FLAGS = {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL}


def compile_pattern(source: str | re.Pattern[str]) -> re.Pattern[str]:
    """Compile a regex given as a pattern, plain string or ``/source/flags``.

    Raises:
        ValueError: If the expression does not compile
    """
    if isinstance(source, re.Pattern):
        return source
    flags = 0
    literal = _REGEX_LITERAL.match(source)
    if literal:
        source = literal.group(1)
        for flag in literal.group(2):
            flags |= _REGEX_FLAGS.get(flag, 0)
    try:
        return re.compile(source, flags)
    except re.error as e:
        raise ValueError(f"Invalid pattern {source!r}: {e}") from e


class CustomRule(pydantic.BaseModel):
    """Object form of a ``custom`` rule.

    Attributes:
        callback: Predicate ``(value, None, fields) -> bool`` (may be async)
        pattern: Regular expression searched in the stringified value
        message: Error template, ``@{field} is invalid`` when omitted
    """

    model_config = pydantic.ConfigDict(frozen=True, arbitrary_types_allowed=True)

    callback: typing.Callable[..., typing.Any] | None = None
    pattern: re.Pattern | None = None
    message: str | None = None

    @pydantic.field_validator("pattern", mode="before")
    @classmethod
    def _compile(cls, value: typing.Any) -> typing.Any:
        if isinstance(value, str):
            return compile_pattern(value)
        return value

    @pydantic.model_validator(mode="after")
    def _require_check(self) -> "CustomRule":
        if self.callback is None and self.pattern is None:
            raise ValueError("custom rule needs a callback or a pattern")
        return self


class FieldRule(typing.NamedTuple):
    """One step of a field's execution plan.

    Attributes:
        name: Name as written in the schema (``between``, ``preTrim``)
        type: Family or processor tag; ``custom``, ``schema`` or ``arrayOfSchema``
              for the special entries
        function: Canonical function name (``between``), None for nested schemas
        param: Parameter already coerced to its semantic type
        message: Message override for this rule
        stage: When the engine runs it
        target: The RuleFunction or ProcessorFunc to run
    """

    name: str
    type: str
    function: str | None
    param: typing.Any = None
    message: str | None = None
    stage: Stage = "rule"
    target: typing.Any = None

    @property
    def qualified_name(self) -> str:
        return f"{self.type}::{self.function}" if self.function else self.type


class ParsedSchema(typing.Mapping[str, tuple[FieldRule, ...]]):
    """Read-only mapping of field name to its ordered FieldRules.

    Safe to share between concurrent validations.
    """

    def __init__(self, fields: typing.Mapping[str, typing.Sequence[FieldRule]]) -> None:
        self._fields = types.MappingProxyType({name: tuple(rules) for name, rules in fields.items()})

    def __getitem__(self, name: str) -> tuple[FieldRule, ...]:
        return self._fields[name]

    def __iter__(self) -> typing.Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"ParsedSchema({dict(self._fields)!r})"


CALLABLE_CAST = _processors.ProcessorFunc(
    "callable",
    steps=[lambda value, transform: transform(value)],
    desc="Applies a user-supplied callable",
)
"""Runs callables given in ``cast``; the callable travels as the parameter."""


class _FieldParser:
    """Parses one field definition, tracking the active type context."""

    def __init__(self, field: str, registry: _registry.Registry) -> None:
        self.field = field
        self.registry = registry
        self.context: str | None = None
        self.rules: list[FieldRule] = []

    def error(self, message: str) -> _errors.SchemaError:
        return _errors.SchemaError(message, self.field)

    def parse(self, definition: typing.Any) -> list[FieldRule]:
        if isinstance(definition, str):
            self.parse_tokens(definition)
        elif isinstance(definition, typing.Mapping):
            self.parse_object(definition)
        elif isinstance(definition, (list, tuple)):
            for item in definition:
                self.parse_item(item)
        else:
            raise self.error(f"Unsupported field definition {type(definition).__name__}")
        return self.rules

    def parse_tokens(self, definition: str, cast: bool = False) -> None:
        for token in TOKEN_SEPARATOR.split(definition):
            token = token.strip()
            if not token:
                continue
            name, _, raw_param = _params.extract_param(token)
            self.add(name, raw_param, cast=cast)

    def parse_item(self, item: typing.Any) -> None:
        if isinstance(item, str):
            self.parse_tokens(item)
        elif isinstance(item, typing.Mapping) and "name" in item:
            param = item.get("value", item.get("param"))
            self.add(str(item["name"]), None if param is True else param, message=item.get("message"))
        elif isinstance(item, typing.Mapping):
            self.parse_object(item)
        elif callable(item):
            self.add_custom(item)
        else:
            raise self.error(f"Unsupported rule {item!r}")

    def parse_object(self, definition: typing.Mapping[str, typing.Any]) -> None:
        messages = definition.get("messages") or {}
        if not isinstance(messages, typing.Mapping):
            raise self.error("messages must be a mapping")
        for name, raw in definition.items():
            if name == "messages" or raw is False or raw is None:
                continue
            if name == "custom":
                self.add_custom(raw, messages.get("custom"))
            elif name in NESTED_KEYS:
                self.add_nested(name, raw, messages.get(name))
            elif name == "cast":
                self.add_casts(raw)
            elif name == "default":
                entry = self.resolve(name)
                self.rules.append(self.field_rule(name, entry, raw, messages.get(name)))
            else:
                self.add_from_object(name, raw, messages)

    def add_from_object(
        self, name: str, raw: typing.Any, messages: typing.Mapping[str, str]
    ) -> None:
        entry = self.resolve(name)
        message = None
        if raw is True:
            param = None
        elif isinstance(raw, typing.Mapping):
            param = raw.get("value", raw.get("rule"))
            param = None if param is True else param
            message = raw.get("message")
        elif isinstance(raw, str) and entry.param_type == "none":
            param, message = None, raw
        else:
            param = raw
        if message is None:
            message = _message_for(messages, name, entry)
        self.add(name, param, message=message, entry=entry)

    def resolve(self, name: str) -> _registry.RegistryEntry:
        entry = self.registry.resolve_in_context(name, self.context)
        if entry is _registry.UNKNOWN:
            raise self.error(f"Unknown rule {name}")
        return entry

    def add(
        self,
        name: str,
        raw_param: typing.Any,
        *,
        message: str | None = None,
        entry: _registry.RegistryEntry | None = None,
        cast: bool = False,
    ) -> None:
        entry = entry or self.resolve(name)
        if cast and not entry.is_processor:
            raise self.error(f"{name} is not a processor and cannot be used in cast")
        if entry.is_rule and entry.param_type != "none" and raw_param is None:
            raise _errors.ParamError(f"Rule {name} requires a parameter", self.field)
        try:
            param = _params.parse_param(raw_param, entry.param_type, entry.argument_type)
        except _errors.ParamError as e:
            raise _errors.ParamError(f"{name}: {e}", self.field) from e
        if entry.param_type == "none" and raw_param is not None and entry.is_rule:
            logger.debug("Ignoring parameter %r of %s on %s", raw_param, name, self.field)
        self.rules.append(self.field_rule(name, entry, param, message))
        if entry.is_type_check:
            self.context = entry.type

    def field_rule(
        self, name: str, entry: _registry.RegistryEntry, param: typing.Any, message: str | None
    ) -> FieldRule:
        stage: Stage = "rule"
        if entry.kind == "preprocessor":
            stage = "pre"
        elif entry.kind == "postprocessor":
            stage = "post"
        return FieldRule(name, entry.type, entry.function_name, param, message, stage, entry.function)

    def add_custom(self, raw: typing.Any, message: str | None = None) -> None:
        try:
            if isinstance(raw, CustomRule):
                custom = raw
            elif isinstance(raw, typing.Mapping):
                custom = CustomRule.model_validate(raw)
            elif isinstance(raw, (str, re.Pattern)):
                custom = CustomRule(pattern=raw)
            elif callable(raw):
                custom = CustomRule(callback=raw)
            else:
                raise self.error(f"Invalid custom rule {raw!r}")
        except pydantic.ValidationError as e:
            raise self.error(f"Invalid custom rule: {e}") from e
        function = "callback" if custom.callback is not None else "pattern"
        self.rules.append(
            FieldRule("custom", "custom", function, custom, custom.message or message, "custom")
        )

    def add_nested(self, name: str, raw: typing.Any, message: str | None) -> None:
        if isinstance(raw, ParsedSchema):
            nested = raw
        elif isinstance(raw, typing.Mapping):
            try:
                nested = parse_schema(raw, self.registry)
            except _errors.SchemaError as e:
                raise self.error(f"{name}.{e}") from e
        else:
            raise self.error(f"{name} must be a schema mapping")
        self.rules.append(FieldRule(name, name, None, nested, message, name))

    def add_casts(self, raw: typing.Any) -> None:
        items = raw if isinstance(raw, (list, tuple)) else [raw]
        for item in items:
            if isinstance(item, str):
                self.parse_tokens(item, cast=True)
            elif callable(item):
                name = getattr(item, "__name__", "callable")
                self.rules.append(FieldRule(name, "cast", "callable", item, None, "post", CALLABLE_CAST))
            else:
                raise self.error(f"Invalid cast {item!r}")


def _message_for(
    messages: typing.Mapping[str, str], name: str, entry: _registry.RegistryEntry
) -> str | None:
    for key in (name, f"{entry.type}::{entry.function_name}", entry.function_name):
        if key in messages:
            return messages[key]
    return None


def parse_schema(
    raw: _record.RawSchema | ParsedSchema,
    registry: _registry.Registry | None = None,
) -> ParsedSchema:
    """Parse a raw schema into a ParsedSchema.

    Args:
        raw: Mapping of field name to its definition (already parsed schemas
             are returned unchanged)
        registry: Registry to resolve names in (the default registry if None)

    Returns:
        Immutable ParsedSchema

    Raises:
        SchemaError: On unknown rule names or invalid definitions
        ParamError: On parameters that cannot be coerced
    """
    if isinstance(raw, ParsedSchema):
        return raw
    if not isinstance(raw, typing.Mapping):
        raise _errors.SchemaError(f"Schema must be a mapping, got {type(raw).__name__}")
    registry = registry if registry is not None else _registry.default_registry()
    parsed = {
        str(field): _FieldParser(str(field), registry).parse(definition)
        for field, definition in raw.items()
    }
    logger.debug("Parsed schema with %d fields", len(parsed))
    return ParsedSchema(parsed)
