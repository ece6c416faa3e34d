"""Type aliases for validation inputs."""

import typing

import pydantic


Record = typing.Mapping[str, typing.Any] | pydantic.BaseModel
"""Type alias for a value bag that can be validated.

A Record can be any mapping of field names to raw values, or a Pydantic
BaseModel instance (validated through its ``model_dump()``).
"""

Json = str | bytes | bytearray
"""Type alias for a JSON-encoded value bag."""

RawFieldSchema = str | list[typing.Any] | dict[str, typing.Any]
"""Definition of one field: DSL string, list of tokens, or object form."""

RawSchema = typing.Mapping[str, RawFieldSchema]
"""Type alias for a user-supplied schema, keyed by field name."""


class Field(typing.NamedTuple):
    """One entry of the cross-field context.

    Attributes:
        name: Label derived from the field name (``first_name`` -> ``First Name``)
        value: Raw value as it appeared in the value bag
    """

    name: str
    value: typing.Any


Fields = typing.Mapping[str, Field]
"""Read-only snapshot of every field in the value bag, keyed by field name."""
