"""Built-in rule families."""

from .array import ArrayRule
from .base import (
    BaseRule,
    RuleFunction,
    Signature,
    SignatureRecord,
    ValidationStep,
    pattern,
    step,
)
from .boolean import BooleanRule
from .field import PRESENCE_FUNCTIONS, FieldRule
from .file import FileDescriptor, FileRule, normalize_files
from .number import FloatRule, IntegerRule, NumberRule
from .object import ObjectRule
from .string import StringRule
from .temporal import DateRule, DateTimeRule, TimeRule


def default_rules() -> list[BaseRule]:
    """Fresh instances of every built-in rule family, in registration order."""
    return [
        FieldRule(),
        StringRule(),
        IntegerRule(),
        FloatRule(),
        NumberRule(),
        BooleanRule(),
        DateRule(),
        TimeRule(),
        DateTimeRule(),
        ArrayRule(),
        ObjectRule(),
        FileRule(),
    ]


__all__ = [
    "ArrayRule",
    "BaseRule",
    "BooleanRule",
    "DateRule",
    "DateTimeRule",
    "FieldRule",
    "FileDescriptor",
    "FileRule",
    "FloatRule",
    "IntegerRule",
    "NumberRule",
    "ObjectRule",
    "PRESENCE_FUNCTIONS",
    "RuleFunction",
    "Signature",
    "SignatureRecord",
    "StringRule",
    "TimeRule",
    "ValidationStep",
    "default_rules",
    "normalize_files",
    "pattern",
    "step",
]
