"""Declarative data validation with rule strings.

A Python package for validating value bags (form submissions, request
bodies, JSON documents) against schemas written as compact rule strings
such as ``"require|integer|between(18,65)"``, with pre/post processing,
cross-field rules, nested schemas and templated error messages.
"""

import logging

__version__ = "0.1.0"

from rulecast.async_validate import (
    async_validate,
    async_validate_field,
    async_validate_record,
    async_validate_records,
)
from rulecast.errors import (
    AsyncRuleError,
    DuplicateEntryError,
    ParamError,
    RegistryError,
    RulecastError,
    SchemaError,
    UnknownFunctionError,
    ValidationError,
)
from rulecast.export import collect_errors, error_response, export_results, processed_values
from rulecast.formatter import ErrorFormatter
from rulecast.hooks import ValidationHooks
from rulecast.options import ErrorOption
from rulecast.params import FieldEquals, FileSize, Range, extract_param, parse_param
from rulecast.processors import Processor, ProcessorFunc
from rulecast.registry import Registry, RegistryEntry, build_registry, default_registry
from rulecast.result import RecordValidationResult, RuleResult, ValidationResponse
from rulecast.rules import BaseRule, FileDescriptor, RuleFunction, pattern, step
from rulecast.schema import CustomRule, FieldRule, ParsedSchema, parse_schema
from rulecast.stats import ValidationStats, get_stats
from rulecast.validate import (
    Validator,
    validate,
    validate_field,
    validate_json,
    validate_jsons,
    validate_record,
    validate_records,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AsyncRuleError",
    "BaseRule",
    "CustomRule",
    "DuplicateEntryError",
    "ErrorFormatter",
    "ErrorOption",
    "FieldEquals",
    "FieldRule",
    "FileDescriptor",
    "FileSize",
    "ParamError",
    "ParsedSchema",
    "Processor",
    "ProcessorFunc",
    "Range",
    "RecordValidationResult",
    "Registry",
    "RegistryEntry",
    "RegistryError",
    "RuleFunction",
    "RuleResult",
    "RulecastError",
    "SchemaError",
    "UnknownFunctionError",
    "ValidationError",
    "ValidationHooks",
    "ValidationResponse",
    "ValidationStats",
    "Validator",
    "async_validate",
    "async_validate_field",
    "async_validate_record",
    "async_validate_records",
    "build_registry",
    "collect_errors",
    "default_registry",
    "error_response",
    "export_results",
    "extract_param",
    "get_stats",
    "parse_param",
    "parse_schema",
    "pattern",
    "processed_values",
    "step",
    "validate",
    "validate_field",
    "validate_json",
    "validate_jsons",
    "validate_record",
    "validate_records",
]
