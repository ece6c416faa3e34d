"""Exception types.

Per-field validation failures are returned as data. Exceptions are reserved
for configuration and programming errors (unknown or duplicate rule names,
malformed parameters) and for batch helpers asked to raise.
"""

import typing


class RulecastError(Exception):
    """Base class for every error raised by rulecast."""


class RegistryError(RulecastError):
    """Raised when the rule/processor registry is misconfigured."""


class DuplicateEntryError(RegistryError):
    """Raised when a name or alias is registered twice.

    Attributes:
        name: The conflicting registry key
        owner: Fully qualified name of the entry that tried to claim it
    """

    def __init__(self, name: str, owner: str) -> None:
        self.name = name
        self.owner = owner
        if name == owner:
            message = f"Duplicate rule entry {owner}"
        else:
            message = f"Duplicate rule entry {owner} for alias {name}"
        super().__init__(message)


class UnknownFunctionError(RegistryError, KeyError):
    """Raised when a family or processor is asked for a function it lacks."""

    def __init__(self, function_name: str, owner_type: str) -> None:
        self.function_name = function_name
        self.owner_type = owner_type
        super().__init__(f"Function {function_name} is not registered in {owner_type}")

    def __str__(self) -> str:
        return str(self.args[0])


class SchemaError(RulecastError, ValueError):
    """Raised when a raw schema cannot be parsed.

    Attributes:
        field: Field whose definition is invalid (None for schema-level errors)
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        if field is not None:
            message = f"{field}: {message}"
        super().__init__(message)


class ParamError(SchemaError):
    """Raised when a rule parameter cannot be coerced to its declared type."""


class AsyncRuleError(RulecastError, RuntimeError):
    """Raised when a synchronous validation runs into a pending awaitable."""


class ValidationError(RulecastError, ValueError):
    """Raised by batch helpers when a value bag fails and errors must raise.

    Attributes:
        errors: Dictionary mapping dotted field paths to error details
                (``{"field", "rule", "error"}``)
    """

    def __init__(self, errors: dict[str, dict[str, typing.Any]]) -> None:
        self.errors = errors
        error_msg = ", ".join(
            f"{path}: {detail.get('error')}" for path, detail in errors.items()
        )
        super().__init__(f"Validation failed: {error_msg}")
