"""Rule families: named validation functions grouped by value type."""

import logging
import re
import typing
from dataclasses import dataclass

from .. import coro as _coro
from .. import errors as _errors
from .. import params as _params
from .. import record as _record
from .. import result as _result

logger = logging.getLogger(__name__)

Predicate = typing.Callable[[typing.Any, typing.Any, _record.Fields], typing.Any]
"""Step callback ``(value, param, fields)``; may return a bool or an awaitable."""


@dataclass(frozen=True)
class ValidationStep:
    """One check of a rule function.

    Attributes:
        message: Error template reported when the step fails
        callback: Predicate ``(value, param, fields) -> bool``
        pattern: Regular expression searched in ``str(value)``
    """

    message: str
    callback: Predicate | None = None
    pattern: re.Pattern[str] | None = None

    async def check(
        self, value: typing.Any, param: typing.Any, fields: _record.Fields
    ) -> bool:
        """Return whether ``value`` passes this step.

        A predicate that raises (e.g. ``len()`` of a number) fails the step.
        """
        if self.callback is not None:
            try:
                passed = await _coro.resolve(self.callback(value, param, fields))
            except _errors.RulecastError:
                raise
            except Exception:
                logger.debug("Predicate raised for %r, step failed", value, exc_info=True)
                return False
            if not passed:
                return False
        if self.pattern is not None and self.pattern.search(str(value)) is None:
            return False
        return True


class Signature(typing.NamedTuple):
    name: str
    aliases: list[str]


class SignatureRecord(typing.NamedTuple):
    type: str
    rules: list[Signature]


class RuleFunction:
    """A named validation function with an ordered list of steps.

    Attributes:
        name: Name unique within its family (e.g. ``between``)
        param_type: Shape of the parameter (see ``params.ParamType``)
        argument_type: Semantic type the parameter is coerced to
        aliases: Alternate names, unique across the whole registry
        steps: Validation steps, run in order
        desc: Short description for generated documentation
    """

    def __init__(
        self,
        name: str,
        *,
        param_type: _params.ParamType = "none",
        argument_type: _params.ArgumentType = "any",
        aliases: typing.Iterable[str] = (),
        steps: typing.Iterable[ValidationStep] = (),
        desc: str | None = None,
    ) -> None:
        self.name = name
        self.param_type = param_type
        self.argument_type = argument_type
        self.aliases = tuple(aliases)
        self.steps = tuple(steps)
        self.desc = desc

    def __repr__(self) -> str:
        return f"RuleFunction({self.name!r}, param_type={self.param_type!r})"

    async def evaluate(
        self,
        value: typing.Any,
        param: typing.Any = None,
        fields: _record.Fields | None = None,
    ) -> _result.RuleResult:
        """Run every step in order, stopping at the first failure.

        Args:
            value: Value to validate
            param: Coerced rule parameter
            fields: Cross-field context

        Returns:
            RuleResult carrying the failing step's message template
        """
        fields = fields if fields is not None else {}
        for step in self.steps:
            if not await step.check(value, param, fields):
                return _result.RuleResult(False, self.name, value, param, step.message)
        return _result.RuleResult(True, self.name, value, param)

    def validate(
        self,
        value: typing.Any,
        param: typing.Any = None,
        fields: _record.Fields | None = None,
    ) -> _result.RuleResult:
        """Synchronous version of ``evaluate``.

        Raises:
            AsyncRuleError: If a step returns a pending awaitable
        """
        return _coro.run_sync(self.evaluate(value, param, fields))


class BaseRule:
    """A family of rule functions sharing one ``type`` tag.

    Every family registers exactly one type-check function first (usually
    named ``valid``) and any number of refinements after it.

    Attributes:
        type: Family tag used in fully-qualified names (``type::function``)
        functions: Rule functions keyed by canonical name
    """

    kind: typing.ClassVar[str] = "rule"
    typed: typing.ClassVar[bool] = True

    def __init__(self, type: str, type_checker: RuleFunction | None = None) -> None:
        self.type = type
        self.functions: dict[str, RuleFunction] = {}
        if type_checker is not None:
            self.register_function(type_checker)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(type={self.type!r})"

    @property
    def type_checker(self) -> RuleFunction | None:
        """The first registered function, which checks the basic type.

        None for families such as ``field`` that do not check a type.
        """
        if not self.typed:
            return None
        return next(iter(self.functions.values()), None)

    def register_function(self, function: RuleFunction) -> "BaseRule":
        """Register a rule function in this family.

        Raises:
            DuplicateEntryError: If the name is already registered here
        """
        if function.name in self.functions:
            raise _errors.DuplicateEntryError(
                function.name, f"{self.type}::{function.name}"
            )
        self.functions[function.name] = function
        return self

    def define(
        self,
        name: str,
        *steps: ValidationStep,
        param_type: _params.ParamType = "none",
        argument_type: _params.ArgumentType = "any",
        aliases: typing.Iterable[str] = (),
        desc: str | None = None,
    ) -> "BaseRule":
        """Build a RuleFunction from its parts and register it."""
        return self.register_function(
            RuleFunction(
                name,
                param_type=param_type,
                argument_type=argument_type,
                aliases=aliases,
                steps=steps,
                desc=desc,
            )
        )

    def add_validation_step(self, function_name: str, step: ValidationStep) -> "BaseRule":
        """Append a step to an already registered function.

        Raises:
            UnknownFunctionError: If the function is not registered here
        """
        function = self.resolve(function_name)
        function.steps = function.steps + (step,)
        return self

    def alias_map(self) -> dict[str, str]:
        """Map every alias to the canonical name of its function."""
        return {
            alias: name
            for name, function in self.functions.items()
            for alias in function.aliases
        }

    def resolve_alias(self, alias: str) -> RuleFunction | None:
        name = self.alias_map().get(alias)
        return self.functions.get(name) if name is not None else None

    def resolve(self, function_name: str) -> RuleFunction:
        """Find a function by canonical name or alias.

        Raises:
            UnknownFunctionError: If neither matches
        """
        function = self.functions.get(function_name) or self.resolve_alias(function_name)
        if function is None:
            raise _errors.UnknownFunctionError(function_name, self.type)
        return function

    async def evaluate(
        self,
        function_name: str,
        value: typing.Any,
        param: typing.Any = None,
        fields: _record.Fields | None = None,
    ) -> _result.RuleResult:
        return await self.resolve(function_name).evaluate(value, param, fields)

    def validate(
        self,
        function_name: str,
        value: typing.Any,
        param: typing.Any = None,
        fields: _record.Fields | None = None,
    ) -> _result.RuleResult:
        """Validate ``value`` with one function of this family.

        Args:
            function_name: Canonical name or alias
            value: Value to validate
            param: Coerced parameter
            fields: Cross-field context

        Returns:
            RuleResult with the unformatted message template on failure

        Raises:
            UnknownFunctionError: If the function is not registered here
        """
        return self.resolve(function_name).validate(value, param, fields)

    def generate_signatures(self) -> SignatureRecord:
        """Describe every function as ``type::name(params)`` for documentation."""
        rules = []
        for function in self.functions.values():
            pattern = signature_pattern(function.param_type, function.argument_type)
            rules.append(
                Signature(
                    f"{self.type}::{function.name}{pattern}",
                    [f"{alias}{pattern}" for alias in function.aliases],
                )
            )
        return SignatureRecord(self.type, rules)


def signature_pattern(param_type: str, argument_type: str) -> str:
    """Render the ``(...)`` part of a documentation signature."""
    if param_type == "none":
        return ""
    if param_type == "single":
        example = argument_type
    elif param_type == "range":
        example = ",".join(f"{argument_type}{n}" for n in (1, 2))
    elif param_type == "list":
        example = ",".join(f"{argument_type}{n}" for n in (1, 2, 3, 4))
    else:
        example = f"{param_type}<{argument_type}>"
    return f"({example})"


def step(message: str, callback: Predicate) -> ValidationStep:
    """Shorthand for a predicate step."""
    return ValidationStep(message, callback=callback)


def pattern(message: str, regex: str, flags: int = 0) -> ValidationStep:
    """Shorthand for a regular-expression step."""
    return ValidationStep(message, pattern=re.compile(regex, flags))
