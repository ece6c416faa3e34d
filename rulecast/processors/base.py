"""Value transformations applied before or after validation."""

import logging
import typing

from .. import coro as _coro
from .. import errors as _errors
from .. import params as _params
from ..casing import to_camel_case
from ..rules.base import Signature, SignatureRecord, signature_pattern

logger = logging.getLogger(__name__)

Callback = typing.Callable[[typing.Any, typing.Any], typing.Any]
"""Transformation ``(value, param) -> new value``; may return an awaitable."""

DEFAULT_FUNCTION = "default"


class ProcessorFunc:
    """A named transformation made of callbacks applied in sequence.

    Attributes:
        name: Function name, ``default`` for single-function processors
        param_type: Shape of the optional parameter
        argument_type: Semantic type the parameter is coerced to
        aliases: Alternate names (camel-cased and ``pre``-prefixed in the registry)
        steps: Callbacks, each consuming the previous output
        desc: Short description for generated documentation
    """

    def __init__(
        self,
        name: str = DEFAULT_FUNCTION,
        *,
        param_type: _params.ParamType = "none",
        argument_type: _params.ArgumentType = "any",
        aliases: typing.Iterable[str] = (),
        steps: typing.Iterable[Callback] = (),
        desc: str | None = None,
    ) -> None:
        self.name = name
        self.param_type = param_type
        self.argument_type = argument_type
        self.aliases = tuple(aliases)
        self.steps = tuple(steps)
        self.desc = desc

    def __repr__(self) -> str:
        return f"ProcessorFunc({self.name!r})"

    async def evaluate(self, value: typing.Any, param: typing.Any = None) -> typing.Any:
        """Transform ``value``; any failing step leaves it unchanged.

        Args:
            value: Value to transform
            param: Coerced parameter, None when absent

        Returns:
            The transformed value, or ``value`` itself if a step raised
        """
        result = value
        for callback in self.steps:
            try:
                result = await _coro.resolve(callback(result, param))
            except _errors.RulecastError:
                raise
            except Exception:
                logger.debug("Processor %s failed on %r, value kept", self.name, value, exc_info=True)
                return value
        return result

    def process(self, value: typing.Any, param: typing.Any = None) -> typing.Any:
        return _coro.run_sync(self.evaluate(value, param))


class Processor:
    """A family of transformations sharing one ``type`` tag.

    Each built-in processor is registered twice: once as a post-processor
    (runs after successful validation) and once, with a ``pre`` prefix, as a
    pre-processor (runs before any rule).

    Attributes:
        type: Processor tag (``trim``, ``case``, ``cast``, ``math``)
        is_preprocessor: Whether the functions run before validation
        functions: Processor functions keyed by name
    """

    def __init__(self, type: str, is_preprocessor: bool = False) -> None:
        self.type = type
        self.is_preprocessor = is_preprocessor
        self.functions: dict[str, ProcessorFunc] = {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(type={self.type!r}, is_preprocessor={self.is_preprocessor})"

    @property
    def kind(self) -> str:
        return "preprocessor" if self.is_preprocessor else "postprocessor"

    @property
    def prefix(self) -> str:
        """Camel-cased type, e.g. ``case`` or ``preCase``."""
        return to_camel_case(("pre " if self.is_preprocessor else "") + self.type)

    def key(self, function_name: str) -> str:
        """Registry key of a function, e.g. ``preCase::lower`` or ``trim``."""
        if function_name == DEFAULT_FUNCTION:
            return self.prefix
        return f"{self.prefix}::{function_name}"

    def alias_key(self, alias: str) -> str:
        return to_camel_case(("pre " if self.is_preprocessor else "") + alias)

    def register_function(self, function: ProcessorFunc) -> "Processor":
        """Register a processor function.

        Raises:
            DuplicateEntryError: If the name is already registered here
        """
        if function.name in self.functions:
            raise _errors.DuplicateEntryError(function.name, self.key(function.name))
        self.functions[function.name] = function
        return self

    def define(
        self,
        name: str,
        *steps: Callback,
        param_type: _params.ParamType = "none",
        argument_type: _params.ArgumentType = "any",
        aliases: typing.Iterable[str] = (),
        desc: str | None = None,
    ) -> "Processor":
        return self.register_function(
            ProcessorFunc(
                name,
                param_type=param_type,
                argument_type=argument_type,
                aliases=aliases,
                steps=steps,
                desc=desc,
            )
        )

    def resolve(self, function_name: str) -> ProcessorFunc:
        """Find a function by its canonical name.

        Raises:
            UnknownFunctionError: If it is not registered here
        """
        function = self.functions.get(function_name)
        if function is None:
            raise _errors.UnknownFunctionError(function_name, self.type)
        return function

    async def evaluate(
        self, function_name: str, value: typing.Any, param: typing.Any = None
    ) -> typing.Any:
        return await self.resolve(function_name).evaluate(value, param)

    def process(self, function_name: str, value: typing.Any, param: typing.Any = None) -> typing.Any:
        """Transform ``value`` with one function of this processor.

        Raises:
            UnknownFunctionError: If the function is not registered here
        """
        return self.resolve(function_name).process(value, param)

    def generate_signatures(self) -> SignatureRecord:
        rules = []
        for function in self.functions.values():
            pattern = signature_pattern(function.param_type, function.argument_type)
            rules.append(
                Signature(
                    f"{self.key(function.name)}{pattern}",
                    [f"{self.alias_key(alias)}{pattern}" for alias in function.aliases],
                )
            )
        return SignatureRecord(self.prefix, rules)


def strings_only(transform: typing.Callable[[str], typing.Any]) -> Callback:
    """Wrap a string transformation so other values pass through untouched."""

    def callback(value: typing.Any, param: typing.Any = None) -> typing.Any:
        return transform(value) if isinstance(value, str) else value

    return callback
