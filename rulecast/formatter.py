"""Render ``@{...}`` error message templates.

Placeholder grammar::

    @{ path [| modifier]* [|| fallback [| modifier]*]* }

``path`` is a dotted / bracketed lookup (``user.name``, ``items[0]``,
``config[env].mode``), a fallback may also be a quoted literal
(``"Guest"``), and modifiers are ``trim``, ``upper``, ``lower`` and
``capitalize``. The first candidate that resolves to a non-None value wins.
Any error while rendering a placeholder renders that placeholder as an empty
string; a broken template never raises.
"""

import logging
import re
import typing

from . import casing as _casing

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"@\{([^{}]*)\}")
_PATH = re.compile(r"^[A-Za-z_$][\w$]*(?:\.[A-Za-z_$][\w$]*|\[[^\[\]]+\])*$")
_SEGMENT = re.compile(r"\.?([A-Za-z_$][\w$]*)|\[([^\[\]]+)\]")
_LITERAL = re.compile(r"^(?:\"(.*)\"|'(.*)')$", re.DOTALL)

MODIFIERS: dict[str, typing.Callable[[str], str]] = {
    "trim": str.strip,
    "upper": str.upper,
    "lower": str.lower,
    "capitalize": _casing.capitalize,
}


def resolve_path(context: typing.Any, path: str) -> typing.Any:
    """Look up a dotted/bracketed path in nested mappings, sequences and objects.

    Args:
        context: Root object to resolve against
        path: Path such as ``user.address[0].city``

    Returns:
        The resolved value, or None when any segment is missing

    Raises:
        ValueError: If the path is malformed
    """
    if not _PATH.match(path):
        raise ValueError(f"Malformed placeholder path {path!r}")

    current = context
    for match in _SEGMENT.finditer(path):
        if current is None:
            return None
        key = match.group(1) if match.group(1) is not None else match.group(2).strip()
        literal = _LITERAL.match(key)
        if literal:
            key = literal.group(1) if literal.group(1) is not None else literal.group(2)
        current = _get(current, key)
    return current


def _get(container: typing.Any, key: str) -> typing.Any:
    if isinstance(container, typing.Mapping):
        if key in container:
            return container[key]
        if key.isdigit():
            return container.get(int(key))
        return None
    if isinstance(container, tuple) and key in getattr(container, "_fields", ()):
        return getattr(container, key)
    if isinstance(container, (list, tuple)):
        if key.isdigit() and int(key) < len(container):
            return container[int(key)]
        return None
    if isinstance(container, (str, bytes)):
        return None
    return getattr(container, key, None)


def stringify(value: typing.Any) -> str:
    """Render a resolved value the way error messages expect.

    Strings are trimmed, sequences are joined with ``", "``, booleans render
    as ``true``/``false``, integral floats drop their ``.0`` and None renders
    as an empty string.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, tuple) and hasattr(value, "_fields"):
        return str(value).strip()
    if isinstance(value, (list, tuple, set, frozenset)):
        return ", ".join(stringify(item) for item in value)
    return str(value).strip()


class ErrorFormatter:
    """Formats error message templates against a placeholder context."""

    @classmethod
    def format(
        cls,
        template: str | None = "",
        placeholders: typing.Mapping[str, typing.Any] | None = None,
    ) -> str:
        """Format an error message using ``@{...}`` placeholders.

        Args:
            template: Error template string
            placeholders: Context the placeholder paths resolve against

        Returns:
            The rendered message

        Example:
            >>> ErrorFormatter.format('User: @{user.name || "Guest"}', {})
            'User: Guest'
        """
        context = placeholders if placeholders is not None else {}
        return _PLACEHOLDER.sub(
            lambda m: cls._render(m.group(1), context), str(template or "")
        )

    @classmethod
    def _render(cls, expression: str, context: typing.Mapping[str, typing.Any]) -> str:
        try:
            return cls._evaluate(expression, context)
        except Exception:
            logger.debug("Could not render placeholder @{%s}", expression, exc_info=True)
            return ""

    @staticmethod
    def _evaluate(expression: str, context: typing.Mapping[str, typing.Any]) -> str:
        for candidate in expression.split("||"):
            source, *modifiers = (part.strip() for part in candidate.split("|"))
            literal = _LITERAL.match(source)
            if literal:
                value = literal.group(1) if literal.group(1) is not None else literal.group(2)
            else:
                value = resolve_path(context, source)
            if value is None:
                continue
            text = stringify(value)
            for modifier in modifiers:
                text = MODIFIERS[modifier](text)
            return text
        return ""
