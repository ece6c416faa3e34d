"""String case conversion helpers.

Used by the ``case`` processors and to turn field names into error labels
(``first_name`` -> ``First Name``).
"""

import re

_SEPARATED_CHAR = re.compile(r"[-_\s](.)")
_WHITESPACE = re.compile(r"\s+")
_INNER_UPPER = re.compile(r"(?<!^)[A-Z]")
_SEPARATOR_RUN = re.compile(r"[-_\s]+")
_WORD_START = re.compile(r"\b\w")


def to_camel_case(value: str) -> str:
    value = _SEPARATED_CHAR.sub(lambda m: m.group(1).upper(), _WHITESPACE.sub(" ", value))
    return value[:1].lower() + value[1:]


def to_pascal_case(value: str) -> str:
    value = _SEPARATED_CHAR.sub(lambda m: m.group(1).upper(), _WHITESPACE.sub(" ", value))
    return value[:1].upper() + value[1:]


def _to_separated_case(value: str, separator: str) -> str:
    value = _INNER_UPPER.sub(lambda m: separator + m.group(0), value).lower()
    escaped = re.escape(separator)
    return re.sub(rf"{escaped}?(\s+){escaped}?", separator, value)


def to_kebab_case(value: str) -> str:
    return _to_separated_case(value, "-")


def to_snake_case(value: str) -> str:
    return _to_separated_case(value, "_")


def to_title_case(value: str) -> str:
    """Capitalize every word, treating ``-``, ``_`` and spaces as separators."""
    value = _SEPARATOR_RUN.sub(" ", value)
    return _WORD_START.sub(lambda m: m.group(0).upper(), value)


def to_sentence_case(value: str) -> str:
    """Lowercase each ``.``-delimited sentence and capitalize its first word.

    Example:
        >>> to_sentence_case("hello. WORLD. how are you")
        'Hello. World. How are you.'
    """
    sentences = []
    for segment in value.strip().split("."):
        segment = segment.strip().lower()
        if not segment:
            continue
        sentences.append(_WORD_START.sub(lambda m: m.group(0).upper(), segment, count=1))
    return ". ".join(sentences) + "."


def uc_first(value: str) -> str:
    """Uppercase the first character and lowercase the rest."""
    return value[:1].upper() + value[1:].lower()


def capitalize(value: str) -> str:
    """Uppercase only the first character."""
    return value[:1].upper() + value[1:]


def to_label(field_name: str) -> str:
    """Turn a field name into the label used in error messages."""
    return to_title_case(str(field_name))
