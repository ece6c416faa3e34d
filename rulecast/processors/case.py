"""Case conversion processors; non-string values pass through unchanged."""

from .. import casing as _casing
from .base import Processor, strings_only

_CONVERSIONS = [
    ("camel", _casing.to_camel_case, "toCamelcase"),
    ("kebab", _casing.to_kebab_case, "toKebabcase"),
    ("lower", str.lower, "toLowercase"),
    ("pascal", _casing.to_pascal_case, "toPascalcase"),
    ("sentence", _casing.to_sentence_case, "toSentencecase"),
    ("snake", _casing.to_snake_case, "toSnakecase"),
    ("title", _casing.to_title_case, "toTitlecase"),
    ("upper", str.upper, "toUppercase"),
    ("ucFirst", _casing.uc_first, "toUcFirst"),
    ("capitalize", _casing.capitalize, "toCapitalize"),
]


class CaseProcessor(Processor):
    """``case::<style>`` / ``preCase::<style>``."""

    def __init__(self, is_preprocessor: bool = False) -> None:
        super().__init__("case", is_preprocessor)
        for name, convert, alias in _CONVERSIONS:
            self.define(name, strings_only(convert), argument_type="string", aliases=[alias])
