"""Built-in value processors."""

from .base import Processor, ProcessorFunc, strings_only
from .case import CaseProcessor
from .cast import CastProcessor
from .math import MathProcessor
from .trim import TrimProcessor


def default_processors() -> list[Processor]:
    """Post- and pre-processor instances of every built-in processor."""
    return [
        processor(is_preprocessor)
        for processor in (TrimProcessor, CaseProcessor, CastProcessor, MathProcessor)
        for is_preprocessor in (False, True)
    ]


__all__ = [
    "CaseProcessor",
    "CastProcessor",
    "MathProcessor",
    "Processor",
    "ProcessorFunc",
    "TrimProcessor",
    "default_processors",
    "strings_only",
]
