"""Error handling options for batch validation."""

from enum import Enum


class ErrorOption(str, Enum):
    """How batch helpers treat a value bag that fails validation.

    Attributes:
        RETURN: Yield the result with its ValidationError attached
        RAISE: Raise the ValidationError immediately
        SKIP: Leave failed value bags out of the output
    """

    RETURN = "return"
    RAISE = "raise"
    SKIP = "skip"
