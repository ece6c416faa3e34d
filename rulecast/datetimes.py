"""Strict calendar value objects used as date/time rule parameters.

The ``extract_*`` helpers only accept zero-padded ``YYYY-MM-DD``,
``HH:MM[:SS]`` and ``YYYY-MM-DD HH:MM[:SS]`` strings, and the value objects
refuse to exist for impossible calendar values such as February 30th.
"""

import datetime
import re
import typing
from dataclasses import dataclass

DATE_PATTERN = re.compile(r"^([0-9]{4})-(0[1-9]|1[012])-(0[1-9]|[12][0-9]|3[01])$")
TIME_PATTERN = re.compile(r"^([0-1][0-9]|2[0-3]):([0-5][0-9])(?::([0-5][0-9]))?$")
DATETIME_PATTERN = re.compile(
    r"^([0-9]{4})-(0[1-9]|1[012])-(0[1-9]|[12][0-9]|3[01]) "
    r"([0-1][0-9]|2[0-3]):([0-5][0-9])(?::([0-5][0-9]))?$"
)


def pad2(value: int | str) -> str:
    return str(value).zfill(2)[-2:]


@dataclass(frozen=True)
class ExtractedDate:
    """A calendar date; ``month`` is 1-based."""

    year: int
    month: int
    date: int

    def __post_init__(self) -> None:
        datetime.date(self.year, self.month, self.date)

    def __str__(self) -> str:
        return f"{self.year}-{pad2(self.month)}-{pad2(self.date)}"

    def to_datetime(self) -> datetime.datetime:
        return datetime.datetime(self.year, self.month, self.date)


@dataclass(frozen=True)
class ExtractedTime:
    """A wall-clock time of day."""

    hours: int
    minutes: int
    seconds: int = 0

    def __post_init__(self) -> None:
        datetime.time(self.hours, self.minutes, self.seconds)

    def __str__(self) -> str:
        return f"{pad2(self.hours)}:{pad2(self.minutes)}:{pad2(self.seconds)}"

    def to_datetime(self) -> datetime.datetime:
        """Anchor the time on 1970-01-01 so times compare as instants."""
        return datetime.datetime(1970, 1, 1, self.hours, self.minutes, self.seconds)


@dataclass(frozen=True)
class ExtractedDateTime:
    """A calendar date plus wall-clock time."""

    year: int
    month: int
    date: int
    hours: int
    minutes: int
    seconds: int = 0

    def __post_init__(self) -> None:
        self.to_datetime()

    def __str__(self) -> str:
        return (
            f"{self.year}-{pad2(self.month)}-{pad2(self.date)} "
            f"{pad2(self.hours)}:{pad2(self.minutes)}:{pad2(self.seconds)}"
        )

    def to_datetime(self) -> datetime.datetime:
        return datetime.datetime(
            self.year, self.month, self.date, self.hours, self.minutes, self.seconds
        )


Extracted = ExtractedDate | ExtractedTime | ExtractedDateTime


def extract_date(raw: typing.Any) -> ExtractedDate:
    """Parse a strict ``YYYY-MM-DD`` string.

    Args:
        raw: Date string

    Returns:
        ExtractedDate for the string

    Raises:
        ValueError: If the string does not match or is not a real date
    """
    matched = DATE_PATTERN.match(str(raw))
    if not matched:
        raise ValueError(f"Invalid date {raw}")
    year, month, date = (int(part) for part in matched.groups())
    try:
        return ExtractedDate(year, month, date)
    except ValueError as e:
        raise ValueError(f"Invalid date {raw}: {e}") from e


def extract_time(raw: typing.Any) -> ExtractedTime:
    """Parse a strict ``HH:MM`` or ``HH:MM:SS`` string.

    Raises:
        ValueError: If the string does not match
    """
    matched = TIME_PATTERN.match(str(raw))
    if not matched:
        raise ValueError(f"Invalid time {raw}")
    hours, minutes, seconds = matched.groups()
    return ExtractedTime(int(hours), int(minutes), int(seconds or 0))


def extract_datetime(raw: typing.Any) -> ExtractedDateTime:
    """Parse a strict ``YYYY-MM-DD HH:MM[:SS]`` string.

    Raises:
        ValueError: If the string does not match or is not a real date
    """
    matched = DATETIME_PATTERN.match(str(raw))
    if not matched:
        raise ValueError(f"Invalid datetime {raw}")
    year, month, date, hours, minutes, seconds = matched.groups()
    try:
        return ExtractedDateTime(
            int(year), int(month), int(date), int(hours), int(minutes), int(seconds or 0)
        )
    except ValueError as e:
        raise ValueError(f"Invalid datetime {raw}: {e}") from e
