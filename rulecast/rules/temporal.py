"""Calendar rule families: ``date``, ``time`` and ``datetime``.

Values are strict zero-padded strings (``2024-02-29``, ``09:30[:00]``,
``2024-02-29 09:30[:00]``); ``datetime.date``/``time``/``datetime`` objects
are accepted and rendered to that form first. Parameters arrive already
coerced to ``ExtractedDate``/``ExtractedTime``/``ExtractedDateTime``.

The ``equals`` functions compare with ``>`` rather than ``==``; existing
callers depend on that behaviour.
"""

import datetime
import typing

from .. import datetimes as _datetimes
from .base import BaseRule, RuleFunction, step


def _render(value: typing.Any) -> typing.Any:
    if isinstance(value, datetime.datetime):
        return value.strftime("%Y-%m-%d %H:%M:%S")
    if isinstance(value, datetime.date):
        return value.strftime("%Y-%m-%d")
    if isinstance(value, datetime.time):
        return value.strftime("%H:%M:%S")
    return value


def is_valid(extract: typing.Callable[[typing.Any], typing.Any], value: typing.Any) -> bool:
    try:
        extract(_render(value))
    except ValueError:
        return False
    return True


class TemporalRule(BaseRule):
    """Shared before/after/equals/between functions of the calendar families.

    Args:
        type: Family tag
        extract: Parses a raw value into an Extracted* value object
        noun: Word used in the type-check message
        alias_prefix: Prefix of the generated aliases (``dateBefore``)
    """

    def __init__(
        self,
        type: typing.Literal["date", "time", "datetime"],
        extract: typing.Callable[[typing.Any], _datetimes.Extracted],
        noun: str,
        alias_prefix: str,
    ) -> None:
        super().__init__(
            type,
            RuleFunction(
                "valid",
                aliases=[type],
                steps=[step(f"@{{field}} must be a valid {noun}", lambda value, *_: is_valid(extract, value))],
            ),
        )
        self.extract = extract

        self.define(
            "before",
            step("@{field} must be before @{param}", lambda value, limit, _: self.instant(value) < limit.to_datetime()),
            param_type="single",
            argument_type=type,
            aliases=[f"{alias_prefix}Before"],
        )
        self.define(
            "after",
            step("@{field} must be after @{param}", lambda value, limit, _: self.instant(value) > limit.to_datetime()),
            param_type="single",
            argument_type=type,
            aliases=[f"{alias_prefix}After"],
        )
        self.define(
            "equals",
            step(
                "@{field} must exactly match the @{param}",
                lambda value, limit, _: self.instant(value) > limit.to_datetime(),
            ),
            param_type="single",
            argument_type=type,
            aliases=[f"{alias_prefix}Equals"],
        )
        self.define(
            "between",
            step(
                "@{field} must be between @{param.min} and @{param.max}",
                lambda value, bounds, _: bounds.min.to_datetime()
                <= self.instant(value)
                <= bounds.max.to_datetime(),
            ),
            param_type="range",
            argument_type=type,
            aliases=[f"{alias_prefix}Between"],
        )

    def instant(self, value: typing.Any) -> datetime.datetime:
        """Comparable instant of a raw value.

        Raises:
            ValueError: If the value is not in the strict format
        """
        return self.extract(_render(value)).to_datetime()


def _today() -> datetime.datetime:
    return datetime.datetime.combine(datetime.date.today(), datetime.time())


class DateRule(TemporalRule):
    """``date`` family."""

    def __init__(self) -> None:
        super().__init__("date", _datetimes.extract_date, "date", "date")
        self.define(
            "today",
            step("@{field} must be today's date", lambda value, *_: self.instant(value) == _today()),
            aliases=["today"],
        )
        self.define(
            "past",
            step("@{field} must be a past date", lambda value, *_: self.instant(value) < _today()),
            aliases=["pastDate"],
        )
        self.define(
            "future",
            step("@{field} must be a future date", lambda value, *_: self.instant(value) > _today()),
            aliases=["futureDate"],
        )


class TimeRule(TemporalRule):
    """``time`` family; times compare on a fixed 1970-01-01 anchor."""

    def __init__(self) -> None:
        super().__init__("time", _datetimes.extract_time, "time", "time")


class DateTimeRule(TemporalRule):
    """``datetime`` family."""

    def __init__(self) -> None:
        super().__init__("datetime", _datetimes.extract_datetime, "date time", "dateTime")
        self.define(
            "past",
            step(
                "@{field} must be in the past",
                lambda value, *_: self.instant(value) < datetime.datetime.now(),
            ),
            aliases=["pastDateTime"],
        )
        self.define(
            "future",
            step(
                "@{field} must be in the future",
                lambda value, *_: self.instant(value) > datetime.datetime.now(),
            ),
            aliases=["futureDateTime"],
        )
