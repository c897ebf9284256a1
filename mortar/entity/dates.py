"""Textual date filters.

Turns the filter strings typed by editors into condition terms on a
timestamp column.  Matching is case-insensitive::

    2018                         the whole year
    2018-03, 2018/03             the whole month
    2018-03-28, 2018/03/28       the whole day
    2018-03-28 10:30[:00]        that exact second
    today, yesterday, tomorrow   the whole day
    earlier than X, before X     column <  start of X
    later than X, after X        column >  end of X
    equal to or earlier than X   column <= end of X
    equal to or later than X     column >= start of X
    X to Y, from X to Y          start of X <= column <= end of Y
    not: X                       column != X (raw text)

A period without a phrase lowers to ``start <= column <= end``.  Values
that do not parse fall back to exact equality on the raw text.
"""
from __future__ import annotations

import calendar
import re
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from mortar.schema.conditions import And, Compare, Condition
from mortar.schema.kinds import ComparisonOp

#: Format of every bound timestamp.
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

NOT_PREFIX = "not:"

_YEAR = re.compile(r"^(\d{4})$")
_MONTH = re.compile(r"^(\d{4})[-/](\d{1,2})$")
_DAY = re.compile(r"^(\d{4})[-/](\d{1,2})[-/](\d{1,2})$")
_MOMENT = re.compile(
    r"^(\d{4})[-/](\d{1,2})[-/](\d{1,2})[ t](\d{1,2}):(\d{2})(?::(\d{2}))?$"
)
_RANGE = re.compile(r"^(?:from\s+)?(.+?)\s+to\s+(.+)$")

# Longest phrases first: "equal to or earlier than" contains "earlier than".
_PHRASES: tuple[tuple[str, ComparisonOp, str], ...] = (
    ("equal to or earlier than", ComparisonOp.LTE, "end"),
    ("equal to or later than", ComparisonOp.GTE, "start"),
    ("earlier than", ComparisonOp.LT, "start"),
    ("later than", ComparisonOp.GT, "end"),
    ("before", ComparisonOp.LT, "start"),
    ("after", ComparisonOp.GT, "end"),
)

_RELATIVE_DAYS = {"yesterday": -1, "today": 0, "tomorrow": 1}


@dataclass(frozen=True)
class Period:
    """An inclusive span of time."""

    start: datetime
    end: datetime

    def bound(self, which: str) -> str:
        return getattr(self, which).strftime(TIMESTAMP_FORMAT)


def _day(day: date) -> Period:
    start = datetime(day.year, day.month, day.day)
    return Period(start, start.replace(hour=23, minute=59, second=59))


def parse_period(text: str, today: date | None = None) -> Period | None:
    """Return the period named by ``text``, or ``None`` when it does not parse."""
    text = text.strip().lower()
    if text in _RELATIVE_DAYS:
        base = today or date.today()
        return _day(base + timedelta(days=_RELATIVE_DAYS[text]))
    year = _YEAR.match(text)
    month = _MONTH.match(text)
    day = _DAY.match(text)
    moment = _MOMENT.match(text)
    try:
        if year:
            y = int(year.group(1))
            return Period(datetime(y, 1, 1), datetime(y, 12, 31, 23, 59, 59))
        if month:
            y, m = int(month.group(1)), int(month.group(2))
            last = calendar.monthrange(y, m)[1]
            return Period(datetime(y, m, 1), datetime(y, m, last, 23, 59, 59))
        if day:
            return _day(date(*(int(g) for g in day.groups())))
        if moment:
            at = datetime(*(int(g) for g in moment.groups(default="0")))
            return Period(at, at)
    except ValueError:
        return None
    return None


def is_negated(values: Iterable[object]) -> bool:
    """True when any value carries the ``not:`` prefix."""
    return any(
        isinstance(v, str) and v.strip().lower().startswith(NOT_PREFIX) for v in values
    )


def strip_not(value: object) -> object:
    if isinstance(value, str) and value.strip().lower().startswith(NOT_PREFIX):
        return value.strip()[len(NOT_PREFIX):].strip()
    return value


class DateFilterParser:
    """Lowers date filter strings to condition terms on ``column``.

    Args:
        column: The (alias-qualified) timestamp column.
        today: Reference day for ``today`` / ``yesterday`` / ``tomorrow``.
    """

    def __init__(self, column: str, today: date | None = None) -> None:
        self.column = column
        self.today = today

    def _compare(self, op: ComparisonOp, value: object) -> Compare:
        return Compare(column=self.column, op=op, value=value)

    def _period(self, text: str) -> Period | None:
        return parse_period(text, self.today)

    def _between(self, start: Period, end: Period) -> And:
        return And(
            children=[
                self._compare(ComparisonOp.GTE, start.bound("start")),
                self._compare(ComparisonOp.LTE, end.bound("end")),
            ]
        )

    def term(self, value: str) -> Condition:
        """Lower one positive filter value."""
        text = value.strip()
        lowered = text.lower()

        for phrase, op, which in _PHRASES:
            if lowered.startswith(phrase + " "):
                period = self._period(lowered[len(phrase):])
                if period is not None:
                    return self._compare(op, period.bound(which))
                return self._compare(ComparisonOp.EQ, text)

        period = self._period(lowered)
        if period is not None:
            return self._between(period, period)

        span = _RANGE.match(lowered)
        if span:
            start, end = self._period(span.group(1)), self._period(span.group(2))
            if start is not None and end is not None:
                return self._between(start, end)

        return self._compare(ComparisonOp.EQ, text)

    def terms(self, values: Iterable[object]) -> tuple[list[Condition], bool]:
        """Lower every non-empty value.

        Returns:
            The terms, and whether the filter is negated.  A negated filter
            compares every value's raw text with ``!=``.
        """
        values = [v for v in values if v is not None and str(v).strip()]
        if is_negated(values):
            raw = [strip_not(v) for v in values]
            return [self._compare(ComparisonOp.NE, v) for v in raw if str(v)], True
        return [self.term(str(v)) for v in values], False
