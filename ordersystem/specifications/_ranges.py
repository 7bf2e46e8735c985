"""Bound handling shared by the range predicates."""

from sqlalchemy import func


def open_range(column, start, end):
    """Dates: BETWEEN when both bounds are given, strict comparison otherwise."""
    if start is None and end is None:
        return None
    if start is None:
        return column < end
    if end is None:
        return column > start
    return column.between(start, end)


def closed_range(column, low, high):
    """Amounts: BETWEEN when both bounds are given, inclusive comparison otherwise."""
    if low is None and high is None:
        return None
    if low is None:
        return column <= high
    if high is None:
        return column >= low
    return column.between(low, high)


def contains_ignore_case(column, text):
    if text is None:
        return None
    return func.lower(column).like(f"%{text.lower()}%")
