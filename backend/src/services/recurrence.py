"""
Recurrence expansion for event series.

Turns one base event into the bounded list of occurrences that make up a
series. Every function here is pure: the occurrences returned are new,
unsaved Event instances and nothing is written to the database.

Occurrence caps:
- daily: 365
- weekly: 52
- monthly: 12
- yearly: 5
- anything else: 1
"""

import calendar
from datetime import datetime, timedelta
from typing import List

from backend.src.models import Event, Recurrence


OCCURRENCE_CAPS = {
    Recurrence.DAILY: 365,
    Recurrence.WEEKLY: 52,
    Recurrence.MONTHLY: 12,
    Recurrence.YEARLY: 5,
}


def occurrence_cap(recurrence: Recurrence) -> int:
    """
    Get the number of occurrences a full series of this kind contains.

    Args:
        recurrence: Recurrence kind

    Returns:
        Occurrence cap (1 for NONE)
    """
    return OCCURRENCE_CAPS.get(recurrence, 1)


def add_months(value: datetime, months: int) -> datetime:
    """
    Advance a timestamp by whole calendar months.

    The day is clamped to the last day of the target month, so
    2024-01-31 + 1 month is 2024-02-29.

    Args:
        value: Timestamp to advance
        months: Number of months (may be 0)

    Returns:
        Advanced timestamp with the same time of day
    """
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def advance(value: datetime, recurrence: Recurrence, steps: int) -> datetime:
    """
    Advance a timestamp by a number of recurrence periods.

    Args:
        value: Timestamp of the first occurrence
        recurrence: Recurrence kind defining the period
        steps: Number of periods

    Returns:
        Timestamp of occurrence number `steps`
    """
    if recurrence is Recurrence.DAILY:
        return value + timedelta(days=steps)
    if recurrence is Recurrence.WEEKLY:
        return value + timedelta(days=7 * steps)
    if recurrence is Recurrence.MONTHLY:
        return add_months(value, steps)
    if recurrence is Recurrence.YEARLY:
        return add_months(value, 12 * steps)
    return value


def generate_occurrences(base: Event, group_id: str, start_index: int = 0) -> List[Event]:
    """
    Generate the occurrences of a series from its base event.

    Occurrence i (for i in [start_index, cap)) has start/end advanced by i
    periods and copies every other content field from the base.

    Args:
        base: Event providing start, end, recurrence and shared fields
        group_id: Series identifier assigned to every occurrence
        start_index: 0 to include the base slot itself, 1 to skip it

    Returns:
        List of unsaved Event instances in chronological order
    """
    recurrence = base.recurrence_kind
    occurrences = []

    for i in range(start_index, occurrence_cap(recurrence)):
        occurrence = base.copy_content()
        occurrence.start = advance(base.start, recurrence, i)
        occurrence.end = advance(base.end, recurrence, i)
        occurrence.group_id = group_id
        occurrences.append(occurrence)

    return occurrences
