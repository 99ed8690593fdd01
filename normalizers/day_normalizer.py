"""
Day Normalizer

Orders day-of-week names Monday through Friday and drops weekend days.
Names are matched case-insensitively but returned exactly as given.
Anything that is not a weekday name is kept and sorted after the weekdays,
in the order it came in.
"""

import re
import logging
from typing import Iterable, List, Optional

logger = logging.getLogger('normalizer.day_normalizer')

# Canonical weekday order (Monday = 0)
WEEKDAY_ORDER = {
    'monday': 0,
    'tuesday': 1,
    'wednesday': 2,
    'thursday': 3,
    'friday': 4,
}

WEEKEND_DAYS = {'saturday', 'sunday'}

ALL_DAYS = ('Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday')

# Sort index for anything that is not a weekday name
UNKNOWN_DAY_INDEX = 999

# Separator used when one time range covers several days ("Monday|Wednesday")
DAY_SEPARATOR = '|'

# Splits a day list that arrives as one string ("Monday, Wednesday")
DAY_LIST_SEPARATORS = re.compile(r'[,;/&\s]+')


def get_day_index(day: Optional[str]) -> int:
    """Return the weekday index of a single day name, or UNKNOWN_DAY_INDEX."""
    if not day:
        return UNKNOWN_DAY_INDEX
    return WEEKDAY_ORDER.get(day.strip().lower(), UNKNOWN_DAY_INDEX)


def get_day_order(day_of_week: Optional[str]) -> int:
    """
    Sort key for a slot's day tag.

    Combined tags like "Monday|Wednesday" sort by their first day;
    "Not specified" and other unknown tags sort last.

    Args:
        day_of_week (str): Day tag from a time slot.
    Returns:
        int: 0-4 for Monday-Friday, UNKNOWN_DAY_INDEX otherwise.
    """
    if not day_of_week:
        return UNKNOWN_DAY_INDEX
    return get_day_index(day_of_week.split(DAY_SEPARATOR)[0])


def order_days_of_week(days: Optional[Iterable[str]]) -> List[str]:
    """
    Order day names Monday through Friday, dropping Saturday and Sunday.

    Args:
        days (Iterable[str]): Day names in any case and order. None is allowed.
            A single string is split on commas, slashes and whitespace.
    Returns:
        List[str]: Weekdays in order with original casing, then unknown names
        in their input order.
    """
    if not days:
        return []
    if isinstance(days, str):
        days = [day for day in DAY_LIST_SEPARATORS.split(days) if day]
    else:
        days = list(days)

    weekdays_only = [
        day for day in days
        if isinstance(day, str) and day.strip().lower() not in WEEKEND_DAYS
    ]

    # sorted() is stable, so unknown names keep their relative order
    ordered = sorted(weekdays_only, key=get_day_index)
    logger.debug(f"Ordered days {days} -> {ordered}")
    return ordered
