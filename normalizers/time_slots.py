"""
Time Slot Builder

Turns a (days, time string, location, comments) description into discrete
time slot records, and formats slots back into display text.

Two modes:
- Uniform: days are given and the time string has no "," or ";". The whole
  string is one range that applies to every day, giving a single slot
  tagged "Monday|Tuesday|...".
- Segmented: the time string is split on "," and ";". Segments that start
  with a day name ("Monday: 2:00 PM - 4:00 PM") get that day; other
  segments get the given days, or "Not specified". Segments that do not
  parse are dropped.

Example:
    convert_to_time_slots([], "Monday: 2-4pm; Friday: 1-3pm", "Room 101")
    -> [TimeSlot(Monday 2:00 PM - 4:00 PM), TimeSlot(Friday 1:00 PM - 3:00 PM)]
"""

import re
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional

from normalizers.day_normalizer import (
    ALL_DAYS,
    DAY_SEPARATOR,
    get_day_order,
    order_days_of_week,
)
from normalizers.time_parser import TimeRange, TimeStringParser

__all__ = [
    "TimeSlot",
    "TimeSlotBuilder",
    "convert_to_time_slots",
    "format_time_slot",
    "format_time_slots",
]

DEFAULT_LOCATION = "Not specified"
DEFAULT_COMMENTS = "Weekly office hours"
UNSPECIFIED_DAY = "Not specified"
NO_HOURS_MESSAGE = "No hours found"

SEGMENT_SEPARATORS = re.compile(r'[,;]')
DAY_PREFIX = re.compile(rf'^({"|".join(ALL_DAYS)})', re.IGNORECASE)
DAY_PREFIX_TRAILER = re.compile(r'^[:.\-\s]+')

# External field names, kept as-is for stored records and API consumers
FIELD_NAMES = {
    'start_hour': 'startHour',
    'start_minute': 'startMinute',
    'start_am_pm': 'startAmPm',
    'end_hour': 'endHour',
    'end_minute': 'endMinute',
    'end_am_pm': 'endAmPm',
    'day_of_week': 'dayOfWeek',
    'location': 'location',
    'comments': 'comments',
}


@dataclass(frozen=True)
class TimeSlot:
    """One office or teaching hours slot: a time range on a day at a location."""
    start_hour: str
    start_minute: str
    start_am_pm: str
    end_hour: str
    end_minute: str
    end_am_pm: str
    day_of_week: str
    location: str
    comments: Optional[str] = None

    @classmethod
    def from_range(cls, time_range: TimeRange, day_of_week: str, location: str,
                   comments: Optional[str] = None) -> 'TimeSlot':
        """Wrap a parsed time range with day and location information."""
        return cls(
            start_hour=time_range.start_hour,
            start_minute=time_range.start_minute,
            start_am_pm=time_range.start_am_pm,
            end_hour=time_range.end_hour,
            end_minute=time_range.end_minute,
            end_am_pm=time_range.end_am_pm,
            day_of_week=day_of_week,
            location=location,
            comments=comments,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'TimeSlot':
        """
        Read a slot from its external camelCase form.

        Args:
            data (Mapping[str, Any]): Dict with startHour, ..., dayOfWeek, location.
        Returns:
            TimeSlot: The slot. Missing fields become empty strings.
        """
        values = {attr: str(data.get(key) or '') for attr, key in FIELD_NAMES.items()}
        values['comments'] = data.get('comments')
        return cls(**values)

    @property
    def time_range(self) -> TimeRange:
        return TimeRange(self.start_hour, self.start_minute, self.start_am_pm,
                         self.end_hour, self.end_minute, self.end_am_pm)

    def to_dict(self) -> Dict[str, str]:
        """Serialize with the external camelCase field names."""
        data = {key: getattr(self, attr) for attr, key in FIELD_NAMES.items()}
        if self.comments is None:
            del data['comments']
        return data

    def display_string(self) -> str:
        """Compact "{day} {h}:{mm}{AMPM}-{h}:{mm}{AMPM}" form, parseable again."""
        return (f"{self.day_of_week} "
                f"{self.start_hour}:{self.start_minute}{self.start_am_pm}-"
                f"{self.end_hour}:{self.end_minute}{self.end_am_pm}")


class TimeSlotBuilder:
    """
    Builds ordered time slots from a day list and a time description.

    Args:
        parser (TimeStringParser): Parser used for every time range.
        default_location (str): Location used when none is given.
        default_comments (str): Comment used when none is given.
    """

    def __init__(self, parser: Optional[TimeStringParser] = None,
                 default_location: str = DEFAULT_LOCATION,
                 default_comments: str = DEFAULT_COMMENTS):
        self.parser = parser or TimeStringParser()
        self.default_location = default_location
        self.default_comments = default_comments
        self.logger = logging.getLogger('normalizer.time_slots')

    def build(self, days: Optional[Iterable[str]], time_string: Optional[str],
              location: Optional[str] = None, comments: Optional[str] = None) -> List[TimeSlot]:
        """
        Convert a time description into ordered slots.

        Args:
            days (Iterable[str]): Days the time applies to; may be empty or a
                single string such as "Monday, Wednesday".
            time_string (str): Free-text time description.
            location (str): Where the hours are held.
            comments (str): Note attached to every slot.
        Returns:
            List[TimeSlot]: Slots ordered Monday to Friday, unknown days last.
            Empty when nothing parses.
        """
        if not time_string or not isinstance(time_string, str) or not time_string.strip():
            return []

        try:
            ordered_days = order_days_of_week(days)
            location = location or self.default_location
            comments = comments or self.default_comments

            if ordered_days and not SEGMENT_SEPARATORS.search(time_string):
                return self._build_uniform(ordered_days, time_string, location, comments)
            return self._build_segmented(ordered_days, time_string, location, comments)
        except Exception as e:
            self.logger.warning(f"Error building time slots from {time_string!r}: {e}")
            return []

    def _build_uniform(self, ordered_days: List[str], time_string: str,
                       location: str, comments: str) -> List[TimeSlot]:
        """One range for all days; nothing at all if it does not parse."""
        result = self.parser.parse(time_string)
        if not result.success:
            self.logger.debug(f"No time range in {time_string!r}")
            return []
        day_tag = DAY_SEPARATOR.join(ordered_days)
        return [TimeSlot.from_range(result.time_slot, day_tag, location, comments)]

    def _build_segmented(self, ordered_days: List[str], time_string: str,
                         location: str, comments: str) -> List[TimeSlot]:
        """One slot per parseable segment, sorted by first day."""
        segments = [s.strip() for s in SEGMENT_SEPARATORS.split(time_string)]
        fallback_day = DAY_SEPARATOR.join(ordered_days) if ordered_days else UNSPECIFIED_DAY

        slots = []
        for segment in segments:
            if not segment:
                continue

            day_match = DAY_PREFIX.match(segment)
            if day_match:
                day = day_match.group(1)
                remainder = DAY_PREFIX_TRAILER.sub('', segment[len(day):]).strip()
            else:
                day = fallback_day
                remainder = segment

            result = self.parser.parse(remainder)
            if not result.success:
                self.logger.debug(f"Dropping unparseable segment {segment!r}")
                continue
            slots.append(TimeSlot.from_range(result.time_slot, day, location, comments))

        # sorted() is stable; equal days keep segment order
        return sorted(slots, key=lambda slot: get_day_order(slot.day_of_week))


_BUILDER = TimeSlotBuilder()


def convert_to_time_slots(days: Optional[Iterable[str]], time_string: Optional[str],
                          location: Optional[str] = None,
                          comments: Optional[str] = None) -> List[TimeSlot]:
    """Convert days and a free-text time description into ordered time slots."""
    return _BUILDER.build(days, time_string, location, comments)


def format_time_slot(slot: TimeSlot) -> str:
    """Render one slot's range as "2:00 PM - 4:00 PM"."""
    return (f"{slot.start_hour}:{slot.start_minute} {slot.start_am_pm} - "
            f"{slot.end_hour}:{slot.end_minute} {slot.end_am_pm}")


def format_time_slots(slots: Optional[Iterable[TimeSlot]]) -> str:
    """
    Render slots one line per day, e.g.
    "Monday: 2:00 PM - 4:00 PM, 5:00 PM - 6:00 PM (Location: Room 101)".

    Days appear in the order they first occur; the location shown is the
    first slot's for that day.

    Args:
        slots (Iterable[TimeSlot]): Slots to render.
    Returns:
        str: Newline-separated lines, or "No hours found" for no slots.
    """
    slots = list(slots or [])
    if not slots:
        return NO_HOURS_MESSAGE

    grouped: Dict[str, List[TimeSlot]] = {}
    for slot in slots:
        grouped.setdefault(slot.day_of_week, []).append(slot)

    lines = []
    for day, day_slots in grouped.items():
        ranges = ", ".join(format_time_slot(s) for s in day_slots)
        lines.append(f"{day}: {ranges} (Location: {day_slots[0].location})")
    return "\n".join(lines)
