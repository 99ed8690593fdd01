"""
Time String Parser
==================
Parses one free-text time expression into a canonical start/end time
(hour, minute, AM/PM).

How it works:
1. Strips filler words ("office hours", "by appointment", "or", "and", ...)
2. Tries 24-hour/military ranges ("13:00-15:00", "1400-1600"). These only
   count as 24-hour when one of the hours is above 12.
3. Tries the 12-hour grammars in priority order (spaced, full, compact,
   shared meridiem). The first one that matches wins.
4. Falls back to an informal scan that collects loose times like
   "1 and 3" or "9am to 5 in the evening" and guesses the missing AM/PM.

Example:
    Input:  "Office hours 1-3 PM"
    Output: ParseResult(success=True, time_slot=TimeRange(1:00 PM - 3:00 PM))

Hours never carry a leading zero ("01:00 PM" -> "1") and minutes are always
two digits. Nothing here raises; a failed parse is ParseResult(success=False).
"""

import re
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

__all__ = [
    "TimeRange",
    "ParseResult",
    "TimeStringParser",
    "parse_time_string",
]

AM = "AM"
PM = "PM"

# Words removed before any grammar is tried
FILLER_PATTERN = r'\b(?:office\s+hours|hours|by\s+appointment|or|and)\b'

# Range separators: hyphen, en-dash, em-dash, "to"
SEPARATOR = r'\s*(?:-|–|—|to)\s*'

# Meridiem tokens: am, pm, a.m., P.M. (only the leading letter is kept)
MERIDIEM = r'(?P<{name}>[ap])\.?m\.?'

# Informal scan: bare times without a meridiem before this hour are PM
# (1-7 o'clock is assumed to be afternoon), 12 is noon.
DEFAULT_PM_BEFORE_HOUR = 8


@dataclass(frozen=True)
class TimeRange:
    """
    A start and end time of day in 12-hour form.

    Hours are strings without leading zeros ("1".."12"), minutes are
    two-digit strings ("00".."59") and meridiems are "AM" or "PM".
    No ordering is enforced between start and end.
    """
    start_hour: str
    start_minute: str
    start_am_pm: str
    end_hour: str
    end_minute: str
    end_am_pm: str

    def to_dict(self) -> Dict[str, str]:
        """Serialize with the external camelCase field names."""
        return {
            'startHour': self.start_hour,
            'startMinute': self.start_minute,
            'startAmPm': self.start_am_pm,
            'endHour': self.end_hour,
            'endMinute': self.end_minute,
            'endAmPm': self.end_am_pm,
        }


@dataclass(frozen=True)
class ParseResult:
    """
    Result of a parse attempt. time_slot is set if and only if success is True.
    """
    success: bool = False
    time_slot: Optional[TimeRange] = None

    def __post_init__(self):
        """Reject half-populated results."""
        if self.success != (self.time_slot is not None):
            raise ValueError("time_slot must be present exactly when success is True")

    def to_dict(self) -> Dict[str, Any]:
        if not self.success:
            return {'success': False}
        return {'success': True, 'timeSlot': self.time_slot.to_dict()}


def _time(prefix: str, require_minutes: bool = False) -> str:
    """Build an H[:MM] fragment with named groups <prefix>_hour / <prefix>_minute."""
    minutes = rf':(?P<{prefix}_minute>\d{{2}})'
    if not require_minutes:
        minutes = rf'(?:{minutes})?'
    return rf'(?P<{prefix}_hour>\d{{1,2}}){minutes}'


def _meridiem(name: str) -> str:
    return MERIDIEM.format(name=name)


class TimeStringParser:
    """
    Parser for free-text time ranges.

    The parser holds only compiled patterns, so one instance can be shared
    freely between callers and threads.
    """

    def __init__(self):
        """Compile the filler, 24-hour, 12-hour and informal patterns."""
        self.logger = logging.getLogger('normalizer.time_parser')
        self.filler_pattern = re.compile(FILLER_PATTERN, re.IGNORECASE)
        self.military_pattern = re.compile(
            # "13:00-15:00", "1400-1600", "9 to 17"
            r'(?:^|\D)(\d{1,2})(?:(\d{2})|:(\d{2}))?'
            + SEPARATOR +
            r'(\d{1,2})(?:(\d{2})|:(\d{2}))?(?:$|\D)',
            re.IGNORECASE
        )
        self.grammars = self._init_grammars()
        self.informal_pattern = re.compile(
            r'(\d{1,2})(?::(\d{2}))?(?:\s*([ap])\.?m\.?)?',
            re.IGNORECASE
        )

    def _init_grammars(self) -> List[Tuple[str, re.Pattern]]:
        """
        Initialize the 12-hour grammars in priority order.

        Every grammar exposes the named groups start_hour, start_minute,
        end_hour, end_minute and either start_meridiem/end_meridiem or a
        single shared_meridiem.

        Returns:
            List[Tuple[str, re.Pattern]]: (grammar name, compiled pattern) pairs.
        """
        grammars = [
            # a. "1:00 PM - 2:00 PM", "9 A.M. to 11:30 A.M.", space before each meridiem
            ('spaced',
             _time('start') + r'\s+' + _meridiem('start_meridiem')
             + SEPARATOR +
             _time('end') + r'\s+' + _meridiem('end_meridiem')),

            # b. "9:30am-11:00am", minutes required on both sides
            ('full',
             _time('start', require_minutes=True) + r'\s*' + _meridiem('start_meridiem')
             + SEPARATOR +
             _time('end', require_minutes=True) + r'\s*' + _meridiem('end_meridiem')),

            # c. "9am-5pm", meridiem glued to the digits
            ('compact',
             _time('start') + _meridiem('start_meridiem')
             + SEPARATOR +
             _time('end') + _meridiem('end_meridiem')),

            # d. "1-3 PM", one meridiem shared by both ends
            ('shared_meridiem',
             _time('start') + SEPARATOR + _time('end') + r'\s*' + _meridiem('shared_meridiem')),
        ]
        return [(name, re.compile(pattern, re.IGNORECASE)) for name, pattern in grammars]

    def parse(self, text: Optional[str]) -> ParseResult:
        """
        Parse a time range out of free text.

        Args:
            text (str): Time description, possibly surrounded by other prose.
        Returns:
            ParseResult: success with the parsed range, or success=False.
        """
        if not text or not isinstance(text, str) or not text.strip():
            return ParseResult()

        try:
            cleaned = self.filler_pattern.sub('', text).strip()

            time_range = self._match_military(cleaned)
            if time_range:
                self.logger.debug(f"24-hour range found in {text!r}")
                return ParseResult(success=True, time_slot=time_range)

            for name, pattern in self.grammars:
                match = pattern.search(cleaned)
                if not match:
                    continue
                time_range = self._range_from_grammar(match)
                if time_range:
                    self.logger.debug(f"Grammar '{name}' matched {text!r}")
                    return ParseResult(success=True, time_slot=time_range)

            time_range = self._scan_informal(cleaned)
            if time_range:
                self.logger.debug(f"Informal times found in {text!r}")
                return ParseResult(success=True, time_slot=time_range)

            return ParseResult()
        except Exception as e:
            self.logger.warning(f"Error parsing time string {text!r}: {e}")
            return ParseResult()

    def _match_military(self, text: str) -> Optional[TimeRange]:
        """
        Match a 24-hour range. Only used when either hour is above 12.

        Args:
            text (str): Cleaned time text.
        Returns:
            Optional[TimeRange]: Converted range, or None if not 24-hour.
        """
        match = self.military_pattern.search(text)
        if not match:
            return None

        start_hour = int(match.group(1))
        start_minute = match.group(2) or match.group(3) or "00"
        end_hour = int(match.group(4))
        end_minute = match.group(5) or match.group(6) or "00"

        if start_hour <= 12 and end_hour <= 12:
            return None
        if start_hour > 23 or end_hour > 23 or int(start_minute) > 59 or int(end_minute) > 59:
            return None

        start_12, start_am_pm = _from_24_hour(start_hour)
        end_12, end_am_pm = _from_24_hour(end_hour)
        return TimeRange(start_12, start_minute, start_am_pm, end_12, end_minute, end_am_pm)

    def _range_from_grammar(self, match: re.Match) -> Optional[TimeRange]:
        """
        Build a range from a 12-hour grammar match.

        Args:
            match (re.Match): Match from one of the 12-hour grammars.
        Returns:
            Optional[TimeRange]: The range, or None if the digits are out of range.
        """
        groups = match.groupdict()
        shared = groups.get('shared_meridiem')
        start_meridiem = shared or groups['start_meridiem']
        end_meridiem = shared or groups['end_meridiem']

        start = _twelve_hour(groups['start_hour'], groups['start_minute'], start_meridiem)
        end = _twelve_hour(groups['end_hour'], groups['end_minute'], end_meridiem)
        if start is None or end is None:
            return None
        return TimeRange(*start, *end)

    def _scan_informal(self, text: str) -> Optional[TimeRange]:
        """
        Collect loose times anywhere in the text and use the first two.

        Times without AM/PM are guessed: 1-7 and 12 are PM, 8-11 are AM.
        Hours 13-23 without AM/PM are read as 24-hour times.

        Args:
            text (str): Cleaned time text.
        Returns:
            Optional[TimeRange]: Range built from the first two times, or None.
        """
        times = []
        for match in self.informal_pattern.finditer(text):
            hour = int(match.group(1))
            minute = match.group(2) or "00"
            meridiem = match.group(3)

            if int(minute) > 59:
                continue
            if meridiem:
                parsed = _twelve_hour(match.group(1), minute, meridiem)
            elif hour > 23:
                parsed = None
            elif hour > 12 or hour == 0:
                hour_12, am_pm = _from_24_hour(hour)
                parsed = (hour_12, minute, am_pm)
            else:
                default = PM if hour < DEFAULT_PM_BEFORE_HOUR or hour == 12 else AM
                parsed = (str(hour), minute, default)

            if parsed:
                times.append(parsed)
            if len(times) == 2:
                return TimeRange(*times[0], *times[1])

        return None


def _from_24_hour(hour: int) -> Tuple[str, str]:
    """Convert a 0-23 hour into a (12-hour string, meridiem) pair."""
    hour_12 = hour % 12 or 12
    return str(hour_12), AM if hour < 12 else PM


def _twelve_hour(hour: str, minute: Optional[str], meridiem: str) -> Optional[Tuple[str, str, str]]:
    """
    Normalize one 12-hour time.

    Leading zeros are dropped, an hour of 0 becomes 12 and missing minutes
    become "00". Returns None when the hour is above 12 or minutes above 59.
    """
    hour_value = int(hour)
    minute = minute or "00"
    if hour_value > 12 or int(minute) > 59:
        return None
    am_pm = AM if meridiem.lower().startswith('a') else PM
    return str(hour_value or 12), minute, am_pm


_PARSER = TimeStringParser()


def parse_time_string(text: Optional[str]) -> ParseResult:
    """
    Parse a free-text time range with the shared parser.

    Args:
        text (str): Time description such as "2-4pm" or "13:00-15:00".
    Returns:
        ParseResult: Parsed range, or ParseResult(success=False).
    """
    return _PARSER.parse(text)
