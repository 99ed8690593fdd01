"""
Result Status Classifier

Decides how complete an extracted office hours record is.

Two checks live here:
1. determine_result_status() looks at the four text fields (office time,
   office location, teaching time, teaching location) and rejects
   non-answers like "Not specified" or "TBD".
   - complete office hours (time AND location) -> SUCCESS
   - anything else that is valid               -> PARTIAL
   - nothing valid                              -> NOT_FOUND
   Complete teaching hours alone are only PARTIAL.
2. validate_result_status() re-checks built records by slot count only.

The classifier speaks ResultStatus. The UI records and the batch API use
their own vocabularies (OfficeHoursStatus, BatchStatus); translate with
to_office_hours_status() / to_batch_status() at the boundary.
"""

import logging
from enum import Enum
from typing import Any, List, Mapping, MutableMapping, Optional, Union

__all__ = [
    "ResultStatus",
    "OfficeHoursStatus",
    "BatchStatus",
    "get_field",
    "is_valid_value",
    "determine_result_status",
    "validate_result_status",
    "to_office_hours_status",
    "to_batch_status",
    "parse_status_label",
    "format_status",
]

logger = logging.getLogger('normalizer.result_status')

# Phrases that mean "no real answer". A value equal to or containing any
# of these is not valid.
UNACCEPTABLE_VALUES = [
    "not specified", "not found",
    "not explicitly stated", "not explicitly specified", "not clearly stated",
    "not provided", "not mentioned", "not stated", "not listed",
    "unclear", "unknown", "unavailable", "to be determined", "tbd",
    "not available", "contact for details", "contact instructor", "email for details",
]

# Hedges that turn an answer into a vague aside
HEDGING_MARKERS = ["but it states", "but states", "but mentioned"]

# Field names on extracted records, camelCase first (upstream JSON), then snake_case
OFFICE_TIME_FIELDS = ('times',)
OFFICE_LOCATION_FIELDS = ('location',)
TEACHING_TIME_FIELDS = ('teachingHours', 'teaching_hours')
TEACHING_LOCATION_FIELDS = ('teachingLocation', 'teaching_location')
OFFICE_SLOT_FIELDS = ('officeHours', 'office_hours')
TEACHING_SLOT_FIELDS = ('teachingHours', 'teaching_hours')


class ResultStatus(str, Enum):
    """Internal completeness status. VALIDATED and ERROR are set by callers only."""
    SUCCESS = "SUCCESS"
    PARTIAL = "PARTIAL"
    NOT_FOUND = "NOT_FOUND"
    VALIDATED = "VALIDATED"
    ERROR = "ERROR"


class OfficeHoursStatus(str, Enum):
    """Status vocabulary of the UI-facing office hours records."""
    VALIDATED = "VALIDATED"
    FOUND = "FOUND"
    PARTIAL_INFO_FOUND = "PARTIAL_INFO_FOUND"
    NOT_FOUND = "NOT_FOUND"
    ERROR = "ERROR"


class BatchStatus(str, Enum):
    """Status vocabulary of the batch API and CRM payloads."""
    SUCCESS = "SUCCESS"
    PARTIAL_SUCCESS = "PARTIAL_SUCCESS"
    NOT_FOUND = "NOT_FOUND"
    ERROR = "ERROR"


_TO_OFFICE_HOURS = {
    ResultStatus.SUCCESS: OfficeHoursStatus.FOUND,
    ResultStatus.PARTIAL: OfficeHoursStatus.PARTIAL_INFO_FOUND,
    ResultStatus.NOT_FOUND: OfficeHoursStatus.NOT_FOUND,
    ResultStatus.VALIDATED: OfficeHoursStatus.VALIDATED,
    ResultStatus.ERROR: OfficeHoursStatus.ERROR,
}

_TO_BATCH = {
    ResultStatus.SUCCESS: BatchStatus.SUCCESS,
    ResultStatus.PARTIAL: BatchStatus.PARTIAL_SUCCESS,
    ResultStatus.NOT_FOUND: BatchStatus.NOT_FOUND,
    ResultStatus.VALIDATED: BatchStatus.SUCCESS,
    ResultStatus.ERROR: BatchStatus.ERROR,
}

# Free-text labels from upstream extraction, lowercased with "_" as spaces
_STATUS_LABELS = {
    'validated': OfficeHoursStatus.VALIDATED,
    'found': OfficeHoursStatus.FOUND,
    'success': OfficeHoursStatus.FOUND,
    'partial info found': OfficeHoursStatus.PARTIAL_INFO_FOUND,
    'partial success': OfficeHoursStatus.PARTIAL_INFO_FOUND,
    'partial': OfficeHoursStatus.PARTIAL_INFO_FOUND,
    'not found': OfficeHoursStatus.NOT_FOUND,
    'error': OfficeHoursStatus.ERROR,
}


def get_field(record: Any, names: tuple) -> Any:
    """Read the first present field from a mapping or object; None if absent."""
    for name in names:
        if isinstance(record, Mapping):
            value = record.get(name)
        else:
            value = getattr(record, name, None)
        if value is not None:
            return value
    return None


def is_valid_value(value: Optional[str]) -> bool:
    """
    Check whether a text field holds a real answer.

    Args:
        value (str): Field text.
    Returns:
        bool: False for empty text, deny-listed phrases (exact or contained)
        and hedged asides like "... but it states ...".
    """
    if not value or not isinstance(value, str) or not value.strip():
        return False

    lowercase_value = value.strip().lower()

    if lowercase_value in UNACCEPTABLE_VALUES:
        return False
    if any(bad_value in lowercase_value for bad_value in UNACCEPTABLE_VALUES):
        return False
    if any(marker in lowercase_value for marker in HEDGING_MARKERS):
        return False

    return True


def determine_result_status(record: Any) -> ResultStatus:
    """
    Classify an extracted record by its text fields.

    Args:
        record: Mapping or object with times, location, teachingHours and
            teachingLocation. Missing fields count as empty.
    Returns:
        ResultStatus: SUCCESS, PARTIAL or NOT_FOUND.
    """
    has_office_hours = is_valid_value(get_field(record, OFFICE_TIME_FIELDS))
    has_office_location = is_valid_value(get_field(record, OFFICE_LOCATION_FIELDS))
    has_teaching_hours = is_valid_value(get_field(record, TEACHING_TIME_FIELDS))
    has_teaching_location = is_valid_value(get_field(record, TEACHING_LOCATION_FIELDS))

    # Office time and location together are enough, teaching info or not
    if has_office_hours and has_office_location:
        status = ResultStatus.SUCCESS
    elif has_office_hours or has_office_location or has_teaching_hours or has_teaching_location:
        status = ResultStatus.PARTIAL
    else:
        status = ResultStatus.NOT_FOUND

    logger.debug(
        f"Status {status.value}: office_hours={has_office_hours} office_location={has_office_location} "
        f"teaching_hours={has_teaching_hours} teaching_location={has_teaching_location}"
    )
    return status


def validate_result_status(results: List[Any]) -> List[Any]:
    """
    Re-check the status of built records from their slot lists.

    Both office and teaching slots -> SUCCESS, one of them missing ->
    PARTIAL_SUCCESS, both missing -> NOT_FOUND. Records are updated in place
    and get a BatchStatus member whether they are dicts or objects.

    Args:
        results (List[Any]): Dicts or objects with officeHours/teachingHours
            slot lists and a status field.
    Returns:
        List[Any]: The same list.
    """
    if not results:
        return []

    for result in results:
        has_office_slots = bool(get_field(result, OFFICE_SLOT_FIELDS))
        has_teaching_slots = bool(get_field(result, TEACHING_SLOT_FIELDS))

        if has_office_slots and has_teaching_slots:
            status = BatchStatus.SUCCESS
        elif has_office_slots or has_teaching_slots:
            status = BatchStatus.PARTIAL_SUCCESS
        else:
            status = BatchStatus.NOT_FOUND

        if isinstance(result, MutableMapping):
            result['status'] = status
        else:
            result.status = status

    return results


def to_office_hours_status(status: ResultStatus) -> OfficeHoursStatus:
    """Translate a classifier status into the UI vocabulary (SUCCESS -> FOUND)."""
    return _TO_OFFICE_HOURS[ResultStatus(status)]


def to_batch_status(status: ResultStatus) -> BatchStatus:
    """Translate a classifier status into the batch API vocabulary."""
    return _TO_BATCH[ResultStatus(status)]


def parse_status_label(label: Optional[str]) -> OfficeHoursStatus:
    """
    Read a status label written by upstream extraction.

    Accepts "validated", "found", "partial info found", "not found",
    "error" and the batch names in any case; anything else is ERROR.
    """
    if not label or not isinstance(label, str):
        return OfficeHoursStatus.ERROR
    key = ' '.join(label.replace('_', ' ').lower().split())
    return _STATUS_LABELS.get(key, OfficeHoursStatus.ERROR)


def format_status(status: Union[Enum, str, None]) -> str:
    """Display form of a status: "PARTIAL_INFO_FOUND" -> "Partial Info Found"."""
    if not status:
        return ''
    value = status.value if isinstance(status, Enum) else str(status)
    return ' '.join(word.capitalize() for word in value.lower().split('_'))

