"""
Contact Hour Records

Packages one extracted office hours record for a contact into the batch
payload: office slots, teaching slots and a batch status.

Example:
    record = {"days": ["Monday"], "times": "2-4pm", "location": "Room 101"}
    build_contact_hour_record(record, "003A000001").to_dict()
    -> {"contactId": "003A000001", "status": "SUCCESS", "source": "web_search",
        "officeHours": [...], "teachingHours": []}
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from normalizers.result_status import (
    BatchStatus,
    determine_result_status,
    get_field,
    to_batch_status,
)
from normalizers.time_slots import TimeSlot, TimeSlotBuilder

__all__ = [
    "ContactHourRecord",
    "build_contact_hour_record",
    "summarize_statuses",
]

logger = logging.getLogger('normalizer.contact_hours')

DEFAULT_SOURCE = "web_search"

DAYS_FIELDS = ('days',)
TIMES_FIELDS = ('times',)
LOCATION_FIELDS = ('location',)
COMMENTS_FIELDS = ('comments',)
TEACHING_TIME_FIELDS = ('teachingHours', 'teaching_hours')
TEACHING_LOCATION_FIELDS = ('teachingLocation', 'teaching_location')
STATUS_FIELDS = ('status',)
SOURCE_FIELDS = ('validatedBy', 'validated_by')


@dataclass
class ContactHourRecord:
    """Office and teaching slots for one contact, ready to be sent upstream."""
    contact_id: str
    status: BatchStatus
    source: str = DEFAULT_SOURCE
    office_hours: List[TimeSlot] = field(default_factory=list)
    teaching_hours: List[TimeSlot] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'contactId': self.contact_id,
            'status': BatchStatus(self.status).value,
            'source': self.source,
            'officeHours': [slot.to_dict() for slot in self.office_hours],
            'teachingHours': [slot.to_dict() for slot in self.teaching_hours],
        }

    def to_contact_hour_request(self) -> Dict[str, str]:
        """CRM insert payload: the record as a JSON string plus the contact id."""
        return {
            'Result_JSON__c': json.dumps(self.to_dict()),
            'Contact__c': self.contact_id,
        }


def _is_error_label(label: Any) -> bool:
    return isinstance(label, str) and label.strip().upper() == BatchStatus.ERROR.value


def build_contact_hour_record(record: Any, contact_id: str,
                              source: Optional[str] = None,
                              builder: Optional[TimeSlotBuilder] = None) -> ContactHourRecord:
    """
    Build the batch record for one contact.

    Office slots come from (days, times, location, comments); teaching slots
    from (teachingHours, teachingLocation) with no day list, so each segment
    needs its own day prefix. The status comes from the text classifier,
    except that an upstream "ERROR" status is kept.

    Args:
        record: Mapping or object with the extracted fields.
        contact_id (str): Contact the hours belong to.
        source (str): Where the record came from; defaults to the record's
            validatedBy, then "web_search".
        builder (TimeSlotBuilder): Slot builder; a default one if omitted.
    Returns:
        ContactHourRecord: The record. Any failure gives an ERROR record
        with no slots.
    """
    builder = builder or TimeSlotBuilder()
    source = source or get_field(record, SOURCE_FIELDS) or DEFAULT_SOURCE

    try:
        office_hours = builder.build(
            get_field(record, DAYS_FIELDS) or [],
            get_field(record, TIMES_FIELDS),
            get_field(record, LOCATION_FIELDS),
            get_field(record, COMMENTS_FIELDS),
        )
        teaching_hours = builder.build(
            [],
            get_field(record, TEACHING_TIME_FIELDS),
            get_field(record, TEACHING_LOCATION_FIELDS),
        )

        if _is_error_label(get_field(record, STATUS_FIELDS)):
            status = BatchStatus.ERROR
        else:
            status = to_batch_status(determine_result_status(record))

        logger.info(f"Contact {contact_id}: {status.value} "
                    f"({len(office_hours)} office, {len(teaching_hours)} teaching slots)")
        return ContactHourRecord(contact_id, status, source, office_hours, teaching_hours)
    except Exception as e:
        logger.warning(f"Error building contact hour record for {contact_id}: {e}")
        return ContactHourRecord(contact_id, BatchStatus.ERROR, source)


def summarize_statuses(results: Optional[Iterable[Any]]) -> Dict[str, int]:
    """
    Count records per batch status.

    Args:
        results (Iterable): ContactHourRecords or dicts with a "status" field.
    Returns:
        Dict[str, int]: Every BatchStatus value mapped to its count.
        Unknown statuses count as ERROR.
    """
    counts = {status.value: 0 for status in BatchStatus}
    for result in results or []:
        status = get_field(result, STATUS_FIELDS)
        try:
            key = BatchStatus(status).value
        except ValueError:
            key = BatchStatus.ERROR.value
        counts[key] += 1
    return counts
