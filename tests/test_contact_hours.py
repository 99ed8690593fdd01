"""
Tests for contact hour records and batch status summaries.
"""

import json
import sys
import unittest
from pathlib import Path
from unittest import mock

# Make repo root importable when running this file directly
REPO_ROOT = Path(__file__).resolve().parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from normalizers.contact_hours import (
    ContactHourRecord,
    build_contact_hour_record,
    summarize_statuses,
)
from normalizers.result_status import BatchStatus
from normalizers.time_slots import TimeSlotBuilder

CONTACT_ID = "003A000001"


class TestBuildContactHourRecord(unittest.TestCase):

    def test_office_and_teaching_hours(self):
        extracted = {
            'days': ["Wednesday", "Monday"],
            'times': "2-4pm",
            'location': "Room 101",
            'teachingHours': "Tuesday: 9-10:15am; Thursday: 9-10:15am",
            'teachingLocation': "Hall 2",
        }
        result = build_contact_hour_record(extracted, CONTACT_ID)
        self.assertEqual(result.status, BatchStatus.SUCCESS)
        self.assertEqual(result.source, "web_search")
        self.assertEqual([s.day_of_week for s in result.office_hours], ["Monday|Wednesday"])
        self.assertEqual([s.day_of_week for s in result.teaching_hours], ["Tuesday", "Thursday"])
        self.assertEqual(result.teaching_hours[0].location, "Hall 2")

    def test_teaching_only_is_partial(self):
        extracted = {
            'times': "Not specified",
            'location': "Not specified",
            'teachingHours': "Friday: 1-3pm",
            'teachingLocation': "Lab 4",
        }
        result = build_contact_hour_record(extracted, CONTACT_ID)
        self.assertEqual(result.status, BatchStatus.PARTIAL_SUCCESS)
        self.assertEqual(result.office_hours, [])
        self.assertEqual(len(result.teaching_hours), 1)

    def test_nothing_found(self):
        result = build_contact_hour_record({'times': "TBD"}, CONTACT_ID)
        self.assertEqual(result.status, BatchStatus.NOT_FOUND)
        self.assertEqual((result.office_hours, result.teaching_hours), ([], []))

    def test_upstream_error_is_kept(self):
        extracted = {'times': "2-4pm", 'location': "Room 101", 'status': "error"}
        result = build_contact_hour_record(extracted, CONTACT_ID)
        self.assertEqual(result.status, BatchStatus.ERROR)
        self.assertEqual(len(result.office_hours), 1)

    def test_day_list_string(self):
        extracted = {'days': "Wednesday, Monday", 'times': "2-4pm", 'location': "Room 101"}
        result = build_contact_hour_record(extracted, CONTACT_ID)
        self.assertEqual([s.day_of_week for s in result.office_hours], ["Monday|Wednesday"])

    def test_source(self):
        extracted = {'times': "2-4pm", 'location': "Room 101", 'validatedBy': "email"}
        self.assertEqual(build_contact_hour_record(extracted, CONTACT_ID).source, "email")
        self.assertEqual(build_contact_hour_record(extracted, CONTACT_ID, source="upload").source, "upload")

    def test_builder_failure_gives_error_record(self):
        builder = TimeSlotBuilder()
        with mock.patch.object(builder, 'build', side_effect=RuntimeError("boom")):
            with self.assertLogs('normalizer.contact_hours', level='WARNING'):
                result = build_contact_hour_record({'times': "2-4pm"}, CONTACT_ID, builder=builder)
        self.assertEqual(result.status, BatchStatus.ERROR)
        self.assertEqual((result.office_hours, result.teaching_hours), ([], []))


class TestContactHourPayload(unittest.TestCase):

    def setUp(self):
        self.result = build_contact_hour_record(
            {'days': ["Monday"], 'times': "2-4pm", 'location': "Room 101"}, CONTACT_ID)

    def test_to_dict(self):
        data = self.result.to_dict()
        self.assertEqual(data['contactId'], CONTACT_ID)
        self.assertEqual(data['status'], "SUCCESS")
        self.assertEqual(data['source'], "web_search")
        self.assertEqual(data['teachingHours'], [])
        self.assertEqual(data['officeHours'][0]['dayOfWeek'], "Monday")
        self.assertEqual(data['officeHours'][0]['startHour'], "2")

    def test_contact_hour_request(self):
        request = self.result.to_contact_hour_request()
        self.assertEqual(request['Contact__c'], CONTACT_ID)
        self.assertEqual(json.loads(request['Result_JSON__c']), self.result.to_dict())


class TestSummarizeStatuses(unittest.TestCase):

    def test_counts_every_status(self):
        results = [
            ContactHourRecord("1", BatchStatus.SUCCESS),
            ContactHourRecord("2", BatchStatus.SUCCESS),
            ContactHourRecord("3", BatchStatus.NOT_FOUND),
            {'status': "PARTIAL_SUCCESS"},
            {'status': "bogus"},
        ]
        self.assertEqual(summarize_statuses(results), {
            "SUCCESS": 2,
            "PARTIAL_SUCCESS": 1,
            "NOT_FOUND": 1,
            "ERROR": 1,
        })

    def test_empty(self):
        self.assertEqual(summarize_statuses(None),
                         {"SUCCESS": 0, "PARTIAL_SUCCESS": 0, "NOT_FOUND": 0, "ERROR": 0})


if __name__ == "__main__":
    unittest.main()
