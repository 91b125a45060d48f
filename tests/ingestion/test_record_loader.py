"""
Record Loader Tests

Every input item must end up loaded, duplicate, or malformed - never silently lost.
"""

import json
import pytest
from datetime import date, datetime, timezone

from incident_timeline.contracts.base import ErrorCode, LayoutError, MalformedRecord
from incident_timeline.contracts.records import IncidentRecord
from incident_timeline.ingestion import load_records, load_records_file


def payload_item(**overrides):
    item = {
        "id": "evt_1",
        "title": "Broken elevator",
        "description": "Out of service for a week",
        "eventDate": "2025-10-08",
        "category": "maintenance",
        "createdAt": "2025-10-09T14:30:00Z",
        "attachments": [
            {
                "id": "att_1",
                "fileName": "notice.pdf",
                "fileUrl": "https://example.test/notice.pdf",
                "fileType": "document",
                "isPiiRedacted": False,
            }
        ],
    }
    item.update(overrides)
    return item


class TestLoadRecords:

    def test_valid_item(self):
        report = load_records([payload_item()])

        assert report.is_clean
        record = report.records[0]
        assert record.record_id == "evt_1"
        assert record.event_day == date(2025, 10, 8)
        assert record.created_at == datetime(2025, 10, 9, 14, 30, tzinfo=timezone.utc)
        assert record.attachments[0].file_name == "notice.pdf"
        assert record.attachments[0].is_image is False

    def test_datetime_event_date(self):
        report = load_records([payload_item(eventDate="2025-10-08T23:15:00Z")])

        assert report.records[0].event_day == date(2025, 10, 8)

    def test_missing_optional_fields(self):
        report = load_records([{"id": "bare", "eventDate": "2025-10-08"}])

        record = report.records[0]
        assert record.category == "other"
        assert record.attachments == ()
        assert record.created_at is None

    def test_non_array_payload(self):
        report = load_records({"error": "unauthorized"})

        assert report.records == []
        assert report.processed_count == 0
        assert report.errors[0].code == ErrorCode.NON_ARRAY_PAYLOAD

    @pytest.mark.parametrize("bad", [
        {"id": "x"},
        {"id": "x", "eventDate": "not-a-date"},
        {"id": "", "eventDate": "2025-10-08"},
        "just a string",
    ])
    def test_malformed_items_are_reported(self, bad):
        report = load_records([payload_item(), bad])

        assert report.success_count == 1
        assert len(report.malformed_items) == 1
        assert report.malformed_items[0].index == 1

    def test_duplicate_ids(self):
        report = load_records([payload_item(), payload_item(title="again")])

        assert report.success_count == 1
        assert report.records[0].title == "Broken elevator"
        assert [d.index for d in report.duplicate_items] == [1]

    def test_every_item_is_accounted_for(self):
        items = [payload_item(), payload_item(), {"id": "bad"}, payload_item(id="evt_2")]
        report = load_records(items)

        accounted = report.success_count + len(report.duplicate_items) + len(report.malformed_items)
        assert accounted == report.processed_count == 4
        assert report.to_dict()["malformed_count"] == 1


class TestLoadRecordsFile:

    def test_reads_json_file(self, tmp_path):
        path = tmp_path / "records.json"
        path.write_text(json.dumps([payload_item()]), encoding="utf-8")

        assert load_records_file(path).success_count == 1

    def test_missing_file(self, tmp_path):
        with pytest.raises(LayoutError) as excinfo:
            load_records_file(tmp_path / "missing.json")

        assert excinfo.value.code == ErrorCode.UNREADABLE_SOURCE

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("[{", encoding="utf-8")

        with pytest.raises(LayoutError):
            load_records_file(path)


class TestRecordContract:

    def test_empty_id_is_malformed(self):
        with pytest.raises(LayoutError) as excinfo:
            IncidentRecord(record_id="", event_date=date(2025, 10, 8))

        assert excinfo.value.code == ErrorCode.MALFORMED_RECORD

    def test_non_date_event_is_malformed(self):
        with pytest.raises(MalformedRecord) as excinfo:
            IncidentRecord(record_id="a", event_date="2025-10-08")

        assert excinfo.value.code == ErrorCode.MALFORMED_RECORD
        assert ("record_id", "a") in excinfo.value.error.context
