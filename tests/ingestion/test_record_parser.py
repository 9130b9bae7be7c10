"""
Record Parser Tests

Every record is either parsed or reported; malformed records never abort
the batch.
"""

import pytest
from datetime import datetime, timezone

from backend.contracts.base import ErrorCode
from ingestion.contracts import RawEventRecord, ScheduledEvent
from ingestion.parser import RecordParser, parse_call_time
from tests.fixtures import MON_0900, WED_1200, epoch_ms, wire_record


class TestParseCallTime:

    def test_digit_string(self):
        assert parse_call_time(str(epoch_ms(MON_0900))) == MON_0900

    def test_json_integer(self):
        assert parse_call_time(epoch_ms(MON_0900)) == MON_0900

    def test_surrounding_whitespace_is_allowed(self):
        assert parse_call_time(f"  {epoch_ms(MON_0900)}\n") == MON_0900

    def test_epoch_zero(self):
        assert parse_call_time("0") == datetime(1970, 1, 1, tzinfo=timezone.utc)

    def test_millisecond_precision_is_kept(self):
        assert parse_call_time("1500").microsecond == 500000

    @pytest.mark.parametrize("raw", [
        "",
        "not a date",
        "2026-10-12T09:00:00Z",
        "1760000000000abc",
        "-5",
        "12.5",
        12.5,
        True,
        None,
        [],
        {"ms": 1},
    ])
    def test_rejects_anything_but_whole_milliseconds(self, raw):
        with pytest.raises(ValueError):
            parse_call_time(raw)

    def test_out_of_range_is_a_value_error(self):
        with pytest.raises(ValueError):
            parse_call_time("9" * 25)


class TestRecordParser:

    @pytest.fixture
    def parser(self):
        return RecordParser()

    def test_valid_record_becomes_scheduled_event(self, parser):
        record = RawEventRecord.from_wire(wire_record(7, "Concert", MON_0900))
        report = parser.parse_batch([record], WED_1200)

        assert report.events == [ScheduledEvent(event_id=7, name="Concert", instant=MON_0900)]
        assert report.malformed_count == 0

    def test_unparseable_timestamp_is_reported_not_raised(self, parser):
        good = RawEventRecord.from_wire(wire_record(1, "Rehearsal", MON_0900))
        bad = RawEventRecord(event_id=2, name="Broken", call_time="yesterday")
        report = parser.parse_batch([good, bad], WED_1200)

        assert report.processed_count == 2
        assert [e.event_id for e in report.events] == [1]
        assert report.malformed_count == 1
        malformed = report.malformed_items[0]
        assert malformed.event_id == 2
        assert malformed.error.code == ErrorCode.INVALID_TIMESTAMP
        assert malformed.error.context_value('event_id') == "2"
        assert malformed.error.timestamp == WED_1200

    def test_missing_id_or_call_time_is_missing_field(self, parser):
        records = [
            RawEventRecord.from_wire({'name': "No id", 'callTime': "0"}),
            RawEventRecord.from_wire({'id': 3, 'name': "No time"}),
            RawEventRecord.from_wire("not an object"),
        ]
        report = parser.parse_batch(records, WED_1200)

        assert report.events == []
        assert [m.error.code for m in report.malformed_items] == [ErrorCode.MISSING_FIELD] * 3

    def test_missing_name_becomes_empty_label(self, parser):
        record = RawEventRecord.from_wire({'id': 4, 'callTime': "0"})
        assert parser.parse_batch([record], WED_1200).events[0].name == ""

    def test_input_order_is_preserved(self, parser):
        records = [
            RawEventRecord.from_wire(wire_record(1, "Later", WED_1200)),
            RawEventRecord.from_wire(wire_record(2, "Earlier", MON_0900)),
        ]
        report = parser.parse_batch(records, WED_1200)
        assert [e.event_id for e in report.events] == [1, 2]

    def test_malformed_record_serializes_its_wire_form(self, parser):
        bad = RawEventRecord(event_id="x", name="Broken", call_time="??")
        report = parser.parse_batch([bad], WED_1200)
        data = report.malformed_items[0].to_dict()

        assert report.malformed_count == 1
        assert report.success_count == 0
        assert data['code'] == "INVALID_TIMESTAMP"
        assert data['record'] == {'id': "x", 'name': "Broken", 'callTime': "??"}
