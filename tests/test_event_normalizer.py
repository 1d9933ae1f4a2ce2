from datetime import date, datetime

import pytest

from src.errors import ParseFailure
from src.event_models import AbsoluteMonthDay, EventRecord, NextWeekday, OffsetDays
from src.event_normalizer import assemble_event, build_calendar, normalize_title


class TestNormalizeTitle:
    def test_capitalizes_each_word(self):
        assert normalize_title("acm club meeting") == "Acm Club Meeting"

    def test_rest_of_word_untouched(self):
        assert normalize_title("iPhone launch FAQ") == "IPhone Launch FAQ"
        assert normalize_title("mcDonald's lunch") == "McDonald's Lunch"

    def test_collapses_whitespace(self):
        assert normalize_title("  study   group\tsession\n") == "Study Group Session"

    @pytest.mark.parametrize("title", [
        "acm club meeting",
        "iPhone launch FAQ",
        "déjà vu party",
        "1:1 with bob",
    ])
    def test_idempotent(self, title):
        once = normalize_title(title)
        assert normalize_title(once) == once

    def test_empty_title(self):
        with pytest.raises(ValueError):
            normalize_title("   ")


class TestAssembleEvent:
    def test_same_date_for_start_and_end(self):
        record = EventRecord(
            title="board games", date=OffsetDays(1), start="1930", end="2200", location="Lounge"
        )
        event = assemble_event(record, date(2025, 3, 1))
        assert event.start == datetime(2025, 3, 1, 19, 30)
        assert event.end == datetime(2025, 3, 1, 22, 0)
        assert event.start.date() == event.end.date()
        assert event.location == "Lounge"
        assert event.description == ""
        assert event.duration_minutes() == 150

    def test_end_before_start_is_not_rejected(self):
        record = EventRecord(title="late", date=OffsetDays(0), start="2300", end="0100")
        event = assemble_event(record, date(2025, 3, 1))
        assert event.end < event.start

    def test_description_copied(self):
        record = EventRecord(
            title="review", date=OffsetDays(0), start="0900", end="1000",
            location="", description="Bring laptops",
        )
        assert assemble_event(record, date(2025, 3, 1)).description == "Bring laptops"

    def test_invalid_time_code_fails(self):
        record = EventRecord(title="x", date=OffsetDays(0), start="1700", end="2561", location="Room")
        with pytest.raises(ParseFailure):
            assemble_event(record, date(2025, 3, 1))

    def test_empty_title_fails_as_parse_failure(self):
        record = EventRecord(title=" ", date=OffsetDays(0), start="1700", end="1800")
        with pytest.raises(ParseFailure):
            assemble_event(record, date(2025, 3, 1))


class TestBuildCalendar:
    def test_acm_club_meeting(self, reference_date):
        record = EventRecord(
            title="acm club meeting",
            date=NextWeekday(0),
            start="1700",
            end="1800",
            location="OCNL 239",
        )
        calendar = build_calendar(record, reference_date)

        assert len(calendar.events) == 1
        event = calendar.event
        assert event.title == "Acm Club Meeting"
        assert event.start == datetime(2025, 2, 3, 17, 0)
        assert event.end == datetime(2025, 2, 3, 18, 0)
        assert event.location == "OCNL 239"
        assert event.description == ""

    def test_invalid_date_fails(self, reference_date):
        record = EventRecord(title="x", date=AbsoluteMonthDay(2, 30), start="1700", end="1800")
        with pytest.raises(ParseFailure):
            build_calendar(record, reference_date)
