"""
Event data models for calendar event extraction.
Defines the compact date codes, EventRecord (decoded from the LLM reply)
and the resolved CalendarEvent / Calendar pair.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Union

WEEKDAY_TOKENS = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")


@dataclass(frozen=True)
class AbsoluteMonthDay:
    """Explicit month and day; the year comes from the reference date."""
    month: int
    day: int


@dataclass(frozen=True)
class OffsetDays:
    """Whole days after the reference date."""
    days: int

    def __post_init__(self):
        if self.days < 0:
            raise ValueError(f"Day offset must not be negative: {self.days}")


@dataclass(frozen=True)
class NextWeekday:
    """Next occurrence of a weekday (Monday = 0 ... Sunday = 6)."""
    weekday: int

    def __post_init__(self):
        if not 0 <= self.weekday <= 6:
            raise ValueError(f"Weekday index out of range: {self.weekday}")

    @property
    def token(self) -> str:
        return WEEKDAY_TOKENS[self.weekday]


DateCode = Union[AbsoluteMonthDay, OffsetDays, NextWeekday]


@dataclass
class EventRecord:
    """
    Raw event decoded from the LLM reply.
    Times are still compact HHMM codes and the date is still relative.
    """
    title: str
    date: DateCode
    start: str
    end: str
    location: str = ""
    description: Optional[str] = None


@dataclass
class CalendarEvent:
    """
    Resolved calendar event with floating (naive) local datetimes.
    Start and end always share one calendar date.
    """
    title: str
    start: datetime
    end: datetime
    location: str = ""
    description: str = ""
    uid: str = field(default_factory=lambda: f"{uuid.uuid4()}@calbot.local")

    def duration_minutes(self) -> int:
        """Get event duration in minutes."""
        delta = self.end - self.start
        return int(delta.total_seconds() / 60)


@dataclass
class Calendar:
    """Ordered collection of events; CalBot always produces exactly one."""
    events: List[CalendarEvent] = field(default_factory=list)

    @property
    def event(self) -> CalendarEvent:
        """The single event this calendar carries."""
        if len(self.events) != 1:
            raise ValueError(f"Expected exactly one event, found {len(self.events)}")
        return self.events[0]
