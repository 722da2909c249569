"""WorkingHours value object — optional weekly availability schedule."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, time

WEEKDAYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


def parse_clock(raw: str) -> time:
    """Parse an "HH:MM" string into a time."""
    hours, _, minutes = raw.strip().partition(":")
    return time(int(hours), int(minutes or 0))


@dataclass(frozen=True)
class DaySchedule:
    active: bool
    start: time
    end: time

    def contains(self, moment: time) -> bool:
        return self.active and self.start <= moment <= self.end


@dataclass(frozen=True)
class WorkingHours:
    enabled: bool = False
    schedule: dict[str, DaySchedule] = field(default_factory=dict)

    def is_within(self, now: datetime) -> bool:
        """Check whether *now* falls inside the schedule.

        A disabled schedule means the agent is always within hours. Minutes
        are the resolution, so an "18:00" end still admits 18:00:59.
        """
        if not self.enabled:
            return True

        day = self.schedule.get(WEEKDAYS[now.weekday()])
        if day is None:
            return False
        return day.contains(time(now.hour, now.minute))

    @classmethod
    def from_dict(cls, raw: dict | None) -> WorkingHours:
        if not raw:
            return cls()
        schedule = {}
        for day, entry in (raw.get("schedule") or {}).items():
            if not entry or not entry.get("start") or not entry.get("end"):
                continue
            schedule[day.lower()] = DaySchedule(
                active=bool(entry.get("active")),
                start=parse_clock(entry["start"]),
                end=parse_clock(entry["end"]),
            )
        return cls(enabled=bool(raw.get("enabled")), schedule=schedule)

    def to_dict(self) -> dict:
        return {
            "enabled": self.enabled,
            "schedule": {
                day: {
                    "active": s.active,
                    "start": s.start.strftime("%H:%M"),
                    "end": s.end.strftime("%H:%M"),
                }
                for day, s in self.schedule.items()
            },
        }
