"""Materialize bookable slots from a weekly availability template.

Days are walked from ``now`` up to, but excluding, ``now`` plus one calendar
month. On each day whose weekday name is in the template, slots of
``period_minutes`` are laid end to end from the shift start; a slot is emitted
while its start is before the shift end, so when the shift does not divide
evenly the last slot of the day runs past the shift end.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta

from dateutil.relativedelta import relativedelta

from scheduling_backend.core.errors import ValidationError

WEEKDAY_NAMES = ('Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday')
HORIZON = relativedelta(months=1)
MAX_PERIOD_MINUTES = 24 * 60
TIME_FORMAT = "%H:%M"


def parse_time_of_day(value: str, field_name: str) -> time:
    try:
        return datetime.strptime(value.strip(), TIME_FORMAT).time()
    except (AttributeError, ValueError) as exc:
        raise ValidationError(f"{field_name} must use the HH:MM format.") from exc


def normalize_weekdays(weekdays) -> frozenset[str]:
    lookup = {name.lower(): name for name in WEEKDAY_NAMES}
    normalized = set()
    for weekday in weekdays:
        name = lookup.get(str(weekday).strip().lower())
        if name is None:
            raise ValidationError(f"Unknown weekday: {weekday!r}.")
        normalized.add(name)
    return frozenset(normalized)


@dataclass(frozen=True)
class AvailabilityTemplate:
    provider_id: str
    company_id: str | None
    weekdays: frozenset[str]
    shift_start: time
    shift_end: time
    period_minutes: int

    @classmethod
    def from_strings(
        cls,
        provider_id: str,
        company_id: str | None,
        weekdays,
        shift_start: str,
        shift_end: str,
        period_minutes: int,
    ) -> "AvailabilityTemplate":
        return cls(
            provider_id=provider_id,
            company_id=company_id,
            weekdays=normalize_weekdays(weekdays),
            shift_start=parse_time_of_day(shift_start, "shift_start"),
            shift_end=parse_time_of_day(shift_end, "shift_end"),
            period_minutes=period_minutes,
        )


@dataclass(frozen=True)
class SlotDraft:
    provider_id: str
    company_id: str | None
    date: date
    start_time: datetime
    end_time: datetime
    active: bool = field(default=False)


def iterate_days(now: datetime, horizon_end: datetime):
    current = now
    while current < horizon_end:
        yield current
        current += timedelta(days=1)


def slots_for_day(template: AvailabilityTemplate, day: date) -> list[SlotDraft]:
    period = timedelta(minutes=template.period_minutes)
    window_start = datetime.combine(day, template.shift_start)
    window_end = datetime.combine(day, template.shift_end)

    slots = []
    slot_start = window_start
    while slot_start < window_end:
        slots.append(
            SlotDraft(
                provider_id=template.provider_id,
                company_id=template.company_id,
                date=day,
                start_time=slot_start,
                end_time=slot_start + period,
            )
        )
        slot_start += period
    return slots


def generate_slots(template: AvailabilityTemplate, now: datetime) -> list[SlotDraft]:
    if isinstance(template.period_minutes, bool) or not isinstance(template.period_minutes, int):
        raise ValidationError("period must be a whole number of minutes.")
    if template.period_minutes <= 0:
        raise ValidationError("period must be greater than zero.")
    if template.period_minutes > MAX_PERIOD_MINUTES:
        raise ValidationError(f"period must be at most {MAX_PERIOD_MINUTES} minutes.")

    weekdays = normalize_weekdays(template.weekdays)
    if not weekdays:
        return []

    slots: list[SlotDraft] = []
    for day in iterate_days(now, now + HORIZON):
        if WEEKDAY_NAMES[day.weekday()] not in weekdays:
            continue
        slots.extend(slots_for_day(template, day.date()))
    return slots
