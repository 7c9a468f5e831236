from datetime import date, datetime, time, timedelta

import pytest

from scheduling_backend.core.errors import ValidationError
from scheduling_backend.services.slot_generator import (
    WEEKDAY_NAMES,
    AvailabilityTemplate,
    generate_slots,
    parse_time_of_day,
)

# 2026-02-02 is a Monday; the month after it holds exactly four Mondays.
MONDAY_MORNING = datetime(2026, 2, 2, 8, 0)


def make_template(weekdays=('Monday',), shift_start='09:00', shift_end='10:00', period=30) -> AvailabilityTemplate:
    return AvailabilityTemplate.from_strings(
        provider_id='provider-1',
        company_id='company-1',
        weekdays=weekdays,
        shift_start=shift_start,
        shift_end=shift_end,
        period_minutes=period,
    )


def test_four_mondays_with_two_slots_each() -> None:
    slots = generate_slots(make_template(), MONDAY_MORNING)

    assert len(slots) == 8
    assert sorted({slot.date for slot in slots}) == [
        date(2026, 2, 2),
        date(2026, 2, 9),
        date(2026, 2, 16),
        date(2026, 2, 23),
    ]
    for slot in slots:
        assert slot.start_time.time() in {time(9, 0), time(9, 30)}
        assert slot.end_time - slot.start_time == timedelta(minutes=30)
        assert slot.active is False


def test_slots_carry_template_provider_company_and_weekdays() -> None:
    template = make_template(weekdays=['Tuesday', 'Thursday', 'Saturday'], shift_start='08:00', shift_end='12:00', period=45)

    slots = generate_slots(template, MONDAY_MORNING)

    assert slots
    for slot in slots:
        assert slot.provider_id == 'provider-1'
        assert slot.company_id == 'company-1'
        assert WEEKDAY_NAMES[slot.date.weekday()] in template.weekdays
        assert slot.start_time.date() == slot.date


def test_slots_within_a_day_are_contiguous_and_increasing() -> None:
    slots = generate_slots(make_template(weekdays=['Wednesday'], shift_start='09:00', shift_end='17:00', period=20), MONDAY_MORNING)

    by_day: dict[date, list] = {}
    for slot in slots:
        by_day.setdefault(slot.date, []).append(slot)

    for day_slots in by_day.values():
        assert day_slots[0].start_time.time() == time(9, 0)
        for previous, current in zip(day_slots, day_slots[1:]):
            assert previous.start_time < current.start_time
            assert previous.end_time == current.start_time
        assert all(slot.end_time - slot.start_time == timedelta(minutes=20) for slot in day_slots)
        assert len(day_slots) == 24


def test_final_slot_may_overrun_shift_end() -> None:
    slots = generate_slots(make_template(period=40), MONDAY_MORNING)
    first_day = [slot for slot in slots if slot.date == date(2026, 2, 2)]

    assert [(slot.start_time.time(), slot.end_time.time()) for slot in first_day] == [
        (time(9, 0), time(9, 40)),
        (time(9, 40), time(10, 20)),
    ]


def test_horizon_uses_calendar_month_not_thirty_days() -> None:
    every_day = list(WEEKDAY_NAMES)
    slots = generate_slots(make_template(weekdays=every_day, period=60), datetime(2026, 3, 1, 0, 0))

    assert len(slots) == 31
    assert slots[-1].date == date(2026, 3, 31)


def test_horizon_clamps_at_end_of_short_month() -> None:
    every_day = list(WEEKDAY_NAMES)
    slots = generate_slots(make_template(weekdays=every_day, period=60), datetime(2026, 1, 31, 12, 0))

    assert slots[0].date == date(2026, 1, 31)
    assert slots[-1].date == date(2026, 2, 27)
    assert len(slots) == 28


def test_empty_weekday_set_emits_nothing() -> None:
    assert generate_slots(make_template(weekdays=[]), MONDAY_MORNING) == []


def test_equal_shift_bounds_emit_nothing() -> None:
    assert generate_slots(make_template(shift_start='09:00', shift_end='09:00'), MONDAY_MORNING) == []


@pytest.mark.parametrize('period', [0, -15])
def test_non_positive_period_is_rejected(period: int) -> None:
    with pytest.raises(ValidationError) as exception_info:
        generate_slots(make_template(period=period), MONDAY_MORNING)

    assert exception_info.value.detail == 'period must be greater than zero.'


@pytest.mark.parametrize('period', [24 * 60 + 1, 10**10])
def test_period_longer_than_a_day_is_rejected(period: int) -> None:
    with pytest.raises(ValidationError) as exception_info:
        generate_slots(make_template(period=period), MONDAY_MORNING)

    assert exception_info.value.detail == 'period must be at most 1440 minutes.'


def test_day_long_period_emits_one_slot_per_matching_day() -> None:
    slots = generate_slots(make_template(period=24 * 60), MONDAY_MORNING)

    assert len(slots) == 4
    assert all(slot.end_time - slot.start_time == timedelta(days=1) for slot in slots)


def test_weekday_names_are_matched_case_insensitively() -> None:
    template = make_template(weekdays=[' monday ', 'FRIDAY'])

    assert template.weekdays == frozenset({'Monday', 'Friday'})


def test_unknown_weekday_is_rejected() -> None:
    with pytest.raises(ValidationError):
        make_template(weekdays=['Funday'])


@pytest.mark.parametrize('value', ['9am', '25:00', '', '09-00'])
def test_parse_time_of_day_rejects_bad_format(value: str) -> None:
    with pytest.raises(ValidationError) as exception_info:
        parse_time_of_day(value, 'shift_start')

    assert exception_info.value.detail == 'shift_start must use the HH:MM format.'
