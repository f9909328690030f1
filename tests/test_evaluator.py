"""
Tests for due-date evaluation.

Reminders are computed for the day after the reference date: a dose
administered on D with an interval of I days is reported when the pass runs
as of D + I - 1.
"""

import uuid
from datetime import date
from types import SimpleNamespace

import pytest

from pawpalace_core.reminders.evaluator import (
    DueEvent,
    DueWindow,
    compute_due_events,
    due_window,
    evaluate_pet,
)
from pawpalace_core.reminders.intervals import VaccineIntervalTable


def make_pet(vaccinations, name="Bella"):
    """Plain stand-in for a stored pet; keeps the raw entries untouched."""
    return SimpleNamespace(id=uuid.uuid4(), name=name, vaccinations=vaccinations)


@pytest.fixture
def rabies_table():
    return VaccineIntervalTable({"Rabies": 365})


class TestDueWindow:
    """Test cases for the lookahead window."""

    def test_window_covers_tomorrow_only(self):
        window = due_window(date(2025, 1, 9))
        assert window == DueWindow(start=date(2025, 1, 10), end=date(2025, 1, 11))
        assert date(2025, 1, 10) in window
        assert date(2025, 1, 9) not in window
        assert date(2025, 1, 11) not in window

    def test_window_crosses_year_end(self):
        window = due_window(date(2024, 12, 31))
        assert window.start == date(2025, 1, 1)


class TestComputeDueEvents:
    """Test cases for compute_due_events."""

    def test_bella_scenario(self, bella):
        table = VaccineIntervalTable({"Rabies": 365})
        events = compute_due_events([bella], table, date(2024, 1, 9))

        assert len(events) == 1
        event = events[0]
        assert event.pet_id == bella.id
        assert event.pet_name == "Bella"
        assert event.vaccine_type == "Rabies"
        assert event.last_dose_date == date(2023, 1, 10)
        assert event.next_due_date_str == "2024-01-10"

    @pytest.mark.parametrize(
        "as_of, expected",
        [
            (date(2024, 1, 8), 0),  # due the day after tomorrow
            (date(2024, 1, 9), 1),  # due tomorrow
            (date(2024, 1, 10), 0),  # due today
        ],
    )
    def test_only_tomorrow_is_reported(self, rabies_table, as_of, expected):
        pet = make_pet([{"vaccineType": "Rabies", "date": "2023-01-10"}])
        assert len(compute_due_events([pet], rabies_table, as_of)) == expected

    def test_latest_of_two_doses_is_used(self, rabies_table):
        pet = make_pet(
            [
                {"vaccineType": "Rabies", "date": "2022-01-10"},
                {"vaccineType": "rabies", "date": "2023-01-10"},
            ]
        )
        assert compute_due_events([pet], rabies_table, date(2023, 1, 9)) == []
        events = compute_due_events([pet], rabies_table, date(2024, 1, 9))
        assert [event.last_dose_date for event in events] == [date(2023, 1, 10)]

    def test_types_not_in_table_are_ignored(self, rabies_table):
        pet = make_pet([{"vaccineType": "Unknown Vaccine", "date": "2024-01-10"}])
        assert compute_due_events([pet], rabies_table, date(2025, 1, 9)) == []

    def test_invalid_dates_are_skipped(self, rabies_table):
        pet = make_pet(
            [
                {"vaccineType": "Rabies", "date": "garbage"},
                {"vaccineType": "Rabies", "date": None},
            ]
        )
        assert compute_due_events([pet], rabies_table, date(2025, 1, 9)) == []

    def test_utc_offset_dates_use_utc_calendar_day(self, rabies_table):
        # 2023-01-10T01:00+05:00 is 2023-01-09 in UTC
        pet = make_pet([{"vaccineType": "Rabies", "date": "2023-01-10T01:00:00+05:00"}])
        events = compute_due_events([pet], rabies_table, date(2024, 1, 8))
        assert [event.next_due_date for event in events] == [date(2024, 1, 9)]

    def test_trailing_z_is_utc(self, rabies_table):
        pet = make_pet([{"vaccineType": "Rabies", "date": "2023-01-10T23:30:00Z"}])
        events = compute_due_events([pet], rabies_table, date(2024, 1, 9))
        assert len(events) == 1

    def test_case_insensitive_match_reports_stored_casing(self):
        table = VaccineIntervalTable({"RABIES": 365})
        pet = make_pet([{"vaccineType": "  rabies ", "date": "2023-01-10"}])
        events = compute_due_events([pet], table, date(2024, 1, 9))
        assert [event.vaccine_type for event in events] == ["rabies"]

    def test_several_types_for_one_pet(self):
        table = VaccineIntervalTable(
            {"Rabies": 365, "Bordetella (Kennel Cough)": 180}
        )
        pet = make_pet(
            [
                {"vaccineType": "Rabies", "date": "2024-07-13"},
                {"vaccineType": "Bordetella (Kennel Cough)", "date": "2025-01-14"},
            ]
        )
        events = compute_due_events([pet], table, date(2025, 7, 12))
        assert [event.vaccine_type for event in events] == [
            "Rabies",
            "Bordetella (Kennel Cough)",
        ]

    def test_pets_without_vaccinations(self, rabies_table):
        pets = [make_pet([]), make_pet(None)]
        assert compute_due_events(pets, rabies_table, date(2025, 1, 9)) == []

    def test_intervals_are_literal_days_across_leap_years(self, rabies_table):
        # 2024 has a February 29th, so 365 days after 2024-01-10 is 2025-01-09
        pet = make_pet([{"vaccineType": "Rabies", "date": "2024-01-10"}])
        events = compute_due_events([pet], rabies_table, date(2025, 1, 8))
        assert [event.next_due_date for event in events] == [date(2025, 1, 9)]
        assert compute_due_events([pet], rabies_table, date(2025, 1, 9)) == []

    def test_leap_day(self, rabies_table):
        pet = make_pet([{"vaccineType": "Rabies", "date": "2024-02-29"}])
        events = compute_due_events([pet], rabies_table, date(2025, 2, 27))
        assert [event.next_due_date for event in events] == [date(2025, 2, 28)]

    def test_evaluation_is_deterministic(self, rabies_table, bella):
        first = compute_due_events([bella], rabies_table, date(2024, 1, 9))
        second = compute_due_events([bella], rabies_table, date(2024, 1, 9))
        assert first == second

    def test_out_of_range_due_date_does_not_hide_other_pets(self, rabies_table, bella):
        max_pet = make_pet([{"vaccineType": "Rabies", "date": "9999-12-31"}], name="Max")

        events = compute_due_events([max_pet, bella], rabies_table, date(2024, 1, 9))

        assert [event.pet_name for event in events] == ["Bella"]

    def test_pet_that_fails_evaluation_is_skipped(self, rabies_table, bella):
        broken = make_pet(42, name="Broken")

        events = compute_due_events([broken, bella], rabies_table, date(2024, 1, 9))

        assert [event.pet_id for event in events] == [bella.id]


class TestEvaluatePet:
    """Test cases for evaluate_pet and DueEvent."""

    def test_out_of_range_due_date_yields_no_event(self, rabies_table):
        pet = make_pet(
            [
                {"vaccineType": "Rabies", "date": "9999-12-31"},
                {"vaccineType": "FVRCP", "date": "2023-01-10"},
            ]
        )
        table = VaccineIntervalTable({"Rabies": 365, "FVRCP": 365})

        events = evaluate_pet(pet, table, due_window(date(2024, 1, 9)))

        assert [event.vaccine_type for event in events] == ["FVRCP"]

    def test_event_to_dict(self, rabies_table):
        pet = make_pet([{"vaccineType": "Rabies", "date": "2023-01-10"}])
        (event,) = evaluate_pet(pet, rabies_table, due_window(date(2024, 1, 9)))

        assert event.to_dict() == {
            "pet_id": str(pet.id),
            "pet_name": "Bella",
            "vaccine_type": "Rabies",
            "last_dose_date": "2023-01-10",
            "next_due_date": "2024-01-10",
        }

    def test_due_events_are_immutable(self):
        event = DueEvent(
            pet_id=uuid.uuid4(),
            pet_name="Bella",
            vaccine_type="Rabies",
            last_dose_date=date(2024, 1, 10),
            next_due_date=date(2025, 1, 10),
        )
        with pytest.raises(AttributeError):
            event.pet_name = "Max"
