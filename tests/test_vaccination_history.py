"""
Tests for vaccination history normalization and latest-dose lookup.
"""

from datetime import date, datetime, timezone

import pytest

from pawpalace_core.models.vaccination import (
    entry_vaccine_type,
    latest_dose,
    normalize_vaccinations,
)


class TestEntryVaccineType:
    """Test reading the vaccine type from raw entries."""

    def test_snake_case_key_wins(self):
        entry = {"vaccine_type": "Rabies", "vaccineType": "Leptospirosis"}
        assert entry_vaccine_type(entry) == "Rabies"

    def test_camel_case_key(self):
        assert entry_vaccine_type({"vaccineType": "  Rabies "}) == "Rabies"

    @pytest.mark.parametrize(
        "entry",
        [
            {},
            {"vaccineType": None},
            {"vaccineType": "   "},
            "Rabies",
            None,
        ],
    )
    def test_unusable_entries(self, entry):
        assert entry_vaccine_type(entry) is None


class TestNormalizeVaccinations:
    """Test the write-time normalizer."""

    def test_empty_input(self):
        assert normalize_vaccinations(None) == []
        assert normalize_vaccinations([]) == []

    def test_trims_type_and_keeps_date_verbatim(self):
        result = normalize_vaccinations(
            [{"vaccineType": "  Rabies  ", "date": "2024-01-10T08:30:00Z"}]
        )
        assert result == [{"vaccine_type": "Rabies", "date": "2024-01-10T08:30:00Z"}]

    def test_first_seen_wins_over_later_date(self):
        """Duplicates are dropped in input order, not by date."""
        result = normalize_vaccinations(
            [
                {"vaccineType": "Rabies", "date": "2023-01-01"},
                {"vaccineType": "RABIES", "date": "2024-06-01"},
                {"vaccine_type": " rabies", "date": "2025-01-01"},
            ]
        )
        assert result == [{"vaccine_type": "Rabies", "date": "2023-01-01"}]

    def test_one_entry_per_case_folded_type(self):
        result = normalize_vaccinations(
            [
                {"vaccineType": "Rabies", "date": "2024-01-10"},
                {"vaccineType": "Leptospirosis", "date": "2024-02-01"},
                {"vaccineType": "leptospirosis", "date": "2024-03-01"},
                {"vaccineType": "Canine Parvovirus"},
            ]
        )
        assert [entry["vaccine_type"] for entry in result] == [
            "Rabies",
            "Leptospirosis",
            "Canine Parvovirus",
        ]
        assert result[2]["date"] is None

    def test_entries_without_type_are_dropped(self):
        result = normalize_vaccinations(
            [{"date": "2024-01-10"}, {"vaccineType": ""}, {"vaccineType": "Rabies"}]
        )
        assert result == [{"vaccine_type": "Rabies", "date": None}]


class TestLatestDose:
    """Test latest-dose selection over raw, non-deduplicated entries."""

    def test_latest_of_two_doses(self):
        entries = [
            {"vaccineType": "Rabies", "date": "2023-01-10"},
            {"vaccineType": "rabies", "date": "2024-01-10"},
        ]
        entry, dose_date = latest_dose(entries, "RABIES")
        assert dose_date == date(2024, 1, 10)
        assert entry is entries[1]

    def test_tie_keeps_first(self):
        entries = [
            {"vaccineType": "Rabies", "date": "2024-01-10"},
            {"vaccineType": "Rabies", "date": "2024-01-10T12:00:00"},
        ]
        entry, _ = latest_dose(entries, "rabies")
        assert entry is entries[0]

    def test_unparsable_and_missing_dates_ignored(self):
        entries = [
            {"vaccineType": "Rabies", "date": "not-a-date"},
            {"vaccineType": "Rabies"},
            {"vaccineType": "Rabies", "date": "2024-01-10"},
        ]
        _, dose_date = latest_dose(entries, "Rabies")
        assert dose_date == date(2024, 1, 10)

    def test_no_match(self):
        assert latest_dose([{"vaccineType": "Rabies", "date": "2024-01-10"}], "FIV") is None
        assert latest_dose(None, "Rabies") is None

    def test_accepts_date_objects(self):
        entries = [
            {"vaccine_type": "Rabies", "date": date(2024, 1, 10)},
            {"vaccine_type": "Rabies", "date": datetime(2024, 3, 1, tzinfo=timezone.utc)},
        ]
        _, dose_date = latest_dose(entries, "Rabies")
        assert dose_date == date(2024, 3, 1)
