"""
Tests for the vaccine interval table.
"""

import pytest

from pawpalace_core.reminders.intervals import (
    DEFAULT_VACCINE_INTERVALS,
    VaccineIntervalTable,
)
from pawpalace_core.utils.config import ConfigError


class TestVaccineIntervalTable:
    """Test cases for VaccineIntervalTable."""

    def test_defaults(self):
        table = VaccineIntervalTable()
        assert len(table) == len(DEFAULT_VACCINE_INTERVALS) == 21
        assert table["Rabies"] == 365
        assert table["bordetella (kennel cough)"] == 180

    def test_lookup_is_case_insensitive(self):
        table = VaccineIntervalTable({"Rabies": 365})
        assert table["RABIES"] == 365
        assert table["  rabies "] == 365
        assert "rAbIeS" in table
        assert "Leptospirosis" not in table

    def test_keys_are_case_folded_in_source_order(self):
        table = VaccineIntervalTable({"Rabies": 365, "Leptospirosis": 180})
        assert list(table) == ["rabies", "leptospirosis"]
        assert table.entries() == (("rabies", 365), ("leptospirosis", 180))

    def test_later_key_wins_on_case_collision(self):
        table = VaccineIntervalTable({"Rabies": 365, "RABIES": 30})
        assert len(table) == 1
        assert table["rabies"] == 30

    def test_zero_interval_allowed(self):
        assert VaccineIntervalTable({"Rabies": 0})["rabies"] == 0

    def test_missing_key_raises_key_error(self):
        with pytest.raises(KeyError):
            VaccineIntervalTable({"Rabies": 365})["FIV"]

    @pytest.mark.parametrize("days", [-1, 1.5, "365", True, None])
    def test_invalid_interval(self, days):
        with pytest.raises(ConfigError) as exc_info:
            VaccineIntervalTable({"Rabies": days})
        assert exc_info.value.details["config_key"] == "VACCINE_INTERVALS"

    @pytest.mark.parametrize("source", [[1, 2], "Rabies", 365])
    def test_non_mapping_source(self, source):
        with pytest.raises(ConfigError, match="must be a JSON object") as exc_info:
            VaccineIntervalTable(source)
        assert exc_info.value.details["config_key"] == "VACCINE_INTERVALS"

    def test_blank_key(self):
        with pytest.raises(ConfigError):
            VaccineIntervalTable({"  ": 365})

    def test_empty_table(self):
        table = VaccineIntervalTable({})
        assert len(table) == 0
        assert table.entries() == ()
