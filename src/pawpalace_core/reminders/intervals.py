"""
Vaccine interval table.

Maps vaccine type names to the number of days until the next dose is due.
Keys are case-folded once at construction so lookups are case-insensitive.
"""

from collections.abc import Mapping
from typing import Any, Dict, Iterator, Optional, Tuple

from ..utils.config import ConfigError
from ..utils.validation import normalize_key

DEFAULT_VACCINE_INTERVALS: Dict[str, int] = {
    # Dogs
    "Rabies": 365,
    "Canine Distemper Virus": 365,
    "Canine Adenovirus (Hepatitis)": 365,
    "Canine Parvovirus": 365,
    "Canine Parainfluenza Virus": 365,
    "Bordetella (Kennel Cough)": 180,
    "Leptospirosis": 365,
    "Canine Influenza": 365,
    "Lyme Disease": 365,
    # Cats
    "Feline Viral Rhinotracheitis (FHV-1)": 365,
    "Feline Calicivirus (FCV)": 365,
    "Feline Panleukopenia (FPV)": 365,
    "Feline Leukemia Virus (FeLV)": 365,
    "Feline Immunodeficiency Virus (FIV)": 365,
    "Chlamydophila felis": 365,
    # Rabbits
    "Myxomatosis": 365,
    "Rabbit Haemorrhagic Disease (RHDV1 & RHDV2)": 365,
    # Birds
    "Avian Polyomavirus (rare cases)": 365,
    "Pigeon Pox (specific species)": 365,
    # Fish
    "Spring Viremia of Carp (SVC)": 365,
    "Aeromonas Vaccine": 365,
}


class VaccineIntervalTable(Mapping):
    """
    Immutable, case-insensitive mapping of vaccine type to interval in days.

    Iteration yields the case-folded keys in source order. When two source
    keys differ only in case, the later one wins.

    Example:
        >>> table = VaccineIntervalTable({"Rabies": 365})
        >>> table["RABIES"]
        365
        >>> list(table.items())
        [('rabies', 365)]
    """

    __slots__ = ("_intervals",)

    def __init__(self, intervals: Optional[Mapping[str, Any]] = None):
        """
        Build the table.

        Args:
            intervals: Source mapping; defaults to DEFAULT_VACCINE_INTERVALS

        Raises:
            ConfigError: If the source is not a mapping, a key is blank, or an
                interval is not a non-negative whole number of days
        """
        source = DEFAULT_VACCINE_INTERVALS if intervals is None else intervals
        if not isinstance(source, Mapping):
            raise ConfigError(
                "VACCINE_INTERVALS must be a JSON object", "VACCINE_INTERVALS"
            )

        folded: Dict[str, int] = {}
        for name, days in source.items():
            key = normalize_key(name)
            if not key:
                raise ConfigError(
                    "Vaccine interval keys must be non-empty", "VACCINE_INTERVALS"
                )
            if isinstance(days, bool) or not isinstance(days, int) or days < 0:
                raise ConfigError(
                    f"Interval for '{name}' must be a non-negative integer, got: {days!r}",
                    "VACCINE_INTERVALS",
                )
            folded[key] = days
        self._intervals = folded

    def __getitem__(self, vaccine_type: str) -> int:
        return self._intervals[normalize_key(vaccine_type)]

    def __contains__(self, vaccine_type: object) -> bool:
        return normalize_key(vaccine_type) in self._intervals

    def __iter__(self) -> Iterator[str]:
        return iter(self._intervals)

    def __len__(self) -> int:
        return len(self._intervals)

    def __repr__(self) -> str:
        return f"VaccineIntervalTable({self._intervals!r})"

    def entries(self) -> Tuple[Tuple[str, int], ...]:
        """All ``(case-folded type, days)`` pairs in source order."""
        return tuple(self._intervals.items())
