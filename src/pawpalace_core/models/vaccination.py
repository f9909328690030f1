"""
Vaccination history helpers shared by the Pet model, the write schemas and
the due-date evaluator.

Stored entries are plain dicts of the form ``{"vaccine_type": str, "date": Any}``.
Vaccine types are matched case-insensitively on their trimmed value; dates are
kept exactly as written and only parsed when a pass evaluates them.
"""

from collections.abc import Mapping
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..utils.datetime_utils import parse_calendar_date
from ..utils.validation import normalize_key

VACCINE_TYPE_KEYS = ("vaccine_type", "vaccineType")


def entry_vaccine_type(entry: Any) -> Optional[str]:
    """
    Return the trimmed vaccine type of a raw entry.

    Both ``vaccine_type`` and ``vaccineType`` keys are accepted, the former
    taking precedence. Returns None for non-mapping entries and for types that
    are missing or blank after trimming.
    """
    if not isinstance(entry, Mapping):
        return None

    for key in VACCINE_TYPE_KEYS:
        value = entry.get(key)
        if value is None:
            continue
        trimmed = str(value).strip()
        if trimmed:
            return trimmed
    return None


def normalize_vaccinations(raw_entries: Optional[Iterable[Any]]) -> List[Dict[str, Any]]:
    """
    Clean a raw vaccination list before it is stored.

    Entries without a usable vaccine type are dropped. For each case-folded
    type only the first entry in input order is kept. Output entries carry the
    trimmed, original-casing type and the date exactly as given.

    Example:
        >>> normalize_vaccinations([
        ...     {"vaccineType": " Rabies ", "date": "2024-01-10"},
        ...     {"vaccine_type": "rabies", "date": "2024-06-01"},
        ... ])
        [{'vaccine_type': 'Rabies', 'date': '2024-01-10'}]
    """
    if not raw_entries:
        return []

    seen = set()
    normalized: List[Dict[str, Any]] = []
    for entry in raw_entries:
        vaccine_type = entry_vaccine_type(entry)
        if vaccine_type is None:
            continue

        key = normalize_key(vaccine_type)
        if key in seen:
            continue
        seen.add(key)
        normalized.append({"vaccine_type": vaccine_type, "date": entry.get("date")})

    return normalized


def latest_dose(
    entries: Optional[Iterable[Any]], vaccine_type: str
) -> Optional[Tuple[Dict[str, Any], date]]:
    """
    Find the most recent dose of a vaccine type in a raw entry list.

    Matching is case-insensitive on the trimmed type. Entries whose date is
    missing or unparsable are ignored. On equal dates the first entry wins.

    Returns:
        ``(entry, parsed_date)`` for the latest dose, or None if there is none
    """
    if not entries:
        return None

    wanted = normalize_key(vaccine_type)
    best: Optional[Tuple[Dict[str, Any], date]] = None
    for entry in entries:
        entry_type = entry_vaccine_type(entry)
        if entry_type is None or normalize_key(entry_type) != wanted:
            continue

        dose_date = parse_calendar_date(entry.get("date"))
        if dose_date is None:
            continue

        if best is None or dose_date > best[1]:
            best = (entry, dose_date)

    return best
