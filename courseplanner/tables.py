"""
Static lookup tables (department abbreviations, weekdays, campuses).

All tables are read-only mappings built once at import time.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional


# Department name / alias -> catalog subject code
DEPARTMENT_ABBREVIATIONS: Mapping[str, str] = MappingProxyType(
    {
        # Computer Science
        "CS": "198",
        "COMPSCI": "198",
        # Mathematics
        "MATH": "640",
        # Physics
        "PHYS": "750",
        # Chemistry
        "CHEM": "160",
        # Biology
        "BIO": "120",
        "BIOL": "120",
        # English
        "ENGL": "350",
        # History
        "HIST": "510",
        # Psychology
        "PSYCH": "830",
        "PSY": "830",
        # Economics
        "ECON": "220",
        # Business
        "BUS": "010",
        # Engineering
        "ENG": "440",
        # Information Technology
        "INFO": "547",
        "IT": "547",
        # Statistics
        "STAT": "960",
        # Data Science lives under CS
        "DATA": "198",
    }
)

# Catalog weekday code -> display name
WEEKDAY_NAMES: Mapping[str, str] = MappingProxyType(
    {
        "M": "Monday",
        "T": "Tuesday",
        "W": "Wednesday",
        "TH": "Thursday",
        "H": "Thursday",
        "F": "Friday",
        "S": "Saturday",
        "U": "Sunday",
    }
)

# Campus code -> display name
CAMPUS_NAMES: Mapping[str, str] = MappingProxyType(
    {
        "BUS": "Busch",
        "CAC": "College Avenue",
        "D/C": "Douglass/Cook",
        "LIV": "Livingston",
        "ONL": "Online",
        "NB": "New Brunswick",
        "NK": "Newark",
        "CM": "Camden",
    }
)

# Mode string the catalog uses for asynchronous online sections
ONLINE_ASYNC_MODE = "ONLINE INSTRUCTION(INTERNET)"


def resolve_subject(letters: str) -> Optional[str]:
    """
    Map department letters ("cs", "MATH") to a subject code, or None.
    """
    return DEPARTMENT_ABBREVIATIONS.get(letters.strip().upper())


def weekday_name(code: str) -> str:
    return WEEKDAY_NAMES.get(code, code)


def campus_name(code: str) -> str:
    return CAMPUS_NAMES.get(code, code)
