# euctr/fields.py
"""
Trial record model and the field dictionary.

FIELD_LABELS (source label -> Trial attribute) and COLUMNS (output header ->
Trial attribute, in output order) must stay in lockstep: adding a field means
one new Trial attribute, one FIELD_LABELS entry and one COLUMNS entry.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

from pydantic import BaseModel, ConfigDict


class Trial(BaseModel):
    """One listing from a registry search-results page. All values are raw text."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    eudract_number: str = ""
    full_title: str = ""
    start_date: str = ""
    sponsor_name: str = ""
    sponsor_protocol_number: str = ""
    medical_condition: str = ""
    population_age: str = ""
    trial_results: str = ""
    trial_protocol: str = ""
    disease: str = ""
    gender: str = ""


# Labels exactly as they appear in the registry's result cells
# (note "Start Date*" and "Population Age").
FIELD_LABELS: Dict[str, str] = {
    "EudraCT Number": "eudract_number",
    "Full Title": "full_title",
    "Start Date*": "start_date",
    "Sponsor Name": "sponsor_name",
    "Sponsor Protocol Number": "sponsor_protocol_number",
    "Medical condition": "medical_condition",
    "Population Age": "population_age",
    "Trial results": "trial_results",
    "Trial protocol": "trial_protocol",
    "Disease": "disease",
    "Gender": "gender",
}

COLUMNS: Tuple[Tuple[str, str], ...] = (
    ("EudraCT Number", "eudract_number"),
    ("Full Title", "full_title"),
    ("Start Date", "start_date"),
    ("Sponsor Name", "sponsor_name"),
    ("Sponsor Protocol Number", "sponsor_protocol_number"),
    ("Medical condition", "medical_condition"),
    ("Population age", "population_age"),
    ("Trial results", "trial_results"),
    ("Trial protocol", "trial_protocol"),
    ("Disease", "disease"),
    ("Gender", "gender"),
)


def column_headers() -> List[str]:
    return [header for header, _ in COLUMNS]


def column_attributes() -> List[str]:
    return [attr for _, attr in COLUMNS]
