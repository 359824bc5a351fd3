"""
Case Intake Domain Models

The intake record collected across a conversation, and the structured reply returned
by the response generator. Both double as the schemas handed to the LLM in
structured-output mode, so every field is always present in the parsed result.
"""

import json

from pydantic import BaseModel, Field

# Human labels used in prompts when asking for a field
FIELD_LABELS: dict[str, str] = {
    "client_name": "full name",
    "contact_info": "contact details (phone number or email)",
    "employer_name": "employer's name",
    "incident_date": "date of the dismissal or incident",
    "incident_description": "description of what happened",
    "disciplinary_hearing_held": "whether a disciplinary hearing was held",
}

# Required intake fields in the order they are asked for. merits_assessed is
# bookkeeping, not a fact the client supplies.
REQUIRED_FIELDS: tuple[str, ...] = tuple(FIELD_LABELS)

GATHERING_FACTS_SUMMARY = "Gathering facts..."


class CaseFacts(BaseModel):
    """Structured intake record for one labour dispute. None means unknown."""

    client_name: str | None = Field(default=None, description="Full name of the client, or null if not stated")
    contact_info: str | None = Field(default=None, description="Phone number or email of the client, or null")
    employer_name: str | None = Field(default=None, description="Name of the employer, or null")
    incident_date: str | None = Field(
        default=None, description="Date of the dismissal or incident as stated by the client, or null"
    )
    incident_description: str | None = Field(
        default=None, description="Short factual description of what happened, or null"
    )
    disciplinary_hearing_held: str | None = Field(
        default=None,
        description="'yes' or 'no' depending on whether a disciplinary hearing was held before dismissal, or null",
    )
    merits_assessed: bool = Field(default=False, description="Always false when extracting")


class LegalResponse(BaseModel):
    """Two-part reply: what the client reads, and the reasoning note for the file."""

    reply: str = Field(description="Short, warm conversational message to the client")
    legal_reasoning: str = Field(description="Markdown legal-reasoning note citing sources from the context")


def _is_known(value: str | None) -> bool:
    if value is None:
        return False
    return bool(str(value).strip()) and str(value).strip().lower() not in ("null", "none", "unknown", "n/a")


def normalize_case_facts(facts: CaseFacts) -> CaseFacts:
    """Collapse blank or placeholder strings ('null', 'unknown') to None."""
    cleaned = {}
    for name in REQUIRED_FIELDS:
        value = getattr(facts, name)
        cleaned[name] = value.strip() if _is_known(value) else None
    return CaseFacts(**cleaned, merits_assessed=facts.merits_assessed)


def missing_fields(facts: CaseFacts) -> list[str]:
    """Required fields still unknown, in asking order."""
    return [name for name in REQUIRED_FIELDS if not _is_known(getattr(facts, name))]


def merge_case_facts(existing: CaseFacts, incoming: CaseFacts) -> CaseFacts:
    """
    Additive merge: a field known on either side stays known.

    Newly extracted values win over stored ones; an extraction that lost a field
    (None) never overwrites what was stored before.
    """
    merged = {}
    for name in REQUIRED_FIELDS:
        new_value = getattr(incoming, name)
        merged[name] = new_value if _is_known(new_value) else getattr(existing, name)
    return CaseFacts(**merged, merits_assessed=existing.merits_assessed or incoming.merits_assessed)


def case_summary(facts: CaseFacts) -> str:
    """Row summary shown in case listings."""
    if _is_known(facts.incident_description):
        return facts.incident_description.strip()
    return GATHERING_FACTS_SUMMARY


def case_facts_from_row(row: dict) -> CaseFacts:
    """Rebuild a CaseFacts from a stored case row (columns, or the facts blob)."""
    facts = row.get("facts") or {}
    if isinstance(facts, str):
        facts = json.loads(facts)
    values = {name: row.get(name, facts.get(name)) for name in REQUIRED_FIELDS}
    return CaseFacts(**values, merits_assessed=bool(row.get("merits_assessed", facts.get("merits_assessed", False))))
