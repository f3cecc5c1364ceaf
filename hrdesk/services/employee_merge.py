"""
Building and merging employee documents.

Dict-valued sections (personal, contact, statutory, bank, employment,
documents) are merged one level deep on update: fields the client sent win,
everything else is kept. Education and experience are lists and are replaced
wholesale when sent.
"""
from typing import Any, Dict, List, Optional

from hrdesk.schemas.employee_schema import LIST_SECTIONS, MERGED_SECTIONS, EmployeePayload

IDENTIFIER_FIELDS = ("employeeId", "accessCardNumber")


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


def normalize_identifiers(personal: Dict[str, Any]) -> Dict[str, Any]:
    """Strip the unique personal keys in place so stored values match lookups."""
    for key in IDENTIFIER_FIELDS:
        if isinstance(personal.get(key), str):
            personal[key] = personal[key].strip()
    return personal


def _experience_entries(payload: EmployeePayload) -> List[Dict[str, Any]]:
    entries = payload.entries("experience") or []
    for entry in entries:
        entry.setdefault("current", False)
    return entries


def build_new_record(
    payload: EmployeePayload,
    employee_id: str,
    password_hash: str,
) -> Dict[str, Any]:
    """Assemble the document stored for a newly created employee."""
    personal = payload.section("personal")
    personal["employeeId"] = employee_id
    normalize_identifiers(personal)
    contact = payload.section("contact")
    if "email" in contact:
        contact["email"] = normalize_email(contact["email"])

    documents = {"educationDocs": [], "otherDocs": []}
    documents.update(payload.section("documents"))

    return {
        "firstName": (personal.get("firstName") or "").strip(),
        "lastName": (personal.get("lastName") or "").strip(),
        "email": normalize_email(contact.get("email")),
        "password": password_hash,
        "role": "employee",
        "isActive": True,
        "personal": personal,
        "contact": contact,
        "statutory": payload.section("statutory"),
        "bank": payload.section("bank"),
        "employment": payload.section("employment"),
        "documents": documents,
        "education": payload.entries("education") or [],
        "experience": _experience_entries(payload),
    }


def merge_employee_record(existing: Dict[str, Any], payload: EmployeePayload) -> Dict[str, Any]:
    """
    Compute the ``$set`` document for an update of ``existing``.

    Sections the client left out are not touched. The top-level name and
    email mirror the merged nested values.
    """
    updates: Dict[str, Any] = {}

    for name in MERGED_SECTIONS:
        if not payload.was_sent(name):
            continue
        merged = dict(existing.get(name) or {})
        merged.update(payload.section(name))
        updates[name] = merged

    for name in LIST_SECTIONS:
        if payload.was_sent(name):
            updates[name] = _experience_entries(payload) if name == "experience" else payload.entries(name)

    if "personal" in updates:
        normalize_identifiers(updates["personal"])
    if "contact" in updates and updates["contact"].get("email"):
        updates["contact"]["email"] = normalize_email(updates["contact"]["email"])

    incoming_personal = payload.section("personal")
    incoming_contact = payload.section("contact")
    updates["firstName"] = (incoming_personal.get("firstName") or existing.get("firstName") or "").strip()
    updates["lastName"] = (incoming_personal.get("lastName") or existing.get("lastName") or "").strip()
    updates["email"] = normalize_email(incoming_contact.get("email") or existing.get("email"))
    return updates


def final_identity(existing: Dict[str, Any], updates: Dict[str, Any]) -> Dict[str, Optional[str]]:
    """The unique keys a record will carry once ``updates`` is applied."""
    personal = updates.get("personal", existing.get("personal") or {})
    return {
        "email": updates.get("email", existing.get("email")),
        "employee_id": personal.get("employeeId"),
        "access_card": personal.get("accessCardNumber"),
    }
