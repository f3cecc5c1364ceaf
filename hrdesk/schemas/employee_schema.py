"""
Employee payload schemas.

One model per section of the employee document. Every field is optional so
that the same models describe a full create payload and a partial update;
the validators decide what is required. ``model_dump(exclude_unset=True)``
yields exactly the fields a client sent, which is what the section merge
relies on.
"""
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

Number = Union[int, float, str]

# Dict-valued sections are shallow-merged on update; list-valued ones are replaced
MERGED_SECTIONS = ("personal", "contact", "statutory", "bank", "employment", "documents")
LIST_SECTIONS = ("education", "experience")


class SectionModel(BaseModel):
    model_config = ConfigDict(
        extra="allow",
        coerce_numbers_to_str=True,
        populate_by_name=True,
    )

    def present_fields(self) -> Dict[str, Any]:
        """Fields explicitly supplied by the client, keyed by their wire names."""
        return self.model_dump(exclude_unset=True, by_alias=True)


class PersonalSection(SectionModel):
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    employeeId: Optional[str] = None
    accessCardNumber: Optional[str] = None
    dob: Optional[str] = None
    gender: Optional[str] = None
    bloodGroup: Optional[str] = None
    maritalStatus: Optional[str] = None


class Address(SectionModel):
    current: Optional[str] = None
    permanent: Optional[str] = None


class EmergencyContact(SectionModel):
    name: Optional[str] = None
    relation: Optional[str] = None
    phone: Optional[str] = None


class ContactSection(SectionModel):
    email: Optional[str] = None
    phone: Optional[str] = None
    alternatePhone: Optional[str] = None
    address: Optional[Address] = None
    emergencyContact: Optional[EmergencyContact] = None


class StatutorySection(SectionModel):
    pan: Optional[str] = None
    aadhaar: Optional[str] = None
    uan: Optional[str] = None
    esic: Optional[str] = None
    passport: Optional[str] = None
    pfNumber: Optional[str] = None


class BankSection(SectionModel):
    accountHolderName: Optional[str] = None
    accountNumber: Optional[str] = None
    ifsc: Optional[str] = None
    bankName: Optional[str] = None
    branch: Optional[str] = None
    accountType: Optional[str] = None


class EducationEntry(SectionModel):
    level: Optional[str] = None
    institution: Optional[str] = None
    year: Optional[Number] = None
    percentage: Optional[Number] = None
    documentUrl: Optional[str] = None


class ExperienceEntry(SectionModel):
    company: Optional[str] = None
    designation: Optional[str] = None
    department: Optional[str] = None
    from_date: Optional[str] = Field(default=None, alias="from")
    to: Optional[str] = None
    current: Optional[bool] = False
    salary: Optional[Number] = None
    reference: Optional[str] = None


class EmploymentSection(SectionModel):
    department: Optional[str] = None
    designation: Optional[str] = None
    joiningDate: Optional[str] = None
    employmentType: Optional[str] = None
    reportingManager: Optional[str] = None
    salary: Optional[Number] = None
    status: Optional[str] = None


class DocumentsSection(SectionModel):
    driveLink: Optional[str] = None
    educationDocs: Optional[List[str]] = None
    otherDocs: Optional[List[str]] = None


class EmployeePayload(BaseModel):
    """A full or partial employee submission, as nested sections."""

    model_config = ConfigDict(extra="ignore")

    personal: Optional[PersonalSection] = None
    contact: Optional[ContactSection] = None
    statutory: Optional[StatutorySection] = None
    bank: Optional[BankSection] = None
    employment: Optional[EmploymentSection] = None
    documents: Optional[DocumentsSection] = None
    education: Optional[List[EducationEntry]] = None
    experience: Optional[List[ExperienceEntry]] = None

    def section(self, name: str) -> Dict[str, Any]:
        """Present fields of a dict-valued section, or {} when it was not sent."""
        value = getattr(self, name)
        return value.present_fields() if value is not None else {}

    def entries(self, name: str) -> Optional[List[Dict[str, Any]]]:
        """Entries of a list-valued section, or None when it was not sent."""
        value = getattr(self, name)
        if value is None:
            return None
        return [entry.present_fields() for entry in value]

    def was_sent(self, name: str) -> bool:
        return name in self.model_fields_set and getattr(self, name) is not None

    @property
    def display_name(self) -> str:
        personal = self.personal
        if personal is None:
            return ""
        return " ".join(
            part.strip() for part in (personal.firstName, personal.lastName) if part and part.strip()
        )


def _format_location(loc: Tuple[Any, ...]) -> str:
    parts = []
    for item in loc:
        if isinstance(item, int):
            parts.append(str(item + 1))
        else:
            parts.append(str(item))
    return ".".join(parts)


def parse_employee_payload(data: Any) -> Tuple[Optional[EmployeePayload], List[str]]:
    """
    Parse a raw JSON body into an ``EmployeePayload``.

    Returns ``(payload, [])`` on success and ``(None, messages)`` when the body
    does not even have the right shape (e.g. a section that is not an object,
    or a non-numeric education year). Never raises.
    """
    if not isinstance(data, dict):
        return None, ["Employee payload must be an object"]
    try:
        return EmployeePayload.model_validate(data), []
    except ValidationError as exc:
        messages = []
        for error in exc.errors():
            location = _format_location(error.get("loc", ()))
            received = error.get("input")
            messages.append(f'{location}: {error.get("msg")} (received: "{received}")')
        return None, messages
