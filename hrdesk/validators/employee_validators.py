"""
Field-level validation for employee submissions.

Every validator is a pure function returning a list of messages, empty when
the value is acceptable. Within one field the checks stop at the first
failure (required, then shape, then bounds); fields never affect each other.
Messages name the field and, for malformed values, echo what was received.

``validate_employee_payload`` runs all section validators and collects every
message so a client can show all problems at once.
"""
import re
from datetime import date, datetime
from typing import Any, Iterable, List, Optional

from hrdesk.schemas.employee_schema import (
    ContactSection,
    DocumentsSection,
    EducationEntry,
    EmployeePayload,
    EmploymentSection,
    ExperienceEntry,
    PersonalSection,
    StatutorySection,
    BankSection,
)
from hrdesk.utils.audit_utils import today_local

LETTERS_AND_SPACES = re.compile(r"^[a-zA-Z\s]+$")
UPPER_ALNUM = re.compile(r"^[A-Z0-9]+$")
EMAIL = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_CHARS = re.compile(r"^[0-9+\-\s()]+$")
PAN = re.compile(r"^[A-Z]{5}[0-9]{4}[A-Z]{1}$")
AADHAAR = re.compile(r"^[0-9]{12}$")
UAN = re.compile(r"^[0-9]{12}$")
ESIC = re.compile(r"^[0-9]{10}$")
PF_NUMBER = re.compile(r"^[A-Za-z0-9/-]{6,25}$")
ACCOUNT_NUMBER = re.compile(r"^[0-9]{9,18}$")
IFSC = re.compile(r"^[A-Z]{4}0[A-Z0-9]{6}$")
ACCOUNT_HOLDER = re.compile(r"^[a-zA-Z\s.]{2,100}$")
URL = re.compile(r"^https?://.+")

GENDERS = ("male", "female", "other")
MARITAL_STATUSES = ("single", "married", "divorced", "widowed", "separated")
EMPLOYMENT_TYPES = ("fulltime", "parttime", "contract", "intern")
EMPLOYMENT_STATUSES = ("active", "inactive")
EDUCATION_LEVELS = ("10th", "12th", "diploma", "undergraduate", "postgraduate", "other")

MIN_JOINING_DATE = date(1900, 1, 1)
MIN_EDUCATION_YEAR = 1950

DOCUMENT_LABELS = {
    "driveLink": "Document Link",
    "aadhaarUrl": "Aadhaar Document",
    "panUrl": "PAN Document",
    "passportUrl": "Passport Document",
    "resumeUrl": "Resume",
    "offerLetterUrl": "Offer Letter",
    "educationDocs": "Education Document",
    "otherDocs": "Other Document",
}


# ----------------------------------------------------------------------
# Primitive helpers
# ----------------------------------------------------------------------
def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _received(value: Any) -> str:
    return f' (received: "{value}")'


def _digit_count(value: Any) -> int:
    return len(re.sub(r"[^0-9]", "", str(value)))


def parse_date(value: Any) -> Optional[date]:
    """Read an ISO date or datetime string (``2024-01-01``, ``2024-01-01T00:00:00.000Z``)."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = _text(value)
    if not text:
        return None
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    try:
        return datetime.strptime(text[:10], "%Y-%m-%d").date()
    except ValueError:
        return None


def _to_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    text = _text(value)
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


# ----------------------------------------------------------------------
# Field validators
# ----------------------------------------------------------------------
def validate_required_text(
    value: Any,
    label: str,
    min_length: int = 2,
    max_length: int = 100,
    letters_only: bool = False,
    required: bool = True,
) -> List[str]:
    text = _text(value)
    if not text:
        return [f"{label} is required"] if required else []
    if len(text) < min_length:
        if min_length <= 1:
            return [f"{label} cannot be empty"]
        return [f"{label} must be at least {min_length} characters long{_received(text)}"]
    if len(text) > max_length:
        return [f"{label} cannot exceed {max_length} characters"]
    if letters_only and not LETTERS_AND_SPACES.match(text):
        return [f"{label} can only contain letters and spaces{_received(text)}"]
    return []


def validate_first_name(value: Any) -> List[str]:
    return validate_required_text(value, "First Name", 2, 50, letters_only=True)


def validate_last_name(value: Any) -> List[str]:
    return validate_required_text(value, "Last Name", 1, 50, letters_only=True)


def validate_identifier(value: Any, label: str, required: bool = True) -> List[str]:
    """Employee ID / Access Card Number: 3-20 uppercase letters and digits."""
    text = _text(value)
    if not text:
        return [f"{label} is required"] if required else []
    if len(text) < 3:
        return [f"{label} must be at least 3 characters long{_received(text)}"]
    if len(text) > 20:
        return [f"{label} cannot exceed 20 characters{_received(text)}"]
    if not UPPER_ALNUM.match(text):
        return [f"{label} can only contain uppercase letters and numbers{_received(text)}"]
    return []


def validate_employee_id(value: Any, required: bool = True) -> List[str]:
    return validate_identifier(value, "Employee ID", required)


def validate_access_card_number(value: Any, required: bool = True) -> List[str]:
    return validate_identifier(value, "Access Card Number", required)


def validate_dob(value: Any, today: Optional[date] = None) -> List[str]:
    """Optional. Age is the difference of calendar years only."""
    if not _text(value):
        return []
    today = today or today_local()
    dob = parse_date(value)
    if dob is None:
        return [f"Please enter a valid Date of Birth{_received(value)}"]
    age = today.year - dob.year
    if dob > today:
        return [f"Date of Birth cannot be in the future{_received(value)}"]
    if age < 18:
        return [f"Employee must be at least 18 years old{_received(value)}"]
    if age > 100:
        return [f"Please enter a valid Date of Birth{_received(value)}"]
    return []


def validate_choice(value: Any, label: str, choices: Iterable[str], required: bool = False) -> List[str]:
    text = _text(value)
    if not text:
        return [f"{label} is required"] if required else []
    if text not in choices:
        return [f"Please select a valid {label}{_received(text)}"]
    return []


def validate_email(value: Any) -> List[str]:
    text = _text(value)
    if not text:
        return ["Email Address is required"]
    if not EMAIL.match(text):
        return [f"Please enter a valid email address{_received(text)}"]
    if len(text) > 100:
        return ["Email address cannot exceed 100 characters"]
    return []


def validate_phone(value: Any, label: str = "Phone Number", required: bool = True) -> List[str]:
    text = _text(value)
    if not text:
        return [f"{label} is required"] if required else []
    if not PHONE_CHARS.match(text):
        return [f"{label} can only contain numbers, spaces, +, -, and parentheses{_received(text)}"]
    digits = _digit_count(text)
    if digits < 10:
        return [f"{label} must have at least 10 digits{_received(text)}"]
    if digits > 15:
        return [f"{label} cannot exceed 15 digits{_received(text)}"]
    return []


def validate_address(value: Any, label: str, required: bool = True) -> List[str]:
    return validate_required_text(value, label, 10, 500, required=required)


def validate_joining_date(value: Any, today: Optional[date] = None) -> List[str]:
    if not _text(value):
        return ["Joining Date is required"]
    today = today or today_local()
    joining = parse_date(value)
    if joining is None:
        return [f"Please enter a valid Joining Date{_received(value)}"]
    if joining > today:
        return [f"Joining Date cannot be in the future{_received(value)}"]
    if joining < MIN_JOINING_DATE:
        return [f"Please enter a valid Joining Date{_received(value)}"]
    return []


def validate_pattern(value: Any, label: str, pattern, format_hint: str, required: bool = True) -> List[str]:
    text = _text(value)
    if not text:
        return [f"{label} is required"] if required else []
    if not pattern.match(text):
        return [f"{label} must be {format_hint}{_received(text)}"]
    return []


def validate_pan(value: Any) -> List[str]:
    return validate_pattern(
        value, "PAN Number", PAN, "in format: AAAAA9999A (5 letters, 4 numbers, 1 letter)"
    )


def validate_aadhaar(value: Any) -> List[str]:
    return validate_pattern(value, "Aadhaar Number", AADHAAR, "exactly 12 digits")


def validate_uan(value: Any) -> List[str]:
    return validate_pattern(value, "UAN Number", UAN, "exactly 12 digits", required=False)


def validate_esic(value: Any) -> List[str]:
    return validate_pattern(value, "ESIC Number", ESIC, "exactly 10 digits", required=False)


def validate_pf_number(value: Any) -> List[str]:
    return validate_pattern(
        value, "PF Number", PF_NUMBER, '6-25 characters, letters/numbers/"/"/"-"', required=False
    )


def validate_account_number(value: Any) -> List[str]:
    return validate_pattern(value, "Account Number", ACCOUNT_NUMBER, "between 9 and 18 digits")


def validate_ifsc(value: Any) -> List[str]:
    return validate_pattern(
        value, "IFSC Code", IFSC, "in format: AAAA0XXXXXX (4 letters, 0, 6 alphanumeric)"
    )


def validate_account_holder_name(value: Any) -> List[str]:
    return validate_pattern(
        value, "Account Holder Name", ACCOUNT_HOLDER, "2-100 letters/spaces", required=False
    )


def validate_url(value: Any, label: str) -> List[str]:
    text = _text(value)
    if text and not URL.match(text):
        return [f"Please enter a valid URL for {label}{_received(text)}"]
    return []


# ----------------------------------------------------------------------
# List entries
# ----------------------------------------------------------------------
def validate_education_entry(entry: EducationEntry, index: int, today: Optional[date] = None) -> List[str]:
    prefix = f"Education {index + 1}: "
    today = today or today_local()
    errors: List[str] = []

    if _text(entry.level) and _text(entry.level) not in EDUCATION_LEVELS:
        errors.append(f"{prefix}Please select a valid Education Level{_received(entry.level)}")

    institution = _text(entry.institution)
    if not institution:
        errors.append(f"{prefix}Institution is required")
    elif len(institution) < 2:
        errors.append(f"{prefix}Institution must be at least 2 characters long{_received(institution)}")

    year = _to_number(entry.year)
    if not year or year != int(year) or year < MIN_EDUCATION_YEAR or year > today.year:
        errors.append(f"{prefix}Please enter a valid year{_received(entry.year)}")

    if entry.percentage is not None and _text(entry.percentage):
        percentage = _to_number(entry.percentage)
        if percentage is None or percentage < 0 or percentage > 100:
            errors.append(f"{prefix}Percentage must be between 0 and 100{_received(entry.percentage)}")

    return errors


def validate_experience_entry(entry: ExperienceEntry, index: int, today: Optional[date] = None) -> List[str]:
    prefix = f"Experience {index + 1}: "
    today = today or today_local()
    errors: List[str] = []

    for label, value in (
        ("Company", entry.company),
        ("Designation", entry.designation),
        ("Department", entry.department),
    ):
        text = _text(value)
        if not text:
            errors.append(f"{prefix}{label} is required")
        elif len(text) < 2:
            errors.append(f"{prefix}{label} must be at least 2 characters long{_received(text)}")

    from_date = parse_date(entry.from_date)
    if not _text(entry.from_date):
        errors.append(f"{prefix}From Date is required")
    elif from_date is None:
        errors.append(f"{prefix}Please enter a valid From Date{_received(entry.from_date)}")
    elif from_date > today:
        errors.append(f"{prefix}From Date cannot be in the future{_received(entry.from_date)}")

    # A current position is not checked against its end date at all
    if not entry.current and _text(entry.to):
        to_date = parse_date(entry.to)
        if to_date is None:
            errors.append(f"{prefix}Please enter a valid To Date{_received(entry.to)}")
        else:
            if from_date is not None and to_date < from_date:
                errors.append(
                    f"{prefix}To Date cannot be before From Date"
                    f' (received: from "{entry.from_date}", to "{entry.to}")'
                )
            if to_date > today:
                errors.append(f"{prefix}To Date cannot be in the future{_received(entry.to)}")

    return errors


# ----------------------------------------------------------------------
# Section validators
# ----------------------------------------------------------------------
def validate_personal(
    personal: Optional[PersonalSection],
    require_employee_id: bool = False,
    today: Optional[date] = None,
) -> List[str]:
    personal = personal or PersonalSection()
    errors: List[str] = []
    errors += validate_first_name(personal.firstName)
    errors += validate_last_name(personal.lastName)
    errors += validate_employee_id(personal.employeeId, required=require_employee_id)
    errors += validate_access_card_number(personal.accessCardNumber)
    errors += validate_dob(personal.dob, today)
    errors += validate_choice(personal.gender, "Gender", GENDERS)
    errors += validate_choice(personal.maritalStatus, "Marital Status", MARITAL_STATUSES)
    return errors


def validate_contact(contact: Optional[ContactSection]) -> List[str]:
    contact = contact or ContactSection()
    address = contact.address
    emergency = contact.emergencyContact
    errors: List[str] = []
    errors += validate_email(contact.email)
    errors += validate_phone(contact.phone, "Phone Number")
    errors += validate_phone(contact.alternatePhone, "Alternate Phone Number", required=False)
    errors += validate_address(address.current if address else None, "Current Address")
    errors += validate_address(address.permanent if address else None, "Permanent Address", required=False)
    errors += validate_required_text(
        emergency.name if emergency else None, "Emergency Contact Name", 2, 100, letters_only=True
    )
    errors += validate_required_text(
        emergency.relation if emergency else None, "Emergency Contact Relation", 2, 50
    )
    errors += validate_phone(emergency.phone if emergency else None, "Emergency Contact Phone Number")
    return errors


def validate_employment(employment: Optional[EmploymentSection], today: Optional[date] = None) -> List[str]:
    employment = employment or EmploymentSection()
    errors: List[str] = []
    errors += validate_required_text(employment.department, "Department", 2, 100)
    errors += validate_required_text(employment.designation, "Designation", 2, 100)
    errors += validate_joining_date(employment.joiningDate, today)
    errors += validate_choice(employment.employmentType, "Employment Type", EMPLOYMENT_TYPES)
    errors += validate_choice(employment.status, "Employment Status", EMPLOYMENT_STATUSES)
    return errors


def validate_statutory(statutory: Optional[StatutorySection]) -> List[str]:
    statutory = statutory or StatutorySection()
    errors: List[str] = []
    errors += validate_pan(statutory.pan)
    errors += validate_aadhaar(statutory.aadhaar)
    errors += validate_uan(statutory.uan)
    errors += validate_pf_number(statutory.pfNumber)
    errors += validate_esic(statutory.esic)
    return errors


def validate_bank(bank: Optional[BankSection]) -> List[str]:
    bank = bank or BankSection()
    errors: List[str] = []
    errors += validate_account_holder_name(bank.accountHolderName)
    errors += validate_account_number(bank.accountNumber)
    errors += validate_ifsc(bank.ifsc)
    errors += validate_required_text(bank.bankName, "Bank Name", 2, 100)
    errors += validate_required_text(bank.branch, "Branch", 2, 100)
    return errors


def validate_education(entries: Optional[List[EducationEntry]], today: Optional[date] = None) -> List[str]:
    errors: List[str] = []
    for index, entry in enumerate(entries or []):
        errors += validate_education_entry(entry, index, today)
    return errors


def validate_experience(entries: Optional[List[ExperienceEntry]], today: Optional[date] = None) -> List[str]:
    errors: List[str] = []
    for index, entry in enumerate(entries or []):
        errors += validate_experience_entry(entry, index, today)
    return errors


def validate_documents(documents: Optional[DocumentsSection]) -> List[str]:
    """Every non-empty document link, single or listed, must be an http(s) URL."""
    if documents is None:
        return []
    errors: List[str] = []
    for key, value in documents.present_fields().items():
        label = DOCUMENT_LABELS.get(key, key)
        if isinstance(value, list):
            for position, item in enumerate(value):
                errors += validate_url(item, f"{label} {position + 1}")
        elif isinstance(value, str):
            errors += validate_url(value, label)
    return errors


# ----------------------------------------------------------------------
# Aggregator
# ----------------------------------------------------------------------
def _validate_personal_section(payload: EmployeePayload, today: date, partial: bool) -> List[str]:
    # An update may omit the employee ID but never blank a stored one.
    sent_id = partial and "employeeId" in payload.section("personal")
    return validate_personal(payload.personal, require_employee_id=sent_id, today=today)


SECTION_VALIDATORS = (
    ("personal", _validate_personal_section),
    ("contact", lambda payload, today, partial: validate_contact(payload.contact)),
    ("employment", lambda payload, today, partial: validate_employment(payload.employment, today)),
    ("statutory", lambda payload, today, partial: validate_statutory(payload.statutory)),
    ("bank", lambda payload, today, partial: validate_bank(payload.bank)),
    ("education", lambda payload, today, partial: validate_education(payload.education, today)),
    ("experience", lambda payload, today, partial: validate_experience(payload.experience, today)),
    ("documents", lambda payload, today, partial: validate_documents(payload.documents)),
)


def validate_employee_payload(
    payload: EmployeePayload,
    partial: bool = False,
    today: Optional[date] = None,
) -> List[str]:
    """
    Run every section validator and return all messages in section order.

    With ``partial=True`` (updates) sections the client did not send are
    skipped; a section that was sent is validated as a whole. The employee
    ID is optional on create because a missing one is generated; an update
    that sends one must not leave it empty.
    """
    today = today or today_local()
    errors: List[str] = []
    for name, validator in SECTION_VALIDATORS:
        if partial and not payload.was_sent(name):
            continue
        errors += validator(payload, today, partial)
    return errors
