"""
Excel workbooks for employees.

A workbook carries one row per employee per education/experience position,
so an employee with two degrees and three jobs spans three rows. Import
groups rows back together by ``Employee ID``.
"""
import io
import logging
from datetime import date, datetime
from typing import Any, Dict, Iterable, List

import pandas as pd

from hrdesk.utils.audit_utils import today_local
from hrdesk.utils.service_call import ServiceError

logger = logging.getLogger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# (heading, column width)
BASE_COLUMNS = [
    ("Employee ID", 15),
    ("Access Card Number", 18),
    ("First Name", 15),
    ("Last Name", 15),
    ("Email", 25),
    ("Phone", 15),
    ("Alternate Phone", 15),
    ("Date of Birth", 12),
    ("Gender", 10),
    ("Blood Group", 12),
    ("Marital Status", 15),
    ("Current Address", 30),
    ("Permanent Address", 30),
    ("Emergency Contact Name", 20),
    ("Emergency Contact Relation", 15),
    ("Emergency Contact Phone", 15),
    ("Department", 15),
    ("Designation", 20),
    ("Joining Date", 12),
    ("Employment Type", 15),
    ("Status", 10),
    ("PAN", 15),
    ("Aadhaar", 15),
    ("UAN", 15),
    ("ESIC", 15),
    ("Bank Account Number", 20),
    ("IFSC", 15),
    ("Bank Name", 20),
    ("Branch", 20),
    ("Account Type", 15),
    ("Document Link", 30),
]
ENTRY_COLUMNS = [
    ("Education Level", 15),
    ("Education Institution", 25),
    ("Education Year", 10),
    ("Education Percentage", 12),
    ("Experience Company", 20),
    ("Experience Designation", 20),
    ("Experience Department", 15),
    ("Experience From Date", 12),
    ("Experience To Date", 12),
    ("Experience Current", 10),
]
AUDIT_COLUMNS = [("Created At", 12), ("Updated At", 12)]

EXPORT_COLUMNS = BASE_COLUMNS + ENTRY_COLUMNS + AUDIT_COLUMNS
TEMPLATE_COLUMNS = BASE_COLUMNS + ENTRY_COLUMNS

TEMPLATE_EMPLOYEE = {
    "Employee ID": "EMP001",
    "Access Card Number": "AC123456",
    "First Name": "John",
    "Last Name": "Doe",
    "Email": "john.doe@example.com",
    "Phone": "+1234567890",
    "Alternate Phone": "+0987654321",
    "Date of Birth": "1990-01-01",
    "Gender": "male",
    "Blood Group": "O+",
    "Marital Status": "single",
    "Current Address": "123 Main St, City, State",
    "Permanent Address": "123 Main St, City, State",
    "Emergency Contact Name": "Jane Doe",
    "Emergency Contact Relation": "Sister",
    "Emergency Contact Phone": "+1122334455",
    "Department": "IT",
    "Designation": "Software Developer",
    "Joining Date": "2024-01-01",
    "Employment Type": "fulltime",
    "Status": "active",
    "PAN": "ABCDE1234F",
    "Aadhaar": "123456789012",
    "UAN": "123456789012",
    "ESIC": "1234567890",
    "Bank Account Number": "1234567890",
    "IFSC": "SBIN0001234",
    "Bank Name": "State Bank of India",
    "Branch": "Main Branch",
    "Account Type": "savings",
    "Document Link": "https://drive.google.com/drive/folders/example",
}
BLANK_EDUCATION = {
    "Education Level": "",
    "Education Institution": "",
    "Education Year": "",
    "Education Percentage": "",
}
BLANK_EXPERIENCE = {
    "Experience Company": "",
    "Experience Designation": "",
    "Experience Department": "",
    "Experience From Date": "",
    "Experience To Date": "",
    "Experience Current": "No",
}
TEMPLATE_ROWS = [
    {
        **TEMPLATE_EMPLOYEE,
        "Education Level": "undergraduate",
        "Education Institution": "University of Technology",
        "Education Year": "2020",
        "Education Percentage": "85",
        "Experience Company": "Tech Corp",
        "Experience Designation": "Software Developer",
        "Experience Department": "Engineering",
        "Experience From Date": "2022-01-01",
        "Experience To Date": "2024-01-01",
        "Experience Current": "No",
    },
    {
        **TEMPLATE_EMPLOYEE,
        "Education Level": "postgraduate",
        "Education Institution": "Advanced Institute",
        "Education Year": "2022",
        "Education Percentage": "90",
        **BLANK_EXPERIENCE,
    },
    {
        **TEMPLATE_EMPLOYEE,
        **BLANK_EDUCATION,
        "Experience Company": "Startup Inc",
        "Experience Designation": "Senior Developer",
        "Experience Department": "Engineering",
        "Experience From Date": "2024-01-01",
        "Experience To Date": "",
        "Experience Current": "Yes",
    },
]

TRUE_FLAGS = {"yes", "true"}


class ExcelServiceError(ServiceError):
    """Raised for workbooks that cannot be read."""


def _date_text(value: Any) -> str:
    if isinstance(value, (datetime, date)):
        return value.strftime("%Y-%m-%d")
    text = str(value or "").strip()
    return text.split("T")[0].split(" ")[0]


def _cell(row: Dict[str, Any], heading: str, default: str = "") -> str:
    text = str(row.get(heading) or "").strip()
    return text or default


def _write_workbook(rows: List[Dict[str, Any]], columns, sheet_name: str) -> bytes:
    headings = [heading for heading, _ in columns]
    frame = pd.DataFrame(rows, columns=headings)
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        frame.to_excel(writer, index=False, sheet_name=sheet_name)
        worksheet = writer.sheets[sheet_name]
        for position, (_, width) in enumerate(columns):
            letter = worksheet.cell(row=1, column=position + 1).column_letter
            worksheet.column_dimensions[letter].width = width
    return buffer.getvalue()


# ----------------------------------------------------------------------
# Export
# ----------------------------------------------------------------------
def employee_rows(employee: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Flatten one employee into at least one row."""
    personal = employee.get("personal") or {}
    contact = employee.get("contact") or {}
    address = contact.get("address") or {}
    emergency = contact.get("emergencyContact") or {}
    employment = employee.get("employment") or {}
    statutory = employee.get("statutory") or {}
    bank = employee.get("bank") or {}
    documents = employee.get("documents") or {}
    education = employee.get("education") or []
    experience = employee.get("experience") or []

    base = {
        "Employee ID": personal.get("employeeId") or "",
        "Access Card Number": personal.get("accessCardNumber") or "",
        "First Name": employee.get("firstName") or personal.get("firstName") or "",
        "Last Name": employee.get("lastName") or personal.get("lastName") or "",
        "Email": employee.get("email") or contact.get("email") or "",
        "Phone": contact.get("phone") or "",
        "Alternate Phone": contact.get("alternatePhone") or "",
        "Date of Birth": _date_text(personal.get("dob")),
        "Gender": personal.get("gender") or "",
        "Blood Group": personal.get("bloodGroup") or "",
        "Marital Status": personal.get("maritalStatus") or "",
        "Current Address": address.get("current") or "",
        "Permanent Address": address.get("permanent") or "",
        "Emergency Contact Name": emergency.get("name") or "",
        "Emergency Contact Relation": emergency.get("relation") or "",
        "Emergency Contact Phone": emergency.get("phone") or "",
        "Department": employment.get("department") or "",
        "Designation": employment.get("designation") or "",
        "Joining Date": _date_text(employment.get("joiningDate")),
        "Employment Type": employment.get("employmentType") or "",
        "Status": employment.get("status") or "",
        "PAN": statutory.get("pan") or "",
        "Aadhaar": statutory.get("aadhaar") or "",
        "UAN": statutory.get("uan") or "",
        "ESIC": statutory.get("esic") or "",
        "Bank Account Number": bank.get("accountNumber") or "",
        "IFSC": bank.get("ifsc") or "",
        "Bank Name": bank.get("bankName") or "",
        "Branch": bank.get("branch") or "",
        "Account Type": bank.get("accountType") or "",
        "Document Link": documents.get("driveLink") or "",
        "Created At": _date_text(employee.get("created_at")),
        "Updated At": _date_text(employee.get("updated_at")),
    }

    rows = []
    for index in range(max(len(education), len(experience), 1)):
        school = education[index] if index < len(education) else {}
        job = experience[index] if index < len(experience) else {}
        rows.append(
            {
                **base,
                "Education Level": school.get("level") or "",
                "Education Institution": school.get("institution") or "",
                "Education Year": school.get("year") or "",
                "Education Percentage": school.get("percentage") or "",
                "Experience Company": job.get("company") or "",
                "Experience Designation": job.get("designation") or "",
                "Experience Department": job.get("department") or "",
                "Experience From Date": _date_text(job.get("from")),
                "Experience To Date": _date_text(job.get("to")),
                "Experience Current": "Yes" if job.get("current") else "No",
            }
        )
    return rows


def export_employees(employees: Iterable[Dict[str, Any]]) -> bytes:
    rows: List[Dict[str, Any]] = []
    for employee in employees:
        rows.extend(employee_rows(employee))
    logger.info("Exporting %s employee rows", len(rows))
    return _write_workbook(rows, EXPORT_COLUMNS, "Employees")


def build_template() -> bytes:
    return _write_workbook(TEMPLATE_ROWS, TEMPLATE_COLUMNS, "Template")


# ----------------------------------------------------------------------
# Import
# ----------------------------------------------------------------------
def _base_payload(row: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "personal": {
            "firstName": _cell(row, "First Name"),
            "lastName": _cell(row, "Last Name"),
            "employeeId": _cell(row, "Employee ID"),
            "accessCardNumber": _cell(row, "Access Card Number"),
            "dob": _date_text(row.get("Date of Birth")),
            "gender": _cell(row, "Gender", "male"),
            "bloodGroup": _cell(row, "Blood Group"),
            "maritalStatus": _cell(row, "Marital Status", "single"),
        },
        "contact": {
            "email": _cell(row, "Email"),
            "phone": _cell(row, "Phone"),
            "alternatePhone": _cell(row, "Alternate Phone"),
            "address": {
                "current": _cell(row, "Current Address"),
                "permanent": _cell(row, "Permanent Address"),
            },
            "emergencyContact": {
                "name": _cell(row, "Emergency Contact Name"),
                "relation": _cell(row, "Emergency Contact Relation"),
                "phone": _cell(row, "Emergency Contact Phone"),
            },
        },
        "employment": {
            "department": _cell(row, "Department"),
            "designation": _cell(row, "Designation"),
            "joiningDate": _date_text(row.get("Joining Date")),
            "employmentType": _cell(row, "Employment Type", "fulltime"),
            "status": _cell(row, "Status", "active"),
        },
        "statutory": {
            "pan": _cell(row, "PAN"),
            "aadhaar": _cell(row, "Aadhaar"),
            "uan": _cell(row, "UAN"),
            "esic": _cell(row, "ESIC"),
        },
        "bank": {
            "accountNumber": _cell(row, "Bank Account Number"),
            "ifsc": _cell(row, "IFSC"),
            "bankName": _cell(row, "Bank Name"),
            "branch": _cell(row, "Branch"),
            "accountType": _cell(row, "Account Type", "savings"),
        },
        "documents": {"driveLink": _cell(row, "Document Link")},
        "education": [],
        "experience": [],
    }


def _whole_number(text: str, default: int) -> int:
    try:
        return int(float(text))
    except ValueError:
        return default


def _decimal(text: str, default: float) -> float:
    try:
        return float(text)
    except ValueError:
        return default


def rows_to_payloads(rows: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Group sheet rows into nested employee payloads, in first-seen order."""
    employees: Dict[str, Dict[str, Any]] = {}
    for row in rows:
        employee_id = _cell(row, "Employee ID")
        if not employee_id:
            continue
        if employee_id not in employees:
            employees[employee_id] = _base_payload(row)
        payload = employees[employee_id]

        if _cell(row, "Education Level") or _cell(row, "Education Institution"):
            payload["education"].append(
                {
                    "level": _cell(row, "Education Level", "undergraduate"),
                    "institution": _cell(row, "Education Institution"),
                    "year": _whole_number(_cell(row, "Education Year"), today_local().year),
                    "percentage": _decimal(_cell(row, "Education Percentage"), 0),
                }
            )

        if _cell(row, "Experience Company") or _cell(row, "Experience Designation"):
            payload["experience"].append(
                {
                    "company": _cell(row, "Experience Company"),
                    "designation": _cell(row, "Experience Designation"),
                    "department": _cell(row, "Experience Department"),
                    "from": _date_text(row.get("Experience From Date")),
                    "to": _date_text(row.get("Experience To Date")),
                    "current": _cell(row, "Experience Current").lower() in TRUE_FLAGS,
                }
            )
    return list(employees.values())


def read_workbook(content: bytes) -> List[Dict[str, Any]]:
    """Parse the first sheet of an uploaded workbook into employee payloads."""
    try:
        frame = pd.read_excel(io.BytesIO(content), sheet_name=0, dtype=str, engine="openpyxl")
    except Exception as exc:
        logger.warning("Unreadable workbook: %s", exc)
        raise ExcelServiceError("Failed to parse Excel file. Please check the file format.") from exc
    frame = frame.fillna("")
    return rows_to_payloads(frame.to_dict(orient="records"))
