import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import DuplicateKeyError, PyMongoError

from config import settings
from hrdesk.database import get_database
from hrdesk.schemas.employee_schema import EmployeePayload, parse_employee_payload
from hrdesk.services.employee_merge import (
    build_new_record,
    final_identity,
    merge_employee_record,
    normalize_email,
)
from hrdesk.utils.audit_utils import build_audit_fields
from hrdesk.utils.code_generator import generate_employee_id
from hrdesk.utils.hashing import hash_password
from hrdesk.utils.service_call import ServiceError
from hrdesk.validators.employee_validators import validate_employee_payload

logger = logging.getLogger(__name__)

# Unique keys and how a collision on each is reported
UNIQUE_FIELDS = (
    ("email", "Email"),
    ("personal.employeeId", "Employee ID"),
    ("personal.accessCardNumber", "Access Card Number"),
)


class EmployeeServiceError(ServiceError):
    """Domain error for employee operations."""


@dataclass
class BulkImportResult:
    total: int = 0
    success: int = 0
    failed: int = 0
    errors: List[Dict[str, Any]] = field(default_factory=list)
    successful_employees: List[Dict[str, Any]] = field(default_factory=list)

    def record_success(self, employee: Dict[str, Any]) -> None:
        self.success += 1
        self.successful_employees.append(employee)

    def record_failure(self, index: int, name: str, errors: List[str]) -> None:
        self.failed += 1
        self.errors.append({"index": index + 1, "name": name, "errors": errors})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "results": {
                "total": self.total,
                "success": self.success,
                "failed": self.failed,
                "errors": self.errors,
            },
            "successfulEmployees": self.successful_employees,
        }


def redact(document: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in document.items() if key != "password"}


def parse_object_id(value: Any) -> Optional[ObjectId]:
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None


def duplicate_key_message(exc: DuplicateKeyError) -> str:
    """Turn a unique-index violation into the field message clients expect."""
    details = exc.details or {}
    key_value = details.get("keyValue") or {}
    key_pattern = details.get("keyPattern") or {}
    keys = list(key_value) or list(key_pattern)
    if not keys:
        text = str(exc)
        keys = [path for path, _ in UNIQUE_FIELDS if path in text]
    labels = dict(UNIQUE_FIELDS)
    for key in keys:
        if key in labels:
            return f"{labels[key]} already exists"
    return f"{keys[0] if keys else 'Record'} already exists"


class EmployeeService:
    """Create, update, import and query employee records."""

    def __init__(self, database=None):
        self.db = database if database is not None else get_database()
        self.users = self.db["users"]
        self.counters = self.db["counters"]

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------
    def ensure_indexes(self) -> None:
        self.users.create_index([("email", ASCENDING)], unique=True, name="email_unique")
        self.users.create_index(
            [("personal.employeeId", ASCENDING)], unique=True, sparse=True, name="employee_id_unique"
        )
        self.users.create_index(
            [("personal.accessCardNumber", ASCENDING)],
            unique=True,
            sparse=True,
            name="access_card_unique",
        )
        self.users.create_index([("created_at", DESCENDING)], name="created_at_desc")

    # ------------------------------------------------------------------
    # Uniqueness
    # ------------------------------------------------------------------
    def find_duplicate(
        self,
        email: Optional[str],
        employee_id: Optional[str],
        access_card: Optional[str],
        exclude_id: Optional[ObjectId] = None,
    ) -> Optional[str]:
        """
        Return the first collision message (email, then employee id, then
        access card) or None. ``exclude_id`` is the record being updated.
        """
        candidates = (
            ("email", normalize_email(email), "Email already exists"),
            ("personal.employeeId", (employee_id or "").strip(), "Employee ID already exists"),
            ("personal.accessCardNumber", (access_card or "").strip(), "Access Card Number already exists"),
        )
        for path, value, message in candidates:
            if not value:
                continue
            query: Dict[str, Any] = {path: value}
            if exclude_id is not None:
                query["_id"] = {"$ne": exclude_id}
            if self.users.find_one(query, {"_id": 1}):
                return message
        return None

    # ------------------------------------------------------------------
    # Create / update
    # ------------------------------------------------------------------
    def _parse(self, data: Any, partial: bool = False) -> EmployeePayload:
        payload, errors = parse_employee_payload(data)
        if payload is not None:
            errors = validate_employee_payload(payload, partial=partial)
        if errors:
            raise EmployeeServiceError("Validation Error", status_code=400, errors=errors)
        return payload

    def _prepare_new_record(self, data: Any, actor: Optional[str] = None) -> Dict[str, Any]:
        payload = self._parse(data)
        personal = payload.personal
        contact = payload.contact

        duplicate = self.find_duplicate(
            contact.email if contact else None,
            personal.employeeId if personal else None,
            personal.accessCardNumber if personal else None,
        )
        if duplicate:
            raise EmployeeServiceError(duplicate)

        employee_id = (personal.employeeId or "").strip() if personal else ""
        if not employee_id:
            employee_id = generate_employee_id(self.users, self.counters)
            logger.info("Assigned employee id %s", employee_id)

        password_hash = hash_password(employee_id or settings.DEFAULT_EMPLOYEE_PASSWORD)
        record = build_new_record(payload, employee_id, password_hash)
        record.update(build_audit_fields(prefix="created", by=actor))
        record.update(build_audit_fields(prefix="updated", by=actor))
        return record

    def _insert(self, record: Dict[str, Any]) -> Dict[str, Any]:
        try:
            result = self.users.insert_one(record)
        except DuplicateKeyError as exc:
            raise EmployeeServiceError(duplicate_key_message(exc)) from exc
        record["_id"] = result.inserted_id
        return redact(record)

    def create_employee(self, data: Any, actor: Optional[str] = None) -> Dict[str, Any]:
        record = self._prepare_new_record(data, actor)
        logger.debug("Creating employee %s", redact(record))
        employee = self._insert(record)
        logger.info("Employee %s created (%s)", employee["personal"].get("employeeId"), employee["_id"])
        return employee

    def update_employee(self, employee_id: Any, data: Any, actor: Optional[str] = None) -> Dict[str, Any]:
        object_id = parse_object_id(employee_id)
        existing = self.users.find_one({"_id": object_id}) if object_id else None
        if not existing:
            raise EmployeeServiceError("Employee not found", status_code=404)

        payload = self._parse(data, partial=True)
        updates = merge_employee_record(existing, payload)

        identity = final_identity(existing, updates)
        duplicate = self.find_duplicate(
            identity["email"], identity["employee_id"], identity["access_card"], exclude_id=object_id
        )
        if duplicate:
            raise EmployeeServiceError(duplicate)

        updates.update(build_audit_fields(prefix="updated", by=actor))
        logger.debug("Updating employee %s with %s", object_id, redact(updates))
        try:
            self.users.update_one({"_id": object_id}, {"$set": updates})
        except DuplicateKeyError as exc:
            raise EmployeeServiceError(duplicate_key_message(exc)) from exc

        logger.info("Employee %s updated", object_id)
        return self.users.find_one({"_id": object_id}, {"password": 0})

    # ------------------------------------------------------------------
    # Bulk import
    # ------------------------------------------------------------------
    def bulk_import(self, items: List[Any], actor: Optional[str] = None) -> BulkImportResult:
        """
        Create every item independently. A failing item is reported with its
        1-based position and never stops the rest of the batch; items created
        before it stay created.
        """
        result = BulkImportResult(total=len(items))
        for index, item in enumerate(items):
            try:
                record = self._prepare_new_record(item, actor)
                result.record_success(self._insert(record))
            except EmployeeServiceError as exc:
                result.record_failure(index, self._display_name(item, index), exc.errors or [exc.message])
            except PyMongoError as exc:
                logger.exception("Bulk import item %s failed", index + 1)
                result.record_failure(index, self._display_name(item, index), [str(exc)])

        logger.info(
            "Bulk import finished: %s total, %s created, %s failed",
            result.total, result.success, result.failed,
        )
        return result

    @staticmethod
    def _display_name(item: Any, index: int) -> str:
        personal = item.get("personal") if isinstance(item, dict) else None
        if isinstance(personal, dict):
            parts = [str(personal.get(key) or "").strip() for key in ("firstName", "lastName")]
            name = " ".join(part for part in parts if part)
            if name:
                return name
        return f"Employee {index + 1}"

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def list_employees(
        self,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        role: Optional[str] = None,
        department: Optional[str] = None,
        status: Optional[str] = None,
    ) -> Dict[str, Any]:
        page = max(int(page or 1), 1)
        limit = max(int(limit or 10), 1)

        query: Dict[str, Any] = {}
        search = (search or "").strip()
        if search:
            regex = {"$regex": re.escape(search), "$options": "i"}
            query["$or"] = [
                {"firstName": regex},
                {"lastName": regex},
                {"email": regex},
                {"personal.employeeId": regex},
                {"personal.accessCardNumber": regex},
                {"statutory.esic": regex},
            ]
        if role:
            query["role"] = role
        if department:
            query["employment.department"] = department
        if status:
            query["employment.status"] = status

        cursor = (
            self.users.find(query, {"password": 0})
            .sort("created_at", DESCENDING)
            .skip((page - 1) * limit)
            .limit(limit)
        )
        employees = list(cursor)
        total = self.users.count_documents(query)
        total_pages = math.ceil(total / limit)

        return {
            "employees": employees,
            "pagination": {
                "currentPage": page,
                "totalPages": total_pages,
                "totalEmployees": total,
                "hasNext": page < total_pages,
                "hasPrev": page > 1,
            },
        }

    def get_employee(self, employee_id: Any) -> Dict[str, Any]:
        object_id = parse_object_id(employee_id)
        employee = self.users.find_one({"_id": object_id}, {"password": 0}) if object_id else None
        if not employee:
            raise EmployeeServiceError("Employee not found", status_code=404)
        return employee

    def delete_employee(self, employee_id: Any) -> None:
        object_id = parse_object_id(employee_id)
        result = self.users.delete_one({"_id": object_id}) if object_id else None
        if result is None or result.deleted_count == 0:
            raise EmployeeServiceError("Employee not found", status_code=404)
        logger.info("Employee %s deleted", object_id)

    def all_employees(self) -> List[Dict[str, Any]]:
        """Every employee record, newest first, for export."""
        return list(
            self.users.find({"role": "employee"}, {"password": 0}).sort("created_at", DESCENDING)
        )
