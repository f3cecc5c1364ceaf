import logging
import math
import re
from typing import Any, Dict, Optional

from pymongo import DESCENDING
from pymongo.errors import DuplicateKeyError

from hrdesk.database import get_database
from hrdesk.services.employee_merge import normalize_email
from hrdesk.services.employee_service import parse_object_id
from hrdesk.utils.audit_utils import build_audit_fields
from hrdesk.utils.hashing import hash_password
from hrdesk.utils.service_call import ServiceError

logger = logging.getLogger(__name__)

ROLES = ("admin", "hr", "employee")
MIN_PASSWORD_LENGTH = 6
REQUIRED_FIELDS = ("firstName", "lastName", "email", "password", "role")


class UserServiceError(ServiceError):
    """Domain error for user account management."""


def serialize_user(user: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "_id": user.get("_id"),
        "firstName": user.get("firstName"),
        "lastName": user.get("lastName"),
        "email": user.get("email"),
        "role": user.get("role"),
        "createdAt": user.get("created_at"),
    }


class UserService:
    def __init__(self, database=None):
        self.db = database if database is not None else get_database()
        self.users = self.db["users"]

    def list_users(
        self,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        role: Optional[str] = None,
    ) -> Dict[str, Any]:
        page = max(int(page or 1), 1)
        limit = max(int(limit or 10), 1)

        query: Dict[str, Any] = {}
        search = (search or "").strip()
        if search:
            regex = {"$regex": re.escape(search), "$options": "i"}
            query["$or"] = [{"firstName": regex}, {"lastName": regex}, {"email": regex}]
        # Employees have their own listing
        query["role"] = role if role else {"$ne": "employee"}

        users = list(
            self.users.find(query, {"password": 0})
            .sort("created_at", DESCENDING)
            .skip((page - 1) * limit)
            .limit(limit)
        )
        total = self.users.count_documents(query)
        total_pages = math.ceil(total / limit)
        return {
            "users": users,
            "pagination": {
                "currentPage": page,
                "totalPages": total_pages,
                "totalUsers": total,
                "hasNext": page < total_pages,
                "hasPrev": page > 1,
            },
        }

    def create_user(self, data: Dict[str, Any], actor: Optional[str] = None) -> Dict[str, Any]:
        if any(not str(data.get(key) or "").strip() for key in REQUIRED_FIELDS):
            raise UserServiceError("All fields are required")

        role = data["role"].strip()
        if role not in ROLES:
            raise UserServiceError(f"Role must be one of: {', '.join(ROLES)}")
        if len(data["password"]) < MIN_PASSWORD_LENGTH:
            raise UserServiceError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")

        email = normalize_email(data["email"])
        if self.users.find_one({"email": email}, {"_id": 1}):
            raise UserServiceError("User already exists with this email")

        user = {
            "firstName": data["firstName"].strip(),
            "lastName": data["lastName"].strip(),
            "email": email,
            "password": hash_password(data["password"]),
            "role": role,
            "isActive": True,
        }
        user.update(build_audit_fields(prefix="created", by=actor))
        user.update(build_audit_fields(prefix="updated", by=actor))
        try:
            result = self.users.insert_one(user)
        except DuplicateKeyError as exc:
            raise UserServiceError("User already exists with this email") from exc
        user["_id"] = result.inserted_id
        logger.info("User %s created with role %s", email, role)
        return serialize_user(user)

    def update_user(self, user_id: Any, data: Dict[str, Any], actor: Optional[str] = None) -> Dict[str, Any]:
        object_id = parse_object_id(user_id)
        user = self.users.find_one({"_id": object_id}) if object_id else None
        if not user:
            raise UserServiceError("User not found", status_code=404)

        updates: Dict[str, Any] = {}
        email = normalize_email(data.get("email"))
        if email and email != user.get("email"):
            if self.users.find_one({"email": email, "_id": {"$ne": object_id}}, {"_id": 1}):
                raise UserServiceError("Email already exists")
            updates["email"] = email

        for key in ("firstName", "lastName"):
            if data.get(key):
                updates[key] = str(data[key]).strip()
        if data.get("role"):
            if data["role"] not in ROLES:
                raise UserServiceError(f"Role must be one of: {', '.join(ROLES)}")
            updates["role"] = data["role"]
        if data.get("password"):
            if len(data["password"]) < MIN_PASSWORD_LENGTH:
                raise UserServiceError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
            updates["password"] = hash_password(data["password"])

        updates.update(build_audit_fields(prefix="updated", by=actor))
        self.users.update_one({"_id": object_id}, {"$set": updates})
        user.update(updates)
        logger.info("User %s updated", object_id)
        return serialize_user(user)

    def delete_user(self, user_id: Any) -> None:
        object_id = parse_object_id(user_id)
        result = self.users.delete_one({"_id": object_id}) if object_id else None
        if result is None or result.deleted_count == 0:
            raise UserServiceError("User not found", status_code=404)
        logger.info("User %s deleted", object_id)
