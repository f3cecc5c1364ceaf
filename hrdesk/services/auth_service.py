import logging
from typing import Any, Dict, Optional

from hrdesk.database import get_database
from hrdesk.services.employee_merge import normalize_email
from hrdesk.utils.audit_utils import now_utc
from hrdesk.utils.auth_utils import create_jwt_token
from hrdesk.utils.hashing import verify_password

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, database=None):
        self.db = database if database is not None else get_database()
        self.user_collection = self.db["users"]

    def authenticate_user(self, email: str, password: str) -> Optional[Dict[str, Any]]:
        user = self.user_collection.find_one({"email": normalize_email(email)})
        if not user or not user.get("password"):
            return None
        if user.get("isActive") is False:
            return None
        if not verify_password(password, user["password"]):
            return None
        return user

    def login(self, email: str, password: str) -> Optional[Dict[str, Any]]:
        user = self.authenticate_user(email, password)
        if not user:
            logger.info("Failed login for %s", email)
            return None

        last_login = now_utc()
        self.user_collection.update_one({"_id": user["_id"]}, {"$set": {"lastLogin": last_login}})
        token = create_jwt_token(user)
        return {"user": self._serialize_user(user, last_login), "token": token}

    def _serialize_user(self, user: Dict[str, Any], last_login) -> Dict[str, Any]:
        """Return sanitized user profile for API responses."""
        return {
            "id": str(user["_id"]),
            "firstName": user.get("firstName", ""),
            "lastName": user.get("lastName", ""),
            "email": user.get("email"),
            "role": user.get("role", "employee"),
            "employeeId": (user.get("personal") or {}).get("employeeId"),
            "lastLogin": last_login,
        }
