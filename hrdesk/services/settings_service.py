import logging
import platform
import sys
import time
from typing import Any, Dict, Optional

from pydantic import ValidationError

from hrdesk.database import get_database
from hrdesk.schemas.settings_schema import SETTINGS_SECTIONS, default_settings
from hrdesk.utils.audit_utils import now_utc
from hrdesk.utils.service_call import ServiceError

logger = logging.getLogger(__name__)

EXPORT_TYPES = ("employees", "settings", "all")
PROCESS_STARTED_AT = time.monotonic()


class SettingsServiceError(ServiceError):
    """Domain error for application settings."""


class SettingsService:
    """The single settings document and the admin operations around it."""

    def __init__(self, database=None):
        self.db = database if database is not None else get_database()
        self.collection = self.db["settings"]
        self.users = self.db["users"]

    def _create_defaults(self, actor: Optional[str] = None) -> Dict[str, Any]:
        document = default_settings()
        now = now_utc()
        document.update({"created_at": now, "lastModified": now, "modifiedBy": actor})
        document["_id"] = self.collection.insert_one(document).inserted_id
        logger.info("Default settings created")
        return document

    def get_settings(self) -> Dict[str, Any]:
        return self.collection.find_one({}) or self._create_defaults()

    def update_section(self, section: str, values: Any, actor: Optional[str] = None) -> Dict[str, Any]:
        """Merge ``values`` into one section and return the stored section."""
        if section not in SETTINGS_SECTIONS:
            raise SettingsServiceError(f"Unknown settings section: {section}", status_code=404)
        if not isinstance(values, dict):
            raise SettingsServiceError(f"{section} settings must be an object")

        key, model = SETTINGS_SECTIONS[section]
        if key == "company" and (not values.get("name") or not values.get("domain")):
            raise SettingsServiceError("Company name and domain are required")

        current = self.get_settings()
        merged = dict(current.get(key) or {})
        merged.update(values)
        try:
            validated = model.model_validate(merged).model_dump()
        except ValidationError as exc:
            errors = [
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
            ]
            raise SettingsServiceError("Validation Error", errors=errors) from exc

        self.collection.update_one(
            {"_id": current["_id"]},
            {"$set": {key: validated, "lastModified": now_utc(), "modifiedBy": actor}},
        )
        logger.info("Settings section %s updated by %s", key, actor)
        return validated

    def export_data(self, data_type: Optional[str]) -> Dict[str, Any]:
        if data_type not in EXPORT_TYPES:
            raise SettingsServiceError(f"dataType must be one of: {', '.join(EXPORT_TYPES)}")
        export: Dict[str, Any] = {}
        if data_type in ("all", "settings"):
            export["settings"] = self.collection.find_one({})
        if data_type in ("all", "employees"):
            export["employees"] = list(self.users.find({"role": {"$ne": "admin"}}, {"password": 0}))
        return export

    def generate_report(self) -> Dict[str, Any]:
        return {
            "systemInfo": {
                "totalUsers": self.users.count_documents({}),
                "totalEmployees": self.users.count_documents({"role": {"$ne": "admin"}}),
                "totalAdmins": self.users.count_documents({"role": "admin"}),
                "systemUptime": round(time.monotonic() - PROCESS_STARTED_AT, 3),
                "pythonVersion": platform.python_version(),
                "platform": sys.platform,
            },
            "settings": self.collection.find_one({}),
            "generatedAt": now_utc().isoformat(),
        }

    def reset(self, confirm: Any, actor: Optional[str] = None) -> Dict[str, Any]:
        if not confirm:
            raise SettingsServiceError("Please confirm the reset operation")
        self.collection.delete_many({})
        logger.warning("Settings reset to defaults by %s", actor)
        return self._create_defaults(actor)
