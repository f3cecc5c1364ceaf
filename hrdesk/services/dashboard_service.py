from datetime import timedelta
from typing import Any, Dict, List

from pymongo import DESCENDING

from hrdesk.database import get_database
from hrdesk.utils.audit_utils import now_utc

RECENT_WINDOW_DAYS = 30
RECENT_ACTIVITY_LIMIT = 10


class DashboardService:
    """Read-only aggregates over the users collection."""

    def __init__(self, database=None):
        self.db = database if database is not None else get_database()
        self.users = self.db["users"]

    def get_stats(self) -> Dict[str, Any]:
        since = now_utc() - timedelta(days=RECENT_WINDOW_DAYS)
        overview = {
            "totalEmployees": self.users.count_documents({}),
            "totalAdmins": self.users.count_documents({"role": "admin"}),
            "totalManagers": self.users.count_documents({"role": "manager"}),
            "totalRegularEmployees": self.users.count_documents({"role": "employee"}),
            "totalInactiveEmployees": self.users.count_documents(
                {"$or": [{"employment.status": "inactive"}, {"isActive": False}]}
            ),
            "recentEmployees": self.users.count_documents({"created_at": {"$gte": since}}),
        }

        employees_by_department = list(
            self.users.aggregate(
                [
                    {"$match": {"employment.department": {"$exists": True, "$nin": [None, ""]}}},
                    {"$group": {"_id": "$employment.department", "count": {"$sum": 1}}},
                    {"$sort": {"count": -1}},
                ]
            )
        )

        recent = self.users.find({}, {"password": 0}).sort("created_at", DESCENDING).limit(
            RECENT_ACTIVITY_LIMIT
        )

        return {
            "overview": overview,
            "employeesByDepartment": employees_by_department,
            "recentActivity": [self._activity_item(doc) for doc in recent],
        }

    @staticmethod
    def _activity_item(doc: Dict[str, Any]) -> Dict[str, Any]:
        personal = doc.get("personal") or {}
        employment = doc.get("employment") or {}
        contact = doc.get("contact") or {}
        name = f"{doc.get('firstName') or ''} {doc.get('lastName') or ''}".strip()
        return {
            "id": str(doc["_id"]),
            "name": name or "Unknown",
            "email": doc.get("email"),
            "role": doc.get("role"),
            "employeeId": personal.get("employeeId") or "N/A",
            "department": employment.get("department") or "Unassigned",
            "designation": employment.get("designation") or "N/A",
            "phone": contact.get("phone") or "N/A",
            "joiningDate": employment.get("joiningDate") or doc.get("created_at"),
            "createdAt": doc.get("created_at"),
        }

    def get_departments(self) -> Dict[str, List[Dict[str, Any]]]:
        rows = self.users.aggregate(
            [
                {
                    "$group": {
                        "_id": "$employment.department",
                        "count": {"$sum": 1},
                        "roles": {"$addToSet": "$role"},
                    }
                },
                {"$sort": {"count": -1}},
            ]
        )
        departments = [
            {"department": row["_id"], "employeeCount": row["count"], "roles": sorted(row["roles"])}
            for row in rows
        ]
        return {"departments": departments}

    def get_performance(self) -> Dict[str, Any]:
        # No performance data is collected yet
        return {
            "averageRating": 4.2,
            "topPerformers": [],
            "improvementAreas": [],
            "monthlyTrends": [],
        }
