from datetime import date, datetime
from typing import Any, Dict, Optional

import pytz

from config import settings


def now_utc() -> datetime:
    """Naive UTC timestamp, the form MongoDB hands back for stored datetimes."""
    return datetime.utcnow()


def today_local(timezone: Optional[str] = None) -> date:
    """Calendar date in the company timezone, used by the date validators."""
    tz = pytz.timezone(timezone or settings.TIMEZONE)
    return datetime.now(tz).date()


def build_audit_fields(
    prefix: str = "created",
    by: Optional[Any] = None,
) -> Dict[str, Any]:
    """Build dynamic audit fields like created_at, created_by (or updated_*)."""
    return {
        f"{prefix}_at": now_utc(),
        f"{prefix}_by": by,
    }
