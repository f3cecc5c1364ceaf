from fastapi import APIRouter, Depends, Request, status

from hrdesk.api.routes.employee_module import read_json
from hrdesk.schemas.settings_schema import SETTINGS_SECTIONS
from hrdesk.services.settings_service import SettingsService
from hrdesk.utils.audit_utils import now_utc
from hrdesk.utils.auth_utils import actor_id, require_admin
from hrdesk.utils.response import format_response
from hrdesk.utils.service_call import handle_service_call

router = APIRouter(tags=["settings"])
service = SettingsService()

SECTION_TITLES = {
    "company": "Company",
    "user-management": "User management",
    "system": "System",
    "notifications": "Notification",
    "security": "Security",
    "backup": "Backup",
}


@router.get("")
async def get_settings(current_user: dict = Depends(require_admin)):
    return handle_service_call(
        lambda: format_response(success=True, statuscode=status.HTTP_200_OK, data=service.get_settings())
    )


@router.get("/report")
async def generate_report(current_user: dict = Depends(require_admin)):
    return handle_service_call(
        lambda: format_response(success=True, statuscode=status.HTTP_200_OK, data=service.generate_report())
    )


@router.post("/export")
async def export_data(request: Request, current_user: dict = Depends(require_admin)):
    body = await read_json(request) or {}

    def action():
        data = service.export_data(body.get("dataType"))
        return format_response(
            success=True,
            msg="Data exported successfully",
            statuscode=status.HTTP_200_OK,
            data=data,
            timestamp=now_utc().isoformat(),
        )

    return handle_service_call(action)


@router.post("/reset")
async def reset_settings(request: Request, current_user: dict = Depends(require_admin)):
    body = await read_json(request) or {}

    def action():
        data = service.reset(body.get("confirmReset"), actor_id(current_user))
        return format_response(
            success=True,
            msg="System settings reset to defaults successfully",
            statuscode=status.HTTP_200_OK,
            data=data,
        )

    return handle_service_call(action)


@router.put("/{section}")
async def update_section(section: str, request: Request, current_user: dict = Depends(require_admin)):
    body = await read_json(request) or {}

    def action():
        # Body carries the section under its stored key, e.g. {"userManagement": {...}}
        key = SETTINGS_SECTIONS[section][0] if section in SETTINGS_SECTIONS else section
        values = body.get(key, {})
        data = service.update_section(section, values, actor_id(current_user))
        return format_response(
            success=True,
            msg=f"{SECTION_TITLES.get(section, section)} settings updated successfully",
            statuscode=status.HTTP_200_OK,
            data=data,
        )

    return handle_service_call(action)
