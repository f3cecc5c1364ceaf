import io
from typing import Any, Optional

from fastapi import APIRouter, Depends, File, Query, Request, UploadFile, status
from fastapi.responses import StreamingResponse

from hrdesk.services import excel_service
from hrdesk.services.employee_service import EmployeeService
from hrdesk.utils.auth_utils import actor_id, get_optional_user
from hrdesk.utils.response import format_response
from hrdesk.utils.service_call import handle_service_call

router = APIRouter(tags=["employees"])
service = EmployeeService()


async def read_json(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError:
        return None


def xlsx_response(content: bytes, filename: str) -> StreamingResponse:
    return StreamingResponse(
        io.BytesIO(content),
        media_type=excel_service.XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.get("")
async def list_employees(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = None,
    role: Optional[str] = None,
    department: Optional[str] = None,
    status_filter: Optional[str] = Query(default=None, alias="status"),
):
    def action():
        data = service.list_employees(page, limit, search, role, department, status_filter)
        return format_response(success=True, statuscode=status.HTTP_200_OK, data=data)

    return handle_service_call(action)


@router.get("/export")
async def export_employees():
    def action():
        content = excel_service.export_employees(service.all_employees())
        return xlsx_response(content, "employees.xlsx")

    return handle_service_call(action)


@router.get("/template")
async def download_template():
    return handle_service_call(lambda: xlsx_response(excel_service.build_template(), "employee_template.xlsx"))


@router.post("/import")
async def import_employees(
    file: UploadFile = File(...),
    current_user: Optional[dict] = Depends(get_optional_user),
):
    content = await file.read()

    def action():
        payloads = excel_service.read_workbook(content)
        if not payloads:
            return format_response(
                success=False,
                msg="No employees found in the uploaded file",
                statuscode=status.HTTP_400_BAD_REQUEST,
            )
        result = service.bulk_import(payloads, actor_id(current_user))
        return format_response(
            success=True,
            msg=f"Imported {result.success} of {result.total} employees",
            statuscode=status.HTTP_200_OK,
            data=result.to_dict(),
        )

    return handle_service_call(action)


@router.post("/bulk")
async def bulk_create_employees(request: Request, current_user: Optional[dict] = Depends(get_optional_user)):
    body = await read_json(request)
    employees = body.get("employees") if isinstance(body, dict) else None

    def action():
        if not isinstance(employees, list) or not employees:
            return format_response(
                success=False,
                msg="employees must be a non-empty array",
                statuscode=status.HTTP_400_BAD_REQUEST,
            )
        result = service.bulk_import(employees, actor_id(current_user))
        return format_response(
            success=True,
            msg=f"Bulk import completed: {result.success} succeeded, {result.failed} failed",
            statuscode=status.HTTP_200_OK,
            data=result.to_dict(),
        )

    return handle_service_call(action)


@router.get("/{employee_id}")
async def get_employee(employee_id: str):
    def action():
        employee = service.get_employee(employee_id)
        return format_response(success=True, statuscode=status.HTTP_200_OK, data=employee)

    return handle_service_call(action)


@router.post("")
async def create_employee(request: Request, current_user: Optional[dict] = Depends(get_optional_user)):
    payload = await read_json(request)

    def action():
        employee = service.create_employee(payload, actor_id(current_user))
        return format_response(
            success=True,
            msg="Employee created successfully",
            statuscode=status.HTTP_201_CREATED,
            data=employee,
        )

    return handle_service_call(action)


@router.put("/{employee_id}")
async def update_employee(
    employee_id: str,
    request: Request,
    current_user: Optional[dict] = Depends(get_optional_user),
):
    payload = await read_json(request)

    def action():
        employee = service.update_employee(employee_id, payload, actor_id(current_user))
        return format_response(
            success=True,
            msg="Employee updated successfully",
            statuscode=status.HTTP_200_OK,
            data=employee,
        )

    return handle_service_call(action)


@router.delete("/{employee_id}")
async def delete_employee(employee_id: str):
    def action():
        service.delete_employee(employee_id)
        return format_response(success=True, msg="Employee deleted successfully", statuscode=status.HTTP_200_OK)

    return handle_service_call(action)
