from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status

from hrdesk.api.routes.employee_module import read_json
from hrdesk.services.user_service import UserService
from hrdesk.utils.auth_utils import actor_id, get_optional_user
from hrdesk.utils.response import format_response
from hrdesk.utils.service_call import handle_service_call

router = APIRouter(tags=["users"])
service = UserService()


@router.get("")
async def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = None,
    role: Optional[str] = None,
):
    def action():
        data = service.list_users(page, limit, search, role)
        return format_response(success=True, statuscode=status.HTTP_200_OK, data=data)

    return handle_service_call(action)


@router.post("")
async def create_user(request: Request, current_user: Optional[dict] = Depends(get_optional_user)):
    body = await read_json(request) or {}

    def action():
        user = service.create_user(body, actor_id(current_user))
        return format_response(
            success=True,
            msg="User created successfully",
            statuscode=status.HTTP_201_CREATED,
            data=user,
        )

    return handle_service_call(action)


@router.put("/{user_id}")
async def update_user(user_id: str, request: Request, current_user: Optional[dict] = Depends(get_optional_user)):
    body = await read_json(request) or {}

    def action():
        user = service.update_user(user_id, body, actor_id(current_user))
        return format_response(
            success=True,
            msg="User updated successfully",
            statuscode=status.HTTP_200_OK,
            data=user,
        )

    return handle_service_call(action)


@router.delete("/{user_id}")
async def delete_user(user_id: str):
    def action():
        service.delete_user(user_id)
        return format_response(success=True, msg="User deleted successfully", statuscode=status.HTTP_200_OK)

    return handle_service_call(action)
