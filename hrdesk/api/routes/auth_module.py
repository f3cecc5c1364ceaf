import logging

from fastapi import APIRouter, Request

from hrdesk.api.routes.employee_module import read_json
from hrdesk.services.auth_service import AuthService
from hrdesk.utils.response import format_response

router = APIRouter(tags=["auth"])
service = AuthService()
logger = logging.getLogger(__name__)


@router.post("/login")
async def login(request: Request):
    body = await read_json(request) or {}
    email = body.get("email")
    password = body.get("password")
    if not email or not password:
        return format_response(
            success=False,
            msg="Email and password are required.",
            statuscode=400,
        )
    try:
        result = service.login(email, password)
    except Exception:
        logger.exception("Login failed unexpectedly")
        return format_response(success=False, msg="Something went wrong.", statuscode=500)
    if not result:
        return format_response(success=False, msg="Invalid email or password.", statuscode=401)
    return format_response(success=True, msg="Login successful", statuscode=200, data=result)
