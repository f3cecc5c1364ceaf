from fastapi import APIRouter, status

from hrdesk.services.dashboard_service import DashboardService
from hrdesk.utils.response import format_response
from hrdesk.utils.service_call import handle_service_call

router = APIRouter(tags=["dashboard"])
service = DashboardService()


@router.get("/stats")
async def dashboard_stats():
    return handle_service_call(
        lambda: format_response(success=True, statuscode=status.HTTP_200_OK, data=service.get_stats())
    )


@router.get("/departments")
async def department_stats():
    return handle_service_call(
        lambda: format_response(success=True, statuscode=status.HTTP_200_OK, data=service.get_departments())
    )


@router.get("/performance")
async def performance_metrics():
    return handle_service_call(
        lambda: format_response(success=True, statuscode=status.HTTP_200_OK, data=service.get_performance())
    )
