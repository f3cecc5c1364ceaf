from fastapi import APIRouter
from hrdesk.api.routes import auth_module
from hrdesk.api.routes import dashboard_module
from hrdesk.api.routes import employee_module
from hrdesk.api.routes import settings_module
from hrdesk.api.routes import user_module
from .base import router as base_router
from config import settings

router = APIRouter()

router.include_router(
    base_router,
    prefix="",
    tags=["base"]
)

router.include_router(employee_module.router, prefix=f"{settings.API_PREFIX}/employees")
router.include_router(user_module.router, prefix=f"{settings.API_PREFIX}/users")
router.include_router(dashboard_module.router, prefix=f"{settings.API_PREFIX}/dashboard")
router.include_router(settings_module.router, prefix=f"{settings.API_PREFIX}/settings")
router.include_router(auth_module.router, prefix=f"{settings.API_PREFIX}/auth")
