import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import settings
from hrdesk.api.routes import employee_module
from hrdesk.api.routes import router as api_router
from hrdesk.database import db
from hrdesk.utils.logging_middleware import log_requests
from hrdesk.utils.response import format_response

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("hrdesk")


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        employee_module.service.ensure_indexes()
    except Exception:
        logger.exception("Could not create employee indexes")
    logger.info("%s started (%s)", settings.PROJECT_NAME, settings.ENVIRONMENT)
    yield
    db.close_connections()


app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add logging middleware
app.middleware("http")(log_requests)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request, exc):
    return format_response(success=False, msg=str(exc.detail), statuscode=exc.status_code)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request, exc):
    errors = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ())[1:])
        errors.append(f"{field}: {error.get('msg')}" if field else str(error.get("msg")))
    return format_response(success=False, msg="Validation Error", statuscode=400, errors=errors)


#  Include all API routes
app.include_router(api_router)
