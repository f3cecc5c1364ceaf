from fastapi import APIRouter

from config import settings

router = APIRouter()


@router.get("/")
async def root():
    return {"message": f"{settings.PROJECT_NAME} API", "environment": settings.ENVIRONMENT}


@router.get("/health")
async def health():
    return {"status": "ok"}
