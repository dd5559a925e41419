from fastapi import APIRouter

from app.core.config import settings

router = APIRouter(prefix="/health", tags=["health"])


@router.get("/ping")
async def ping() -> dict[str, str | bool]:
    return {
        "status": "ok",
        "env": settings.app_env,
        "phone_api_configured": bool(settings.phone_api_key),
    }
