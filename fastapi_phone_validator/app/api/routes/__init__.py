from fastapi import APIRouter

from . import files, health, validation

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(validation.router)
api_router.include_router(files.router)
