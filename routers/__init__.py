# routers/__init__.py

from fastapi import APIRouter

from .health import router as health_router
from .permissions import router as permissions_router
from .user_access import router as user_access_router


api_router = APIRouter()

# Access Control
api_router.include_router(permissions_router)
api_router.include_router(user_access_router)

# Health
api_router.include_router(health_router)

__all__ = ["api_router"]
