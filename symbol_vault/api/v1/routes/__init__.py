from fastapi import APIRouter

from .auth import router as auth_router
from .catalog import router as catalog_router
from .health import router as health_router
from .posts import router as posts_router
from .users import router as users_router

api_router = APIRouter()

api_router.include_router(health_router)
api_router.include_router(auth_router, prefix="/auth", tags=["authentication"])
api_router.include_router(catalog_router, prefix="/catalog", tags=["catalog"])
api_router.include_router(posts_router, prefix="/posts", tags=["posts"])
api_router.include_router(users_router, prefix="/users", tags=["users"])
