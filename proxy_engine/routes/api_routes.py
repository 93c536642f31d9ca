from fastapi import APIRouter
from proxy_engine.routes.proxy_routes import proxy_router



router = APIRouter()
router.include_router(proxy_router, tags=["proxy"])
