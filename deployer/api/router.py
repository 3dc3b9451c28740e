"""Main router."""

from fastapi import APIRouter

from deployer.api.routes import deploy, health, pricing

router = APIRouter()

# Include sub-routers
router.include_router(health.router, tags=["health"])
router.include_router(deploy.router, tags=["deploy"])
router.include_router(pricing.router, tags=["pricing"])
