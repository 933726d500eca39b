"""API v1 router aggregation.

All routes use dependencies from construction_docs.api.v1.dependencies (no
manual repo/service construction in endpoints).
"""

from fastapi import APIRouter

from construction_docs.api.v1.endpoints import capabilities, documents, health

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(
    capabilities.router, prefix="/capabilities", tags=["capabilities"]
)
api_router.include_router(documents.router, prefix="/documents", tags=["documents"])
