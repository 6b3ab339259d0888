"""
API Router.

Aggregates all endpoint routers under /api.
"""

from fastapi import APIRouter

from todo_miniapp.api.endpoints import auth, config, tasks

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
router.include_router(config.router, prefix="/config", tags=["config"])
