"""API v1 routes."""

from fastapi import APIRouter

from shortlink.api.v1 import audit_logs, auth, health, urls, users

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(urls.router, prefix="/urls", tags=["urls"])
router.include_router(audit_logs.router, prefix="/audit-logs", tags=["audit"])
