"""
API Router Aggregator.

Combines all v1 API routers into a single router for the main app.
"""

from fastapi import APIRouter

from careers.api.v1 import applications, auth, employers, jobs, profile

api_router = APIRouter()

# Include all v1 routers with their prefixes and tags
api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["Authentication"],
)

api_router.include_router(
    employers.router,
    prefix="/employers",
    tags=["Employers"],
)

api_router.include_router(
    profile.router,
    prefix="/profile",
    tags=["Profile"],
)

api_router.include_router(
    jobs.router,
    prefix="/jobs",
    tags=["Jobs"],
)

api_router.include_router(
    applications.router,
    prefix="/applications",
    tags=["Applications"],
)
