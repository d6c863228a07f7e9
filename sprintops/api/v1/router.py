from fastapi import APIRouter
from .auth import router as auth_router
from .tasks import router as tasks_router
from .bugs import router as bugs_router
from .team import router as team_router
from .stats import router as stats_router

api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(tasks_router, prefix="/tasks", tags=["tasks"])
api_router.include_router(bugs_router, prefix="/bugs", tags=["bugs"])
api_router.include_router(team_router, prefix="/team", tags=["team"])
api_router.include_router(stats_router, prefix="/stats", tags=["stats"])
