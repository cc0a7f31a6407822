from fastapi import APIRouter

from melimou.api.routes import (
    alerts,
    auth,
    chat,
    cohorts,
    health,
    learning_paths,
    lessons,
    resources,
    subscription,
    tutor,
    user,
)

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(user.router, prefix="/user", tags=["user"])
api_router.include_router(subscription.router, prefix="/subscription", tags=["subscription"])
api_router.include_router(learning_paths.router, prefix="/learning-paths", tags=["learning-paths"])
api_router.include_router(lessons.router, tags=["lessons"])
api_router.include_router(chat.router, prefix="/chat", tags=["chat"])
api_router.include_router(alerts.router, prefix="/alerts", tags=["alerts"])
api_router.include_router(resources.router, prefix="/resources", tags=["resources"])
api_router.include_router(tutor.router, prefix="/tutor", tags=["tutor"])
api_router.include_router(cohorts.router, prefix="/cohorts", tags=["cohorts"])
