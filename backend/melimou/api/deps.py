"""Service providers for route handlers.

Each provider is a FastAPI dependency so tests can swap implementations via
app.dependency_overrides (the tutor runner in particular).
"""

from fastapi import Depends, Response

from melimou.core.config import get_settings
from melimou.db.base import get_session_factory
from melimou.db.redis import get_redis
from melimou.services.alert_service import AlertService
from melimou.services.auth_service import AuthService
from melimou.services.chat_service import ChatService
from melimou.services.cohort_service import CohortService
from melimou.services.learning_service import LearningService
from melimou.services.onboarding_service import OnboardingService
from melimou.services.resource_service import ResourceService
from melimou.services.subscription_service import SubscriptionService, build_subscription_service
from melimou.services.tutor_service import TutorService
from melimou.services.user_service import UserService
from melimou.tutor.runner import TutorRunner
from melimou.tutor.runner_canned import CannedTutorRunner


def get_tutor_runner() -> TutorRunner:
    """CannedTutorRunner until a model-backed runner is configured."""
    return CannedTutorRunner()


def get_subscription_service() -> SubscriptionService:
    return build_subscription_service(get_session_factory(), get_redis(), get_settings())


def get_onboarding_service() -> OnboardingService:
    return OnboardingService(get_session_factory())


def get_auth_service() -> AuthService:
    return AuthService(get_session_factory())


def get_user_service() -> UserService:
    return UserService(get_session_factory())


def get_learning_service() -> LearningService:
    return LearningService(get_session_factory())


def get_chat_service() -> ChatService:
    return ChatService(get_session_factory())


def get_alert_service() -> AlertService:
    return AlertService(get_session_factory())


def get_resource_service() -> ResourceService:
    return ResourceService(get_session_factory())


def get_cohort_service(
    subscriptions: SubscriptionService = Depends(get_subscription_service),
) -> CohortService:
    return CohortService(get_session_factory(), subscriptions)


def get_tutor_service(
    runner: TutorRunner = Depends(get_tutor_runner),
    subscriptions: SubscriptionService = Depends(get_subscription_service),
) -> TutorService:
    return TutorService(get_session_factory(), runner, subscriptions)


def set_session_cookie(response: Response, token: str) -> None:
    """Mirror a reissued token into the cookie the page gate reads."""
    settings = get_settings()
    response.set_cookie(
        settings.session_cookie_name,
        token,
        max_age=settings.session_max_age_seconds,
        httponly=True,
        samesite="lax",
        secure=not settings.debug,
    )
