"""Re-export all models so Base.metadata sees them."""

from melimou.db.models.alert import Alert
from melimou.db.models.cohort import Cohort, CohortMember
from melimou.db.models.learning_path import LearningPath, Lesson, Module
from melimou.db.models.message import Message
from melimou.db.models.onboarding_response import OnboardingResponse
from melimou.db.models.resource import Resource
from melimou.db.models.subscription_plan import SubscriptionPlan
from melimou.db.models.tutor_session import TutorMessage, TutorSession
from melimou.db.models.user import User
from melimou.db.models.user_progress import UserProgress
from melimou.db.models.user_subscription import UserSubscription

__all__ = [
    "Alert",
    "Cohort",
    "CohortMember",
    "LearningPath",
    "Lesson",
    "Message",
    "Module",
    "OnboardingResponse",
    "Resource",
    "SubscriptionPlan",
    "TutorMessage",
    "TutorSession",
    "User",
    "UserProgress",
    "UserSubscription",
]
