"""Onboarding steps, answer validation, and the audit trail layout.

Pure domain logic with no external dependencies.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from melimou.core.exceptions import OnboardingStepError, ValidationError


class OnboardingStep(str, Enum):
    """Wizard steps, in the only order they can be visited."""

    WELCOME = "welcome"
    ROLE = "role"
    LEVEL = "level"
    GOALS = "goals"
    SCHEDULE = "schedule"
    INTERESTS = "interests"
    BACKGROUND = "background"
    SUBSCRIPTION = "subscription"
    COMPLETE = "complete"


STEP_ORDER: list[OnboardingStep] = list(OnboardingStep)

ONBOARDING_ROLES = ("student", "instructor")
GREEK_LEVELS = (
    "absolute_beginner",
    "beginner",
    "elementary",
    "intermediate",
    "advanced",
    "native",
)
FORMALITY_PREFERENCES = ("informal", "formal", "mixed")

MIN_STUDY_HOURS = 1
MAX_STUDY_HOURS = 50
DEFAULT_STUDY_HOURS = 5

# Audit rows written on completion, one per key, in this order
QUESTION_KEYS = (
    "role",
    "greek_level",
    "learning_goals",
    "study_time_per_week",
    "previous_experience",
    "interests",
    "how_heard_about_us",
    "wants_practice_test",
    "formality_preference",
)


@dataclass
class OnboardingAnswers:
    """Everything the wizard collects before completion."""

    role: str | None = None
    greek_level: str | None = None
    learning_goals: list[str] = field(default_factory=list)
    study_time_per_week: int = DEFAULT_STUDY_HOURS
    previous_experience: str | None = None
    interests: list[str] = field(default_factory=list)
    how_heard_about_us: str | None = None
    wants_practice_test: bool = False
    formality_preference: str = "mixed"

    def missing_required(self) -> list[str]:
        """Names of required answers that are absent."""
        missing = []
        if not self.role:
            missing.append("role")
        if not self.greek_level:
            missing.append("greek_level")
        if not self.learning_goals:
            missing.append("learning_goals")
        return missing

    def validate(self) -> None:
        """Raise ValidationError unless the answers can be persisted.

        Raises:
            ValidationError: listing every offending field
        """
        missing = self.missing_required()
        if missing:
            raise ValidationError(
                f"Missing required onboarding answers: {', '.join(missing)}",
                fields=missing,
            )

        invalid = []
        if self.role not in ONBOARDING_ROLES:
            invalid.append("role")
        if self.greek_level not in GREEK_LEVELS:
            invalid.append("greek_level")
        if not MIN_STUDY_HOURS <= self.study_time_per_week <= MAX_STUDY_HOURS:
            invalid.append("study_time_per_week")
        if self.formality_preference not in FORMALITY_PREFERENCES:
            invalid.append("formality_preference")
        if invalid:
            raise ValidationError(
                f"Invalid onboarding answers: {', '.join(invalid)}",
                fields=invalid,
            )

    def audit_rows(self) -> list[tuple[str, Any]]:
        """(question_key, raw answer) pairs for the append-only audit log.

        Always exactly one pair per QUESTION_KEYS entry.
        """
        return [
            ("role", self.role),
            ("greek_level", self.greek_level),
            ("learning_goals", list(self.learning_goals)),
            ("study_time_per_week", self.study_time_per_week),
            ("previous_experience", self.previous_experience or ""),
            ("interests", list(self.interests or [])),
            ("how_heard_about_us", self.how_heard_about_us or ""),
            ("wants_practice_test", bool(self.wants_practice_test)),
            ("formality_preference", self.formality_preference),
        ]

    def profile_fields(self) -> dict[str, Any]:
        """Column values written onto the User row."""
        return {
            "role": self.role,
            "greek_level": self.greek_level,
            "learning_goals": list(self.learning_goals),
            "study_time_per_week": self.study_time_per_week,
            "previous_experience": self.previous_experience,
            "interests": list(self.interests or []),
            "how_heard_about_us": self.how_heard_about_us,
            "wants_practice_test": bool(self.wants_practice_test),
            "formality_preference": self.formality_preference,
        }


# Steps that refuse to advance without an answer
_STEP_GUARDS = {
    OnboardingStep.ROLE: lambda a: bool(a.role),
    OnboardingStep.LEVEL: lambda a: bool(a.greek_level),
    OnboardingStep.GOALS: lambda a: bool(a.learning_goals),
}


class OnboardingWizard:
    """Linear step machine over OnboardingStep.

    next() and previous() move exactly one step. Leaving SUBSCRIPTION is
    done through finish(), after the answers have been persisted.
    """

    def __init__(
        self,
        step: OnboardingStep = OnboardingStep.WELCOME,
        answers: OnboardingAnswers | None = None,
    ):
        self.step = step
        self.answers = answers or OnboardingAnswers()

    @property
    def index(self) -> int:
        return STEP_ORDER.index(self.step)

    @property
    def progress(self) -> float:
        """Percent of the wizard reached, counting the current step."""
        return (self.index + 1) / len(STEP_ORDER) * 100

    def can_advance(self) -> bool:
        if self.step in (OnboardingStep.SUBSCRIPTION, OnboardingStep.COMPLETE):
            return False
        guard = _STEP_GUARDS.get(self.step)
        return guard is None or guard(self.answers)

    def next(self) -> OnboardingStep:
        if self.step == OnboardingStep.COMPLETE:
            raise OnboardingStepError(self.step.value, "Onboarding is already complete")
        if self.step == OnboardingStep.SUBSCRIPTION:
            raise OnboardingStepError(self.step.value, "Submit the onboarding answers to finish")
        if not self.can_advance():
            raise OnboardingStepError(self.step.value, f"An answer is required for step '{self.step.value}'")
        self.step = STEP_ORDER[self.index + 1]
        return self.step

    def previous(self) -> OnboardingStep:
        if self.step in (OnboardingStep.WELCOME, OnboardingStep.COMPLETE):
            raise OnboardingStepError(self.step.value, f"Cannot go back from step '{self.step.value}'")
        self.step = STEP_ORDER[self.index - 1]
        return self.step

    def finish(self) -> OnboardingStep:
        if self.step != OnboardingStep.SUBSCRIPTION:
            raise OnboardingStepError(self.step.value, "Onboarding can only be completed from the subscription step")
        self.answers.validate()
        self.step = OnboardingStep.COMPLETE
        return self.step
