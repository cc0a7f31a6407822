"""TutorRunner Protocol: the seam between tutor sessions and reply generation.

TutorService depends only on this protocol, so a model-backed implementation
can replace CannedTutorRunner without touching persistence or routing.
"""

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class TutorReply:
    """Assistant turn produced for one learner message."""

    content: str
    feedback: dict = field(default_factory=dict)


@runtime_checkable
class TutorRunner(Protocol):
    """Produces the tutor's answer to a learner message."""

    async def reply(self, content: str, formality_level: str, topic: str | None = None) -> TutorReply:
        """Generate a reply.

        Args:
            content: The learner's message
            formality_level: informal, formal, or mixed
            topic: Optional session topic

        Returns:
            TutorReply with the text and structured feedback
        """
        ...
