"""CannedTutorRunner: fixed per-formality replies, no model calls.

Replies are drawn from a small table keyed by formality level. The random
source is injectable so tests can pin the choice.
"""

import random

from melimou.tutor.runner import TutorReply

CANNED_REPLIES: dict[str, list[str]] = {
    "informal": [
        "Καλά! That's a good start. Try saying it again with more confidence.",
        "Ωραία! You're getting better. Let me help you with the pronunciation.",
        "Μπράβο! Keep practicing, you're doing well!",
    ],
    "formal": [
        "Εξαιρετικά. Your effort is commendable. Please continue with the exercise.",
        "Πολύ καλά. I suggest we focus on improving your accent.",
        "Συγχαρητήρια. Your progress is notable.",
    ],
    "mixed": [
        "Good job! Καλή δουλειά! Let's work on that phrase together.",
        "That's right! Σωστά! Now try it with different intonation.",
        "Excellent! Τέλεια! You're improving quickly.",
    ],
}

DEFAULT_FEEDBACK = {
    "corrections": [],
    "hints": ["Try speaking more slowly", "Focus on the accent"],
    "encouragement": "Keep up the great work!",
}


class CannedTutorRunner:
    """Deterministic-when-seeded TutorRunner backed by CANNED_REPLIES."""

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    async def reply(self, content: str, formality_level: str, topic: str | None = None) -> TutorReply:
        # Unknown levels fall back to mixed
        choices = CANNED_REPLIES.get(formality_level, CANNED_REPLIES["mixed"])
        return TutorReply(
            content=self.rng.choice(choices),
            feedback={
                "corrections": list(DEFAULT_FEEDBACK["corrections"]),
                "hints": list(DEFAULT_FEEDBACK["hints"]),
                "encouragement": DEFAULT_FEEDBACK["encouragement"],
            },
        )
