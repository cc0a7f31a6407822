"""Tests for the canned tutor reply strategy."""
import random

import pytest

from melimou.tutor.runner import TutorRunner
from melimou.tutor.runner_canned import CANNED_REPLIES, CannedTutorRunner

pytestmark = pytest.mark.unit


def test_canned_runner_satisfies_protocol():
    assert isinstance(CannedTutorRunner(), TutorRunner)


async def test_reply_comes_from_formality_table():
    runner = CannedTutorRunner(random.Random(7))
    reply = await runner.reply("Καλημέρα", "formal")
    assert reply.content in CANNED_REPLIES["formal"]


async def test_seeded_runs_are_repeatable():
    first = await CannedTutorRunner(random.Random(3)).reply("hi", "informal")
    second = await CannedTutorRunner(random.Random(3)).reply("hi", "informal")
    assert first.content == second.content


async def test_unknown_formality_falls_back_to_mixed():
    reply = await CannedTutorRunner(random.Random(1)).reply("hi", "shouty")
    assert reply.content in CANNED_REPLIES["mixed"]


async def test_feedback_shape():
    reply = await CannedTutorRunner().reply("hi", "mixed")
    assert reply.feedback == {
        "corrections": [],
        "hints": ["Try speaking more slowly", "Focus on the accent"],
        "encouragement": "Keep up the great work!",
    }
