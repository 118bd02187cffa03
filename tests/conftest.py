"""
Shared pytest fixtures for the podcast asset pipeline tests.
"""

import json

import pytest
from tenacity import wait_none

from extraction.models import Chapter, Transcript
from generation.steps import LocalStepRunner


def make_chapters(count: int, step_ms: int = 65_000):
    """Chapters at regular offsets with predictable headline/summary text."""
    return [
        Chapter(
            start=i * step_ms,
            end=(i + 1) * step_ms,
            headline=f"Headline {i}",
            summary=f"Summary {i}",
        )
        for i in range(count)
    ]


@pytest.fixture
def transcript():
    """Transcript with five chapters."""
    return Transcript(
        text="Welcome back to the show. Today we talk about automation. " * 40,
        chapters=make_chapters(5),
    )


@pytest.fixture
def bare_transcript():
    """Transcript without any chapters."""
    return Transcript(text="A short episode with no detected chapters.")


@pytest.fixture
def fast_runner():
    """Step runner that retries without sleeping."""
    return LocalStepRunner(wait=wait_none())


# Canned model responses, keyed by a marker that only that prompt contains.
CANNED_RESPONSES = {
    '"tldr"': {
        "full": "An episode about automation.",
        "bullets": ["Automate the boring parts"],
        "insights": ["Tools matter less than habits"],
        "tldr": "Automate wisely.",
    },
    '"youtubeShort"': {
        "youtubeShort": ["Short A", "Short B", "Short C"],
        "youtubeLong": ["Long A", "Long B", "Long C"],
        "podcastTitles": ["Pod A", "Pod B", "Pod C"],
        "seoKeywords": ["automation", "productivity", "tools", "workflow", "podcast"],
    },
    '"instagram": ["#tag1"': {
        "youtube": ["#a", "#b", "#c", "#d", "#e"],
        "instagram": ["#a", "#b", "#c", "#d", "#e", "#f"],
        "tiktok": ["#a", "#b", "#c", "#d", "#e"],
        "linkedin": ["#a", "#b", "#c", "#d", "#e"],
        "twitter": ["#a", "#b", "#c", "#d", "#e"],
    },
    '"facebook": "string"': {
        "twitter": "New episode!",
        "linkedin": "We discussed automation.",
        "instagram": "Listen now 🎧",
        "tiktok": "Automation hacks",
        "youtube": "Full episode on automation.",
        "facebook": "Catch the new episode.",
    },
    '"keyMoments"': {
        "keyMoments": [{"index": 1, "text": "AI moment", "description": "AI description"}],
    },
    "SHORT CHAPTER TITLES": {
        "titles": [{"index": 0, "title": "AI Intro"}],
    },
}


class FakeGenerator:
    """Returns canned, fenced JSON for whichever prompt it receives."""

    def __init__(self, fail_with: Exception = None):
        self.fail_with = fail_with
        self.prompts = []

    async def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.fail_with is not None:
            raise self.fail_with
        for marker, payload in CANNED_RESPONSES.items():
            if marker in prompt:
                return f"Here you go:\n```json\n{json.dumps(payload)}\n```"
        return "I'm not sure what you want."


@pytest.fixture
def fake_generator():
    return FakeGenerator()


@pytest.fixture
def make_generator():
    """Factory for FakeGenerator, e.g. make_generator(fail_with=RuntimeError("down"))."""
    return FakeGenerator
