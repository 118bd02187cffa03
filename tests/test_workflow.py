"""Test running every asset for a transcript."""
import asyncio
import logging

import pytest
from extraction.models import GeneratedContent, JobStatus
from generation.use_cases import USE_CASES
from generation.workflow import ContentWorkflow


def test_all_assets_generated(transcript, fake_generator, fast_runner):
    """Test a clean run: every step completes, nothing degraded."""
    workflow = ContentWorkflow(fake_generator, fast_runner)
    content, status = asyncio.run(workflow.run(transcript))

    assert isinstance(content, GeneratedContent)
    assert content.summary.tldr == "Automate wisely."
    assert content.titles.youtube_short == ["Short A", "Short B", "Short C"]
    assert content.hashtags.instagram[0] == "#a"
    assert content.social_posts.facebook == "Catch the new episode."
    assert len(content.key_moments) == 5
    assert content.key_moments[1].text == "AI moment"
    assert content.key_moments[0].text == "Headline 0"
    assert content.youtube_timestamps[0].description == "AI Intro"
    assert content.youtube_timestamps[0].timestamp == "0:00"

    assert set(status.steps.values()) == {"completed"}
    assert status.degraded == []
    assert status.progress == 100
    assert len(fake_generator.prompts) == 6


def test_backend_down_degrades_to_fallbacks(transcript, make_generator, fast_runner):
    """Test that a failing backend still produces well-formed content."""
    generator = make_generator(fail_with=RuntimeError("backend unavailable"))
    content, status = asyncio.run(ContentWorkflow(generator, fast_runner).run(transcript))

    assert content.summary == USE_CASES["summary"].fallback
    assert content.titles == USE_CASES["titles"].fallback
    assert content.hashtags == USE_CASES["hashtags"].fallback
    assert content.social_posts == USE_CASES["social_posts"].fallback
    assert [m.text for m in content.key_moments] == [f"Headline {i}" for i in range(5)]
    assert [t.description for t in content.youtube_timestamps] == [f"Headline {i}" for i in range(5)]

    assert set(status.steps.values()) == {"completed"}
    assert sorted(status.degraded) == sorted(USE_CASES)


def test_no_chapters(bare_transcript, fake_generator, fast_runner):
    """Test that chapter assets are empty and never sent to the backend."""
    content, status = asyncio.run(ContentWorkflow(fake_generator, fast_runner).run(bare_transcript))

    assert content.key_moments == []
    assert content.youtube_timestamps == []
    assert len(fake_generator.prompts) == 4
    assert status.degraded == []


def test_only_selected_assets(transcript, fake_generator, fast_runner):
    """Test running a subset of assets."""
    content, status = asyncio.run(
        ContentWorkflow(fake_generator, fast_runner).run(transcript, only=["titles", "hashtags"])
    )

    assert content.titles is not None
    assert content.hashtags is not None
    assert content.summary is None
    assert content.key_moments is None
    assert list(status.steps) == ["titles", "hashtags"]


def test_status_snapshots(transcript, fake_generator, fast_runner):
    """Test that the status callback sees pending -> running -> completed."""
    snapshots = []
    workflow = ContentWorkflow(fake_generator, fast_runner, on_status=snapshots.append)
    asyncio.run(workflow.run(transcript, only=["summary"]))

    assert [s.steps["summary"] for s in snapshots] == ["pending", "running", "completed"]
    assert snapshots[0].progress == 0
    assert snapshots[-1].progress == 100
    assert all(isinstance(s, JobStatus) for s in snapshots)


def test_crashed_step_marked_failed(transcript, fake_generator, fast_runner, monkeypatch):
    """Test that an unexpected error inside a step is contained."""
    async def boom(*args, **kwargs):
        raise RuntimeError("bug in step")

    monkeypatch.setattr("generation.use_cases.run_pipeline", boom)
    content, status = asyncio.run(
        ContentWorkflow(fake_generator, fast_runner).run(transcript, only=["hashtags", "key_moments"])
    )

    assert status.steps == {"hashtags": "failed", "key_moments": "failed"}
    assert content.hashtags == USE_CASES["hashtags"].fallback
    assert len(content.key_moments) == 5
    assert status.progress == 100


def test_concurrency_limit(transcript, fast_runner):
    """Test that no more than max_concurrent generations run at once."""
    in_flight = 0
    peak = 0

    async def slow_generator(prompt):
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.01)
        in_flight -= 1
        return "{}"

    asyncio.run(ContentWorkflow(slow_generator, fast_runner, max_concurrent=2).run(transcript))
    assert peak == 2


def test_token_usage_logged(transcript, fake_generator, fast_runner, caplog):
    """Test that a backend's running token count is reported at the end."""
    fake_generator.total_tokens_used = 1234

    with caplog.at_level(logging.INFO, logger="generation.workflow"):
        asyncio.run(ContentWorkflow(fake_generator, fast_runner).run(transcript, only=["titles"]))

    assert "Total tokens used: 1234" in caplog.text


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
