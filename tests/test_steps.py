"""Test the local durable step runner and its checkpoint."""
import asyncio

import pytest
from tenacity import wait_none

from generation.checkpoint import StepCheckpoint
from generation.clients import TransportError
from generation.steps import LocalStepRunner, bind_caller, step_fingerprint


class FlakyBackend:
    def __init__(self, failures, error=None):
        self.failures = failures
        self.error = error or TransportError("503 overloaded", retryable=True)
        self.calls = 0

    async def __call__(self, prompt):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error
        return f"response to {prompt}"


def test_retries_transient_failures():
    """Test that retryable transport errors are retried until success."""
    backend = FlakyBackend(failures=2)
    runner = LocalStepRunner(max_retries=3, wait=wait_none())

    result = asyncio.run(runner.run("generate-titles", backend, "p"))

    assert result == "response to p"
    assert backend.calls == 3


def test_gives_up_after_max_retries():
    """Test that the last transient error is re-raised."""
    backend = FlakyBackend(failures=10)
    runner = LocalStepRunner(max_retries=3, wait=wait_none())

    with pytest.raises(TransportError):
        asyncio.run(runner.run("generate-titles", backend, "p"))

    assert backend.calls == 3


def test_permanent_failure_not_retried():
    """Test that non-retryable errors fail on the first attempt."""
    backend = FlakyBackend(failures=1, error=TransportError("invalid api key", retryable=False))
    runner = LocalStepRunner(max_retries=5, wait=wait_none())

    with pytest.raises(TransportError):
        asyncio.run(runner.run("generate-titles", backend, "p"))

    assert backend.calls == 1


def test_checkpoint_replays_completed_step(tmp_path):
    """Test that a replayed job does not call the backend again."""
    backend = FlakyBackend(failures=0)

    first = LocalStepRunner(checkpoint=StepCheckpoint("job-1", tmp_path), wait=wait_none())
    assert asyncio.run(first.run("generate-summary", backend, "p")) == "response to p"

    replay = LocalStepRunner(checkpoint=StepCheckpoint("job-1", tmp_path), wait=wait_none())
    assert asyncio.run(replay.run("generate-summary", backend, "p")) == "response to p"
    assert backend.calls == 1


def test_changed_prompt_runs_step_again(tmp_path):
    """Test that a stored result for a different prompt is not replayed."""
    backend = FlakyBackend(failures=0)

    first = LocalStepRunner(checkpoint=StepCheckpoint("job-5", tmp_path), wait=wait_none())
    asyncio.run(first.run("generate-summary", backend, "old transcript"))

    checkpoint = StepCheckpoint("job-5", tmp_path)
    replay = LocalStepRunner(checkpoint=checkpoint, wait=wait_none())
    result = asyncio.run(replay.run("generate-summary", backend, "new transcript"))

    assert result == "response to new transcript"
    assert backend.calls == 2
    assert checkpoint.get("generate-summary", step_fingerprint("new transcript")) == result


def test_failed_step_not_checkpointed(tmp_path):
    """Test that only successful steps are recorded."""
    checkpoint = StepCheckpoint("job-2", tmp_path)
    runner = LocalStepRunner(checkpoint=checkpoint, max_retries=1, wait=wait_none())

    with pytest.raises(TransportError):
        asyncio.run(runner.run("generate-hashtags", FlakyBackend(failures=1), "p"))

    assert not checkpoint.has("generate-hashtags")


def test_checkpoint_clear(tmp_path):
    """Test that clearing removes the file and the stored results."""
    checkpoint = StepCheckpoint("job-3", tmp_path)
    checkpoint.save("generate-titles", "{}")
    assert checkpoint.checkpoint_file.exists()

    checkpoint.clear()

    assert not checkpoint.checkpoint_file.exists()
    assert not checkpoint.has("generate-titles")


def test_corrupt_checkpoint_starts_fresh(tmp_path):
    """Test that an unreadable checkpoint file is ignored."""
    (tmp_path / "job-4_steps.json").write_text("{not json", encoding="utf-8")
    assert not StepCheckpoint("job-4", tmp_path).has("generate-titles")


def test_bind_caller_routes_through_runner():
    """Test that a bound caller runs under the given step name."""
    seen = []

    class RecordingRunner:
        async def run(self, name, fn, *args):
            seen.append(name)
            return await fn(*args)

    caller = bind_caller(RecordingRunner(), "generate-social-posts", FlakyBackend(failures=0))
    assert asyncio.run(caller("p")) == "response to p"
    assert seen == ["generate-social-posts"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
