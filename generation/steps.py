"""Durable step execution around generation calls."""
import hashlib
import inspect
import json
from typing import Any, Callable, Optional, Protocol

from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from generation.checkpoint import StepCheckpoint
from generation.clients import TransportError
from utils.logger import setup_logger
import config

logger = setup_logger(__name__)


class StepRunner(Protocol):
    """Runs a named unit of work and returns its result."""

    async def run(self, name: str, fn: Callable[..., Any], *args: Any) -> Any:
        ...


def is_retryable(error: BaseException) -> bool:
    return isinstance(error, TransportError) and error.retryable


def step_fingerprint(*args: Any) -> str:
    """SHA-256 of the step arguments, used to tell a replay from a changed prompt."""
    payload = json.dumps(args, default=str, ensure_ascii=False)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class LocalStepRunner:
    """In-process step runner with retries and optional result memoisation.

    Transient transport failures are retried with exponential backoff. When a
    checkpoint is attached, a step that already completed returns its stored
    result instead of running again, so replaying a job is safe.
    """

    def __init__(
        self,
        checkpoint: Optional[StepCheckpoint] = None,
        max_retries: int = config.MAX_RETRIES,
        wait=None
    ):
        self.checkpoint = checkpoint
        self.max_retries = max_retries
        self.wait = wait or wait_exponential(multiplier=config.RETRY_BACKOFF_MULTIPLIER, min=2, max=60)

    async def run(self, name: str, fn: Callable[..., Any], *args: Any) -> Any:
        fingerprint = step_fingerprint(*args)
        if self.checkpoint is not None:
            if self.checkpoint.has(name, fingerprint):
                logger.info(f"✓ Step '{name}' already completed, replaying stored result")
                return self.checkpoint.get(name, fingerprint)
            if self.checkpoint.has(name):
                logger.info(f"Step '{name}' inputs changed since checkpoint, running again")

        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_retries),
            wait=self.wait,
            retry=retry_if_exception(is_retryable),
            before_sleep=self._log_retry(name),
            reraise=True,
        ):
            with attempt:
                result = fn(*args)
                if inspect.isawaitable(result):
                    result = await result

        if self.checkpoint is not None:
            self.checkpoint.save(name, result, fingerprint)
        return result

    def _log_retry(self, name: str):
        def _before_sleep(retry_state):
            logger.warning(
                f"Step '{name}' failed: {retry_state.outcome.exception()}. "
                f"Retry {retry_state.attempt_number}/{self.max_retries - 1} "
                f"in {retry_state.next_action.sleep:.1f}s"
            )
        return _before_sleep


def bind_caller(runner: StepRunner, step_name: str, generator: Callable[[str], Any]):
    """Wrap a generator so each prompt goes through `runner` as step `step_name`."""
    async def _caller(prompt: str) -> str:
        return await runner.run(step_name, generator, prompt)
    return _caller
