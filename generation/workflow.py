"""Runs every asset use case for one transcript and tracks step status."""
import asyncio
from typing import Callable, List, Optional, Tuple

from extraction.models import GeneratedContent, JobStatus, Transcript
from generation.clients import Generator
from generation.steps import LocalStepRunner, StepRunner, bind_caller
from generation.use_cases import UseCase, UseCaseResult, get_use_cases
from utils.logger import setup_logger
import config

logger = setup_logger(__name__)

StatusCallback = Callable[[JobStatus], None]


class ContentWorkflow:
    """Generates all marketing assets for a transcript concurrently."""

    def __init__(
        self,
        generator: Generator,
        runner: Optional[StepRunner] = None,
        max_concurrent: int = config.MAX_CONCURRENT_STEPS,
        on_status: Optional[StatusCallback] = None
    ):
        """Initialize workflow.

        Args:
            generator: Generation backend
            runner: Durable step runner wrapping each generation call
            max_concurrent: Max generation steps in flight
            on_status: Receives a JobStatus snapshot on every transition
        """
        self.generator = generator
        self.runner = runner or LocalStepRunner()
        self.max_concurrent = max_concurrent
        self.on_status = on_status
        self.status = JobStatus()

    def _set(self, name: str, state: str) -> None:
        self.status.steps[name] = state
        if self.on_status is not None:
            self.on_status(self.status.model_copy(deep=True))

    async def run(
        self,
        transcript: Transcript,
        only: Optional[List[str]] = None
    ) -> Tuple[GeneratedContent, JobStatus]:
        """Run the selected use cases (all by default).

        Args:
            transcript: Episode transcript
            only: Use case names to run

        Returns:
            Generated content and the final job status
        """
        use_cases = get_use_cases(only)
        self.status = JobStatus(steps={uc.name: "pending" for uc in use_cases})
        if self.on_status is not None:
            self.on_status(self.status.model_copy(deep=True))

        logger.info(
            f"Generating {len(use_cases)} asset(s) from {len(transcript.text)} chars "
            f"and {len(transcript.chapters)} chapters"
        )

        sem = asyncio.Semaphore(self.max_concurrent)

        async def _worker(uc: UseCase) -> UseCaseResult:
            async with sem:
                return await self._run_one(uc, transcript)

        results = await asyncio.gather(*[_worker(uc) for uc in use_cases])

        content = GeneratedContent()
        for uc, result in zip(use_cases, results):
            setattr(content, uc.name, result.value)

        tokens = getattr(self.generator, "total_tokens_used", None)
        if tokens is not None:
            logger.info(f"Total tokens used: {tokens}")

        if self.status.degraded:
            logger.warning(f"Completed with fallbacks for: {', '.join(self.status.degraded)}")
        else:
            logger.info("All assets generated")

        return content, self.status.model_copy(deep=True)

    async def _run_one(self, uc: UseCase, transcript: Transcript) -> UseCaseResult:
        self._set(uc.name, "running")
        caller = bind_caller(self.runner, uc.step_name, self.generator)

        try:
            result = await uc.run(transcript, caller)
        except Exception as e:
            logger.exception(f"[{uc.name}] step crashed: {e}")
            self.status.degraded.append(uc.name)
            self._set(uc.name, "failed")
            return UseCaseResult(uc.fallback_value(transcript), used_fallback=True, failure="crash")

        if result.used_fallback:
            self.status.degraded.append(uc.name)
        self._set(uc.name, "completed")
        return result
