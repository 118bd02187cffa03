"""Declarative definitions of every generated asset.

A use case is data: a prompt builder, an output schema, a static fallback
and, for chapter-based assets, how to merge AI items onto the chapters.
`UseCase.run` is the one control flow they all share.
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Type

from pydantic import BaseModel

from extraction.merge import merge_with_anchors
from extraction.models import (
    ChapterAnchor,
    ChapterTitlesDraft,
    Hashtags,
    KeyMoment,
    KeyMomentsDraft,
    OutputSchema,
    SocialPosts,
    Summary,
    Titles,
    Transcript,
    YouTubeTimestamp,
)
from extraction.pipeline import Caller, run_pipeline
from extraction.validation import conforms
from generation import prompts
from generation.clients import ConfigurationError
from utils.logger import setup_logger
from utils.timestamps import format_timestamp
import config

logger = setup_logger(__name__)


@dataclass(frozen=True)
class AnchorMerge:
    """How a chapter-keyed draft is folded back onto its chapters."""
    items_field: str  # list attribute on the draft schema
    fields: Dict[str, str]  # AI field -> chapter field used when the AI value is empty
    build: Callable[[Dict[str, Any], ChapterAnchor], BaseModel]
    anchor_limit: Optional[int] = None


@dataclass
class UseCaseResult:
    value: Any
    used_fallback: bool = False
    skipped: bool = False  # no chapters, generation never called
    failure: Optional[str] = None


@dataclass(frozen=True)
class UseCase:
    name: str
    step_name: str
    schema: Type[OutputSchema]
    fallback: OutputSchema
    build_prompt: Callable[..., str]
    merge: Optional[AnchorMerge] = None
    description: str = field(default="", compare=False)

    def __post_init__(self):
        if not isinstance(self.fallback, self.schema):
            raise ConfigurationError(
                f"{self.name}: fallback is {type(self.fallback).__name__}, expected {self.schema.__name__}"
            )
        if not conforms(self.fallback, self.schema):
            raise ConfigurationError(f"{self.name}: fallback does not satisfy {self.schema.__name__}")
        if self.merge is not None and not hasattr(self.fallback, self.merge.items_field):
            raise ConfigurationError(f"{self.name}: schema has no '{self.merge.items_field}' list to merge")

    async def run(self, transcript: Transcript, caller: Caller) -> UseCaseResult:
        """Build the prompt, generate, validate and (for chapter assets) merge.

        Args:
            transcript: Episode transcript
            caller: Sends a prompt to the generation backend

        Returns:
            UseCaseResult whose value is the schema instance, or the merged
            list for chapter-based assets
        """
        if self.merge is None:
            outcome = await run_pipeline(
                self.build_prompt(transcript), self.schema, self.fallback, caller, name=self.name
            )
            return UseCaseResult(outcome.value, outcome.used_fallback, failure=outcome.failure)

        anchors = transcript.anchors(limit=self.merge.anchor_limit)
        if not anchors:
            logger.info(f"[{self.name}] no chapters detected - returning empty result")
            return UseCaseResult([], skipped=True)

        outcome = await run_pipeline(
            self.build_prompt(anchors), self.schema, self.fallback, caller, name=self.name
        )
        ai_items = getattr(outcome.value, self.merge.items_field)
        if outcome.used_fallback:
            logger.warning(f"[{self.name}] using chapter data for all {len(anchors)} entries")
        else:
            logger.info(f"[{self.name}] parsed {len(ai_items)} AI items for {len(anchors)} chapters")

        value = self._merge(ai_items, anchors)
        return UseCaseResult(value, outcome.used_fallback, failure=outcome.failure)

    def fallback_value(self, transcript: Transcript) -> Any:
        """The degraded result: the static fallback, or chapters as-is for chapter assets."""
        if self.merge is None:
            return self.fallback.model_copy(deep=True)
        return self._merge([], transcript.anchors(limit=self.merge.anchor_limit))

    def _merge(self, ai_items: List[Any], anchors: List[ChapterAnchor]) -> List[BaseModel]:
        records = merge_with_anchors(ai_items, anchors, "index", self.merge.fields)
        return [self.merge.build(record, anchor) for record, anchor in zip(records, anchors)]


def _key_moment(record: Dict[str, Any], anchor: ChapterAnchor) -> KeyMoment:
    return KeyMoment(
        time=format_timestamp(anchor.timestamp, pad_hours=True, force_hours=True),
        timestamp=anchor.timestamp,
        text=record["text"],
        description=record["description"],
    )


def _youtube_timestamp(record: Dict[str, Any], anchor: ChapterAnchor) -> YouTubeTimestamp:
    return YouTubeTimestamp(
        timestamp=format_timestamp(anchor.timestamp, pad_hours=False),
        description=record["title"],
    )


SUMMARY = UseCase(
    name="summary",
    step_name="generate-summary",
    schema=Summary,
    fallback=Summary(
        full="⚠️ Error generating summary. Please check logs.",
        bullets=["Summary generation failed - see transcript"],
        insights=["No insights available due to error"],
        tldr="Summary generation failed",
    ),
    build_prompt=prompts.summary_prompt,
    description="Overview, bullet points, insights and TL;DR",
)

TITLES = UseCase(
    name="titles",
    step_name="generate-titles",
    schema=Titles,
    fallback=Titles(
        youtube_short=["⚠️ Title generation failed"] * 3,
        youtube_long=["⚠️ Title generation failed"] * 3,
        podcast_titles=["⚠️ Title generation failed"] * 3,
        seo_keywords=["podcast", "podcast episode", "interview", "conversation", "show notes"],
    ),
    build_prompt=prompts.titles_prompt,
    description="YouTube short/long titles, podcast titles, SEO keywords",
)

HASHTAGS = UseCase(
    name="hashtags",
    step_name="generate-hashtags",
    schema=Hashtags,
    fallback=Hashtags(
        youtube=["#podcast", "#podcastepisode", "#newepisode", "#interview", "#listen"],
        instagram=["#podcast", "#podcastlife", "#newepisode", "#podcaster", "#listen", "#podcastclips"],
        tiktok=["#podcast", "#podcastclips", "#fyp", "#newepisode", "#learnontiktok"],
        linkedin=["#podcast", "#leadership", "#learning", "#careergrowth", "#insights"],
        twitter=["#podcast", "#NewEpisode", "#NowListening", "#PodcastRecommendations", "#Interview"],
    ),
    build_prompt=prompts.hashtags_prompt,
    description="Hashtag sets for YouTube, Instagram, TikTok, LinkedIn, Twitter",
)

SOCIAL_POSTS = UseCase(
    name="social_posts",
    step_name="generate-social-posts",
    schema=SocialPosts,
    fallback=SocialPosts(
        twitter="⚠️ Error generating social post. Check logs.",
        linkedin="⚠️ Error generating social post. Check logs.",
        instagram="⚠️ Error generating social post. Check logs.",
        tiktok="⚠️ Error generating social post. Check logs.",
        youtube="⚠️ Error generating social post. Check logs.",
        facebook="⚠️ Error generating social post. Check logs.",
    ),
    build_prompt=prompts.social_posts_prompt,
    description="One promotional post per platform",
)

KEY_MOMENTS = UseCase(
    name="key_moments",
    step_name="generate-key-moments",
    schema=KeyMomentsDraft,
    fallback=KeyMomentsDraft(key_moments=[]),
    build_prompt=prompts.key_moments_prompt,
    merge=AnchorMerge(
        items_field="key_moments",
        fields={"text": "headline", "description": "summary"},
        build=_key_moment,
    ),
    description="Per-chapter highlight titles and descriptions",
)

YOUTUBE_TIMESTAMPS = UseCase(
    name="youtube_timestamps",
    step_name="generate-youtube-timestamps",
    schema=ChapterTitlesDraft,
    fallback=ChapterTitlesDraft(titles=[]),
    build_prompt=prompts.youtube_timestamps_prompt,
    merge=AnchorMerge(
        items_field="titles",
        fields={"title": "headline"},
        build=_youtube_timestamp,
        anchor_limit=config.MAX_YOUTUBE_CHAPTERS,
    ),
    description="YouTube chapter list with short titles",
)

USE_CASES: Dict[str, UseCase] = {
    uc.name: uc
    for uc in (SUMMARY, TITLES, HASHTAGS, SOCIAL_POSTS, KEY_MOMENTS, YOUTUBE_TIMESTAMPS)
}


def get_use_cases(names: Optional[List[str]] = None) -> List[UseCase]:
    """Look up use cases by name, all of them when `names` is empty."""
    if not names:
        return list(USE_CASES.values())
    unknown = [n for n in names if n not in USE_CASES]
    if unknown:
        raise ConfigurationError(f"Unknown use case(s): {', '.join(unknown)}")
    return [USE_CASES[n] for n in names]
