"""Pydantic models for transcript input and generated podcast assets."""
from pydantic import BaseModel, ConfigDict, Field, ValidationError, computed_field, field_validator
from typing import Any, List, Dict, Optional, Literal, Type
from datetime import datetime, timezone


# ==================== Transcript input ====================

class Chapter(BaseModel):
    """Auto-detected chapter as delivered by the transcription service."""
    start: int  # milliseconds
    end: int = 0  # milliseconds
    headline: str = ""
    summary: str = ""
    gist: Optional[str] = None


class ChapterAnchor(BaseModel):
    """Authoritative chapter record that AI output is merged onto."""
    index: int
    timestamp: int  # whole seconds from episode start
    headline: str
    summary: str


class Transcript(BaseModel):
    """Transcript text plus its ordered chapter list."""
    text: str = ""
    chapters: List[Chapter] = Field(default_factory=list)

    def anchors(self, limit: Optional[int] = None) -> List[ChapterAnchor]:
        """Index chapters in order, optionally keeping only the first `limit`."""
        chapters = self.chapters if limit is None else self.chapters[:limit]
        return [
            ChapterAnchor(
                index=idx,
                timestamp=chapter.start // 1000,
                headline=chapter.headline,
                summary=chapter.summary,
            )
            for idx, chapter in enumerate(chapters)
        ]


# ==================== Output schemas ====================
# Strict: values are checked, never coerced. Unknown keys from the model are ignored.

class OutputSchema(BaseModel):
    """Base for every schema that model output is validated against."""
    model_config = ConfigDict(strict=True, extra="ignore", populate_by_name=True)


class Summary(OutputSchema):
    """Multi-format episode summary."""
    full: str = Field(min_length=1)
    bullets: List[str] = Field(min_length=1)
    insights: List[str] = Field(min_length=1)
    tldr: str = Field(min_length=1)


class Titles(OutputSchema):
    """Title suggestions per destination."""
    youtube_short: List[str] = Field(alias="youtubeShort", min_length=3, max_length=3)
    youtube_long: List[str] = Field(alias="youtubeLong", min_length=3, max_length=3)
    podcast_titles: List[str] = Field(alias="podcastTitles", min_length=3, max_length=3)
    seo_keywords: List[str] = Field(alias="seoKeywords", min_length=5, max_length=10)


class Hashtags(OutputSchema):
    """Platform-specific hashtag sets."""
    youtube: List[str] = Field(min_length=5, max_length=5)
    instagram: List[str] = Field(min_length=6, max_length=8)
    tiktok: List[str] = Field(min_length=5, max_length=6)
    linkedin: List[str] = Field(min_length=5, max_length=5)
    twitter: List[str] = Field(min_length=5, max_length=5)


class SocialPosts(OutputSchema):
    """One promotional post per platform."""
    twitter: str = Field(min_length=1)
    linkedin: str = Field(min_length=1)
    instagram: str = Field(min_length=1)
    tiktok: str = Field(min_length=1)
    youtube: str = Field(min_length=1)
    facebook: str = Field(min_length=1)


def keep_valid_items(value: Any, item_model: Type[BaseModel]) -> Any:
    """Keep the list items that pass `item_model`; a non-list is left for the list check to reject."""
    if not isinstance(value, list):
        return value
    kept = []
    for item in value:
        try:
            kept.append(item_model.model_validate(item))
        except ValidationError:
            continue
    return kept


class KeyMomentDraft(OutputSchema):
    """AI rewrite of one chapter, keyed by chapter index."""
    index: int
    text: Optional[str] = None
    description: Optional[str] = None


class KeyMomentsDraft(OutputSchema):
    key_moments: List[KeyMomentDraft] = Field(alias="keyMoments")

    @field_validator("key_moments", mode="before")
    @classmethod
    def _drop_bad_items(cls, value: Any) -> Any:
        return keep_valid_items(value, KeyMomentDraft)


class ChapterTitleDraft(OutputSchema):
    """AI chapter title, keyed by chapter index."""
    index: int
    title: Optional[str] = None


class ChapterTitlesDraft(OutputSchema):
    titles: List[ChapterTitleDraft]

    @field_validator("titles", mode="before")
    @classmethod
    def _drop_bad_items(cls, value: Any) -> Any:
        return keep_valid_items(value, ChapterTitleDraft)


# ==================== Merged outputs ====================

class KeyMoment(BaseModel):
    """A chapter-anchored highlight for clips and navigation."""
    time: str  # HH:MM:SS
    timestamp: int  # seconds
    text: str
    description: str


class YouTubeTimestamp(BaseModel):
    """One line of a YouTube chapter list."""
    timestamp: str  # M:SS or H:MM:SS
    description: str


class GeneratedContent(BaseModel):
    """Everything the workflow produced for one transcript."""
    summary: Optional[Summary] = None
    titles: Optional[Titles] = None
    hashtags: Optional[Hashtags] = None
    social_posts: Optional[SocialPosts] = None
    key_moments: Optional[List[KeyMoment]] = None
    youtube_timestamps: Optional[List[YouTubeTimestamp]] = None
    generated_at: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


# ==================== Status contract ====================

StepStatus = Literal["pending", "running", "completed", "failed"]


class JobStatus(BaseModel):
    """Per-step processing state, read by the UI to render progress."""
    steps: Dict[str, StepStatus] = Field(default_factory=dict)
    degraded: List[str] = Field(default_factory=list)  # steps that returned their fallback

    @computed_field
    @property
    def progress(self) -> int:
        """Percentage of steps that have finished, successfully or not."""
        if not self.steps:
            return 0
        done = sum(1 for status in self.steps.values() if status in ("completed", "failed"))
        return int(done * 100 / len(self.steps))
