"""LLM prompt templates for podcast asset generation."""
from typing import List, Optional

from extraction.models import Transcript, ChapterAnchor


def _topics(transcript: Transcript, limit: Optional[int] = None, default: str = "") -> str:
    chapters = transcript.chapters if limit is None else transcript.chapters[:limit]
    if not chapters:
        return default
    return "\n".join(f"{idx + 1}. {ch.headline}" for idx, ch in enumerate(chapters))


def _chapter_block(anchors: List[ChapterAnchor]) -> str:
    return "\n\n".join(
        f"Index: {a.index}\nTime: {a.timestamp}s\nHeadline: {a.headline}\nSummary: {a.summary}"
        for a in anchors
    )


def summary_prompt(transcript: Transcript) -> str:
    """Generate prompt for the multi-format episode summary.

    Args:
        transcript: Episode transcript

    Returns:
        Formatted prompt string
    """
    chapters = ""
    if transcript.chapters:
        listing = "\n".join(
            f"{idx + 1}. {ch.headline} - {ch.summary}" for idx, ch in enumerate(transcript.chapters)
        )
        chapters = f"AUTO-DETECTED CHAPTERS:\n{listing}"

    return f"""You are an expert podcast content analyst and marketing strategist. Your summaries are engaging, insightful, and highlight the most valuable takeaways for listeners.

Analyze this podcast transcript in detail and create a structured JSON summary.

TRANSCRIPT (first 3000 chars):
{transcript.text[:3000]}...

{chapters}

REQUIRED OUTPUT FORMAT (STRICT JSON):

{{
  "full": "200-300 word overview...",
  "bullets": ["point1", "point2", ...],
  "insights": ["insight1", "insight2", ...],
  "tldr": "one-sentence summary"
}}

DO NOT include any explanation. Return ONLY valid JSON."""


def titles_prompt(transcript: Transcript) -> str:
    """Generate prompt for title suggestions.

    Args:
        transcript: Episode transcript

    Returns:
        Formatted prompt string
    """
    topics = _topics(transcript)
    topics_block = f"MAIN TOPICS COVERED:\n{topics}" if topics else ""

    return f"""You are an expert in SEO, content marketing, and viral content creation.
You ALWAYS return valid JSON. No text, no markdown, no explanation.

Generate optimized titles for this podcast episode.
Output ONLY valid JSON in this format:

{{
  "youtubeShort": ["...", "...", "..."],
  "youtubeLong": ["...", "...", "..."],
  "podcastTitles": ["...", "...", "..."],
  "seoKeywords": ["...", "..."]
}}

TRANSCRIPT PREVIEW:
{transcript.text[:2000]}...

{topics_block}

RULES:

1. YOUTUBE SHORT TITLES (exactly 3):
   - 40-60 characters
   - Curiosity-driven hook
   - Clickable but not clickbait

2. YOUTUBE LONG TITLES (exactly 3):
   - 70-100 characters
   - SEO-focused
   - Format: "Main Topic: Subtitle | Extra context"

3. PODCAST TITLES (exactly 3):
   - Creative + memorable
   - RSS directory friendly

4. SEO KEYWORDS (5-10):
   - High traffic search intent
   - Mix broad + niche
   - Only keywords, no sentences

Return ONLY JSON, no markdown."""


def hashtags_prompt(transcript: Transcript) -> str:
    """Generate prompt for platform hashtag sets."""
    return f"""You are a social media growth expert who understands platform algorithms and trending hashtag strategies. You create hashtag sets that maximize reach and engagement.

Create platform-optimized hashtag strategies for this podcast.

TOPICS COVERED:
{_topics(transcript, default="General discussion")}

OUTPUT FORMAT (STRICT JSON ONLY):

{{
  "youtube": ["#tag1", "#tag2", "#tag3", "#tag4", "#tag5"],
  "instagram": ["#tag1", "... 6 to 8 tags ..."],
  "tiktok": ["5 to 6 tags"],
  "linkedin": ["5 tags"],
  "twitter": ["5 tags"]
}}

Instructions:
- YOUTUBE: exactly 5 hashtags
- INSTAGRAM: 6-8 hashtags
- TIKTOK: 5-6 hashtags
- LINKEDIN: exactly 5 hashtags
- TWITTER: exactly 5 hashtags
- ALL hashtags must start with #
- NO text outside JSON
- NO explanations, no markdown"""


def social_posts_prompt(transcript: Transcript) -> str:
    """Generate prompt for per-platform promotional posts."""
    if transcript.chapters:
        summary = transcript.chapters[0].summary
    else:
        summary = transcript.text[:500]

    return f"""You are a viral social media marketing expert who understands each platform's unique audience, tone, and best practices. You create platform-optimized content that drives engagement and grows audiences.

Create platform-specific promotional posts for this podcast episode.

PODCAST SUMMARY:
{summary}

KEY TOPICS DISCUSSED:
{_topics(transcript, limit=5, default="See transcript")}

OUTPUT REQUIREMENTS:
Return STRICT JSON with this structure:

{{
  "twitter": "string",
  "linkedin": "string",
  "instagram": "string",
  "tiktok": "string",
  "youtube": "string",
  "facebook": "string"
}}

NO extra text. NO explanations. NO markdown fences. ONLY pure JSON.

Now generate:

1. TWITTER/X - compelling post
2. LINKEDIN - 1-2 paragraphs
3. INSTAGRAM - caption with 2-4 emojis
4. TIKTOK - short hype caption
5. YOUTUBE - 2-3 para description
6. FACEBOOK - 2-3 paras engaging style"""


def key_moments_prompt(anchors: List[ChapterAnchor]) -> str:
    """Generate prompt that rewrites chapters into key moments.

    Args:
        anchors: Indexed chapters the output will be merged onto

    Returns:
        Formatted prompt string
    """
    return f"""You are a content optimization expert. Transform these podcast chapters into key moments for viewers:

CRITICAL INSTRUCTIONS:
- Create concise, engaging titles (3-6 words) for each chapter.
- Summarize the chapter summary into 1-2 sentences.
- Keep the "index" of each chapter exactly as given.
- Return ONLY JSON in this format:

{{
  "keyMoments": [
    {{
      "index": 0,
      "text": "Short catchy title",
      "description": "Brief summary"
    }}
  ]
}}

CHAPTER DATA:
{_chapter_block(anchors)}"""


def youtube_timestamps_prompt(anchors: List[ChapterAnchor]) -> str:
    """Generate prompt for short YouTube chapter titles."""
    return f"""You are a YouTube content optimization expert. Create SHORT CHAPTER TITLES (3-6 words each).

CRITICAL:
- Do NOT copy transcript text.
- Do NOT write long sentences.
- ONLY create short, punchy titles.
- Return ONLY JSON.

CHAPTER DATA:
{_chapter_block(anchors)}

JSON FORMAT (RETURN ONLY THIS):
{{
  "titles": [
    {{ "index": 0, "title": "Intro to Automation" }},
    {{ "index": 1, "title": "Setting Up Tools" }}
  ]
}}"""
