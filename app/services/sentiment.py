# app/services/sentiment.py

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, List, Optional

from openai import AsyncOpenAI
from pydantic import TypeAdapter, ValidationError

from app.schemas.reddit import ClassifiedComment, RedditReview, ReviewTag

logger = logging.getLogger(__name__)

POSITIVE_WORDS = ("good", "great", "excellent", "amazing", "love", "best", "awesome", "perfect", "fantastic")
NEGATIVE_WORDS = ("bad", "terrible", "awful", "hate", "worst", "horrible", "disappointing", "useless")

FALLBACK_COMMENT_LIMIT = 500

_SYS_PROMPT = (
    "You classify Reddit comments about consumer products by sentiment. "
    "Answer with a JSON array only, no prose and no markdown."
)

_FENCE = re.compile(r"```(?:json)?\s*\n?", re.IGNORECASE)

_classified_adapter = TypeAdapter(List[ClassifiedComment])


@dataclass(frozen=True)
class ExtractedComment:
    body: str
    author: str
    permalink: str
    subreddit: str
    score: int = 0


class LLMOutputError(ValueError):
    """The model's reply did not match the expected JSON schema."""


def keyword_sentiment(text: str) -> ReviewTag:
    lower = text.lower()
    positive = sum(1 for word in POSITIVE_WORDS if word in lower)
    negative = sum(1 for word in NEGATIVE_WORDS if word in lower)
    if positive > negative:
        return "positive"
    if negative > positive:
        return "negative"
    return "neutral"


def fallback_reviews(comments: List[ExtractedComment]) -> List[RedditReview]:
    return [
        RedditReview(
            comment=c.body[:FALLBACK_COMMENT_LIMIT],
            tag=keyword_sentiment(c.body),
            link=c.permalink,
            author=c.author,
            subreddit=c.subreddit,
        )
        for c in comments
    ]


def build_prompt(comments: List[ExtractedComment]) -> str:
    lines = [
        "Analyze the following Reddit comments and return a JSON array where each "
        "comment is classified with sentiment analysis.",
        "",
        "For each comment, return an object with:",
        "- comment: the original comment text (clean and readable)",
        '- tag: either "positive", "negative", or "neutral"',
        "- link: the reddit permalink",
        "- author: the username",
        "- subreddit: the subreddit name",
        "",
        "Comments to analyze:",
    ]
    for i, c in enumerate(comments, start=1):
        lines.append("")
        lines.append(f"{i}. Comment: {json.dumps(c.body)}")
        lines.append(f"   Author: {c.author}")
        lines.append(f"   Link: {c.permalink}")
        lines.append(f"   Subreddit: {c.subreddit}")
    lines.append("")
    lines.append("Return only a valid JSON array, no additional text.")
    return "\n".join(lines)


def parse_llm_output(text: Optional[str]) -> List[RedditReview]:
    """Validates the model reply; raises LLMOutputError on anything non-conforming."""
    if not isinstance(text, str) or not text.strip():
        raise LLMOutputError("Empty LLM response")

    cleaned = _FENCE.sub("", text).replace("```", "").strip()
    try:
        items = _classified_adapter.validate_json(cleaned)
        return [
            RedditReview(
                comment=item.comment,
                tag=item.tag,
                link=item.link,
                author=item.author or "unknown",
                subreddit=item.subreddit or "unknown",
            )
            for item in items
        ]
    except ValidationError as e:
        raise LLMOutputError(f"LLM output failed validation: {e.error_count()} error(s)") from e


class SentimentClassifier:
    """Classifies a batch of comments with an OpenAI chat model.

    Any failure of the call or of the output validation falls back to the
    keyword heuristic for the whole batch.
    """

    def __init__(self, *, api_key: str, model: str, client: Any = None) -> None:
        self._model = model
        self._client = client if client is not None else AsyncOpenAI(api_key=api_key)

    async def _complete(self, prompt: str) -> Optional[str]:
        completion = await self._client.chat.completions.create(
            model=self._model,
            messages=[
                {"role": "system", "content": _SYS_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=0.2,
        )
        return completion.choices[0].message.content

    async def classify(self, comments: List[ExtractedComment]) -> List[RedditReview]:
        if not comments:
            return []

        try:
            text = await self._complete(build_prompt(comments))
            reviews = parse_llm_output(text)
            logger.info("LLM classified %d comments", len(reviews))
            return reviews
        except Exception as e:
            logger.warning("LLM classification failed, using keyword fallback: %s", e)
            return fallback_reviews(comments)
