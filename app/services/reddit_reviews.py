# app/services/reddit_reviews.py

"""Builds tagged review snippets for a product from Reddit discussions.

Pipeline (sequential, no retries):
  1. validate the product title (1-5 words)
  2. app-only OAuth token from Reddit
  3. search a fixed set of subreddits + a general post search
     (failed searches are logged and skipped)
  4. filter, shuffle and cap the comments (30-50)
  5. classify with the LLM, keyword fallback on any LLM failure
"""

from __future__ import annotations

import logging
import random
from typing import Any, Dict, Iterable, List, Optional

import httpx

from app.core.config import Settings
from app.core.errors import BadRequestError, ConfigurationError
from app.schemas.reddit import RedditReview
from app.services.reddit_client import RedditClient
from app.services.sentiment import ExtractedComment, SentimentClassifier

logger = logging.getLogger(__name__)

SUBREDDITS = ["products", "reviews", "BuyItForLife", "gadgets", "technology", "AskReddit"]

MAX_TITLE_WORDS = 5
MAX_POSTS_FOR_COMMENTS = 10
MIN_BODY_LEN = 20
MAX_BODY_LEN = 1000
MIN_SAMPLE = 30
MAX_SAMPLE = 50

_REMOVED_MARKERS = ("[deleted]", "[removed]")


def validate_product_title(title: Any) -> str:
    if not isinstance(title, str) or not title.strip():
        raise BadRequestError("Product title is required")
    title = title.strip()
    if len(title.split()) > MAX_TITLE_WORDS:
        raise BadRequestError(f"Product title must be 1-{MAX_TITLE_WORDS} words")
    return title


def _as_str(value: Any, default: str) -> str:
    return value if isinstance(value, str) and value else default


def extract_comments(children: Iterable[Any]) -> List[ExtractedComment]:
    """Keeps readable comments of reasonable length from raw listing children."""
    comments: List[ExtractedComment] = []
    for child in children:
        if not isinstance(child, dict) or not isinstance(child.get("data"), dict):
            continue
        data = child["data"]
        body = data.get("body")
        if not isinstance(body, str):
            continue
        if not (MIN_BODY_LEN < len(body) < MAX_BODY_LEN):
            continue
        if any(marker in body for marker in _REMOVED_MARKERS):
            continue

        score = data.get("score")
        comments.append(
            ExtractedComment(
                body=body,
                author=_as_str(data.get("author"), "unknown"),
                permalink=f"https://reddit.com{_as_str(data.get('permalink'), '')}",
                subreddit=_as_str(data.get("subreddit"), "unknown"),
                score=score if isinstance(score, int) else 0,
            )
        )
    return comments


def sample_comments(comments: List[ExtractedComment], rng: random.Random) -> List[ExtractedComment]:
    shuffled = list(comments)
    rng.shuffle(shuffled)
    target = rng.randint(MIN_SAMPLE, MAX_SAMPLE)
    return shuffled[:min(target, len(shuffled))]


async def collect_raw_comments(reddit: RedditClient, query: str) -> List[Dict[str, Any]]:
    children: List[Dict[str, Any]] = []

    for subreddit in SUBREDDITS:
        try:
            children.extend(await reddit.search_subreddit(subreddit, query))
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Search in r/%s failed: %s", subreddit, e)

    try:
        posts = await reddit.search_posts(query)
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("General post search failed: %s", e)
        posts = []

    for post in posts[:MAX_POSTS_FOR_COMMENTS]:
        permalink = (post.get("data") or {}).get("permalink") if isinstance(post, dict) else None
        if not isinstance(permalink, str) or not permalink:
            continue
        try:
            children.extend(await reddit.post_comments(permalink))
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Fetching comments for %s failed: %s", permalink, e)

    return children


class RedditReviewGenerator:
    def __init__(
        self,
        settings: Settings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        llm_client: Any = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._settings = settings
        self._transport = transport
        self._llm_client = llm_client
        self._rng = rng if rng is not None else random.Random(settings.REDDIT_SAMPLE_SEED)

    def _classifier(self) -> SentimentClassifier:
        if not self._settings.OPENAI_API_KEY and self._llm_client is None:
            raise ConfigurationError("LLM API key not configured")
        return SentimentClassifier(
            api_key=self._settings.OPENAI_API_KEY or "",
            model=self._settings.OPENAI_MODEL,
            client=self._llm_client,
        )

    async def generate(self, product_title: Any) -> List[RedditReview]:
        title = validate_product_title(product_title)

        s = self._settings
        if not s.reddit_configured:
            raise ConfigurationError("Reddit API credentials not configured")

        async with httpx.AsyncClient(timeout=s.HTTP_TIMEOUT, transport=self._transport) as http:
            reddit = RedditClient(
                http,
                client_id=s.REDDIT_CLIENT_ID,
                client_secret=s.REDDIT_CLIENT_SECRET,
                user_agent=s.REDDIT_USER_AGENT,
            )
            await reddit.authenticate()
            raw = await collect_raw_comments(reddit, title)

        comments = sample_comments(extract_comments(raw), self._rng)
        logger.info(
            "Reddit search for %r: %d raw children, %d comments kept",
            title, len(raw), len(comments),
        )

        if not comments:
            return []
        return await self._classifier().classify(comments)
