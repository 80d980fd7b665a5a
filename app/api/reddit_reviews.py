# app/api/reddit_reviews.py

import logging

from fastapi import APIRouter, Depends

from app.core.config import Settings
from app.core.errors import UpstreamError
from app.core.security import get_settings
from app.schemas.reddit import RedditReviewsRequest, RedditReviewsResponse
from app.services.reddit_reviews import RedditReviewGenerator, validate_product_title

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/reddit-reviews", tags=["reddit reviews"])


def get_review_generator(settings: Settings = Depends(get_settings)) -> RedditReviewGenerator:
    return RedditReviewGenerator(settings)


@router.post("", response_model=RedditReviewsResponse)
async def generate_reddit_reviews(
    payload: RedditReviewsRequest,
    generator: RedditReviewGenerator = Depends(get_review_generator),
):
    """
    Searches Reddit for comments about the product and tags each one
    positive / negative / neutral. Nothing is saved; the admin picks
    which reviews to attach to the product.
    """
    title = validate_product_title(payload.product_title)

    try:
        comments = await generator.generate(title)
    except UpstreamError as e:
        logger.error("Reddit review generation for %r failed: %s", title, e.message)
        raise UpstreamError("Failed to generate reviews") from e
    except Exception as e:
        logger.exception("Unexpected error generating reviews for %r", title)
        raise UpstreamError("Failed to generate reviews") from e

    return RedditReviewsResponse(comments=comments, total=len(comments))
