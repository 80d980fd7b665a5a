# app/services/review_stats.py

from collections import Counter
from typing import Iterable, Mapping, NamedTuple, Union

from app.schemas.reddit import RedditReview


class ReviewPercentages(NamedTuple):
    positive: int
    negative: int
    neutral: int


def _percent(count: int, total: int) -> int:
    # round half up, like the listing pages expect (1/8 -> 13)
    return (200 * count + total) // (2 * total)


def compute_review_percentages(
    reviews: Iterable[Union[RedditReview, Mapping[str, str]]],
) -> ReviewPercentages:
    tags = Counter(
        review.tag if isinstance(review, RedditReview) else review.get("tag")
        for review in reviews
    )
    total = sum(tags.values())
    if total == 0:
        return ReviewPercentages(0, 0, 0)

    return ReviewPercentages(
        positive=_percent(tags["positive"], total),
        negative=_percent(tags["negative"], total),
        neutral=_percent(tags["neutral"], total),
    )
