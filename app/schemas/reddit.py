# app/schemas/reddit.py

from __future__ import annotations

from typing import Any, List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from app.schemas.common import ApiModel, check_url, strip_required

ReviewTag = Literal["positive", "negative", "neutral"]


class RedditReview(ApiModel):
    comment: str
    tag: ReviewTag = "neutral"
    link: str
    author: str
    subreddit: str

    @field_validator("comment", "author", "subreddit")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        return strip_required(value)

    @field_validator("link")
    @classmethod
    def _valid_link(cls, value: str) -> str:
        return check_url(value)


class RedditReviewsRequest(ApiModel):
    # Typed loosely so a wrong type gets the same 400 message as a missing title
    product_title: Optional[Any] = None


class RedditReviewsResponse(ApiModel):
    success: bool = True
    comments: List[RedditReview]
    total: int


class ClassifiedComment(BaseModel):
    """One element of the JSON array the language model must return."""

    model_config = ConfigDict(extra="ignore")

    comment: str = Field(validation_alias=AliasChoices("comment", "commentText"), min_length=1)
    tag: ReviewTag
    link: str = Field(validation_alias=AliasChoices("link", "permalink"), min_length=1)
    author: Optional[str] = None
    subreddit: Optional[str] = None
