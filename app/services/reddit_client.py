# app/services/reddit_client.py

from __future__ import annotations

import logging
from typing import Any, Dict, List

import httpx

from app.core.errors import UpstreamError

logger = logging.getLogger(__name__)

TOKEN_URL = "https://www.reddit.com/api/v1/access_token"
API_BASE = "https://oauth.reddit.com"


def _children(listing: Any) -> List[Dict[str, Any]]:
    """Children of a Reddit listing payload, or [] when the shape is unexpected."""
    if isinstance(listing, dict):
        data = listing.get("data")
        if isinstance(data, dict) and isinstance(data.get("children"), list):
            return data["children"]
    return []


class RedditClient:
    """Thin wrapper over the Reddit OAuth API (application-only auth)."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        *,
        client_id: str,
        client_secret: str,
        user_agent: str,
    ) -> None:
        self._http = http
        self._client_id = client_id
        self._client_secret = client_secret
        self._user_agent = user_agent
        self._token: str | None = None

    async def authenticate(self) -> str:
        try:
            r = await self._http.post(
                TOKEN_URL,
                auth=(self._client_id, self._client_secret),
                data={"grant_type": "client_credentials"},
                headers={"User-Agent": self._user_agent},
            )
            r.raise_for_status()
            token = r.json().get("access_token")
        except (httpx.HTTPError, ValueError) as e:
            raise UpstreamError("Failed to get Reddit access token") from e

        if not token:
            raise UpstreamError("Failed to get Reddit access token")

        self._token = token
        return token

    async def _get(self, path: str, params: Dict[str, Any]) -> Any:
        if self._token is None:
            raise UpstreamError("Reddit client is not authenticated")
        r = await self._http.get(
            f"{API_BASE}{path}",
            params=params,
            headers={
                "Authorization": f"Bearer {self._token}",
                "User-Agent": self._user_agent,
            },
        )
        r.raise_for_status()
        return r.json()

    async def search_subreddit(self, subreddit: str, query: str) -> List[Dict[str, Any]]:
        data = await self._get(
            f"/r/{subreddit}/search.json",
            {"q": query, "sort": "relevance", "limit": 100, "type": "comment"},
        )
        return _children(data)

    async def search_posts(self, query: str) -> List[Dict[str, Any]]:
        data = await self._get("/search.json", {"q": query, "sort": "relevance", "limit": 50})
        return _children(data)

    async def post_comments(self, permalink: str) -> List[Dict[str, Any]]:
        # A post page is [post listing, comment listing]
        data = await self._get(f"{permalink.rstrip('/')}.json", {"limit": 20})
        if isinstance(data, list) and len(data) > 1:
            return _children(data[1])
        return []
