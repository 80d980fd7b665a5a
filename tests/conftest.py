import json
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from main import create_app

ENV_VARS = [
    "DATABASE_URL",
    "REDDIT_CLIENT_ID",
    "REDDIT_CLIENT_SECRET",
    "REDDIT_USER_AGENT",
    "REDDIT_SAMPLE_SEED",
    "OPENAI_API_KEY",
    "OPENAI_MODEL",
    "ADMIN_API_TOKEN",
    "CORS_ORIGINS",
    "HTTP_TIMEOUT",
]


@pytest.fixture
def settings(tmp_path, monkeypatch):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'test.db'}")
    return Settings()


@pytest.fixture
def reddit_settings(settings):
    settings.REDDIT_CLIENT_ID = "client-id"
    settings.REDDIT_CLIENT_SECRET = "client-secret"
    settings.REDDIT_USER_AGENT = "reddit-reviews-tests/0.1"
    settings.OPENAI_API_KEY = "sk-test"
    return settings


@pytest.fixture
def client(settings):
    app = create_app(settings)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_category(client):
    def _make(name="Headphones", **extra):
        body = {
            "name": name,
            "image": {"url": "https://ik.imagekit.io/demo/cat.png", "fileId": "file_123", "name": "cat.png"},
            **extra,
        }
        r = client.post("/api/categories", json=body)
        assert r.status_code == 201, r.text
        return r.json()["data"]

    return _make


def product_payload(category_id, **overrides):
    body = {
        "productTitle": "Sony WH-1000XM5",
        "productDescription": "Noise cancelling over-ear headphones with long battery life.",
        "productPhotos": ["https://ik.imagekit.io/demo/xm5.png"],
        "productPrice": "$349.99",
        "affiliateButtons": [{"link": "https://amzn.to/xm5", "text": "Buy on Amazon"}],
        "redditReviews": [],
        "productScore": 80,
        "categoryId": category_id,
    }
    body.update(overrides)
    return body


@pytest.fixture
def make_product(client, make_category):
    state = {}

    def _make(**overrides):
        if "categoryId" not in overrides:
            if "category" not in state:
                state["category"] = make_category()
            overrides["categoryId"] = state["category"]["id"]
        category_id = overrides.pop("categoryId")
        r = client.post("/api/products", json=product_payload(category_id, **overrides))
        assert r.status_code == 201, r.text
        return r.json()

    return _make


def review(tag="positive", comment="Best headphones I have owned so far", n=1):
    return {
        "comment": comment,
        "tag": tag,
        "link": f"https://reddit.com/r/headphones/comments/{tag}{n}",
        "author": f"user_{n}",
        "subreddit": "headphones",
    }


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeLLM:
    """Stands in for AsyncOpenAI: only chat.completions.create is used."""

    def __init__(self, content=None, error=None):
        self.completions = FakeCompletions(content=content, error=error)
        self.chat = SimpleNamespace(completions=self.completions)


def llm_json(items):
    return "```json\n" + json.dumps(items) + "\n```"
