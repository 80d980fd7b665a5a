# app/schemas/common.py

from pydantic import AnyUrl, BaseModel, ConfigDict, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

from app.services.slugs import create_slug

_url_adapter = TypeAdapter(AnyUrl)


class ApiModel(BaseModel):
    """Base for request/response bodies: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def check_url(value: str) -> str:
    """Validates an absolute URL but keeps the caller's exact string."""
    value = value.strip()
    try:
        parsed = _url_adapter.validate_python(value)
    except ValidationError:
        raise ValueError("Invalid URL format")
    if not parsed.host:
        raise ValueError("Invalid URL format")
    return value


def strip_required(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


def require_slug(value: str) -> str:
    """Rejects text with no characters a URL slug can keep (e.g. "!!!")."""
    if not create_slug(value):
        raise ValueError("must contain at least one letter or digit")
    return value
