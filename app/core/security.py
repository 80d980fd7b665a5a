# app/core/security.py

import logging
import secrets
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.config import Settings
from app.core.errors import UnauthorizedError

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AdminUser:
    id: str


ADMIN_USER = AdminUser(id="admin")


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> Optional[AdminUser]:
    """Returns the admin user when a valid bearer token was sent, else None."""
    if credentials is None or not settings.ADMIN_API_TOKEN:
        return None
    if secrets.compare_digest(credentials.credentials, settings.ADMIN_API_TOKEN):
        return ADMIN_USER
    return None


def require_admin(
    user: Optional[AdminUser] = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
) -> AdminUser:
    if not settings.ADMIN_API_TOKEN:
        return ADMIN_USER
    if user is None:
        raise UnauthorizedError("Unauthorized action")
    return user
