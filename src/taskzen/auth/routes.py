"""Login, logout and callback endpoints for an Auth0-compatible identity provider.

All routes are mounted under `/api/auth`.
"""

from __future__ import annotations

import logging
import secrets
from typing import Any
from urllib.parse import urlencode

import requests
from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import RedirectResponse

from taskzen.auth.session import (
    LOGIN_STATE_KEY,
    clear_session,
    current_user,
    store_login,
)
from taskzen.config import TaskZenSettings

logger = logging.getLogger(__name__)

router = APIRouter()


def _settings(request: Request) -> TaskZenSettings:
    settings = getattr(request.app.state, "settings", None)
    if not isinstance(settings, TaskZenSettings):
        raise HTTPException(status_code=500, detail="Server settings not configured")
    return settings


def _require_auth_settings(settings: TaskZenSettings) -> None:
    if not settings.auth_configured:
        raise HTTPException(
            status_code=409,
            detail="AUTH0_ISSUER_BASE_URL and AUTH0_CLIENT_ID are required to log in",
        )


def _exchange_code(settings: TaskZenSettings, code: str) -> dict[str, Any]:
    """Trade an authorization code for tokens at the issuer's token endpoint."""

    resp = requests.post(
        f"{settings.issuer_url}/oauth/token",
        json={
            "grant_type": "authorization_code",
            "client_id": settings.auth0_client_id,
            "client_secret": settings.auth0_client_secret,
            "code": code,
            "redirect_uri": settings.callback_url,
        },
        timeout=settings.http_timeout_seconds,
    )
    resp.raise_for_status()
    data = resp.json()
    return data if isinstance(data, dict) else {}


def _fetch_userinfo(settings: TaskZenSettings, access_token: str) -> dict[str, Any]:
    """Return the user profile, or an empty one if it cannot be fetched.

    The profile only decorates the header; a missing one is not fatal.
    """

    try:
        resp = requests.get(
            f"{settings.issuer_url}/userinfo",
            headers={"Authorization": f"Bearer {access_token}"},
            timeout=settings.http_timeout_seconds,
        )
        if not resp.ok:
            logger.warning("Failed to fetch user profile", extra={"status": resp.status_code})
            return {}
        data = resp.json()
    except (requests.RequestException, ValueError) as e:
        logger.warning("Failed to fetch user profile", extra={"error": str(e)})
        return {}
    return data if isinstance(data, dict) else {}


@router.get("/login", include_in_schema=False)
def login(request: Request) -> RedirectResponse:
    settings = _settings(request)
    _require_auth_settings(settings)

    state = secrets.token_urlsafe(16)
    request.session[LOGIN_STATE_KEY] = state

    params = {
        "response_type": "code",
        "client_id": settings.auth0_client_id,
        "redirect_uri": settings.callback_url,
        "scope": settings.auth0_scope,
        "state": state,
    }
    if settings.auth0_audience.strip():
        params["audience"] = settings.auth0_audience.strip()
    return RedirectResponse(f"{settings.issuer_url}/authorize?{urlencode(params)}", status_code=302)


@router.get("/callback", include_in_schema=False)
def callback(request: Request, code: str = "", state: str = "") -> RedirectResponse:
    settings = _settings(request)
    _require_auth_settings(settings)

    expected = request.session.pop(LOGIN_STATE_KEY, None)
    if not code or not state or state != expected:
        raise HTTPException(status_code=400, detail="Invalid login callback")

    try:
        tokens = _exchange_code(settings, code)
    except (requests.RequestException, ValueError) as e:
        logger.warning("Authorization code exchange failed", extra={"error": str(e)})
        raise HTTPException(status_code=502, detail="Authentication failed.") from e

    if not isinstance(tokens, dict):
        raise HTTPException(status_code=502, detail="Authentication failed.")
    access_token = tokens.get("access_token")
    if not isinstance(access_token, str) or not access_token:
        raise HTTPException(status_code=502, detail="Authentication failed.")

    expires_in = tokens.get("expires_in")
    store_login(
        request.session,
        access_token=access_token,
        expires_in=float(expires_in) if isinstance(expires_in, int | float) else None,
        user=_fetch_userinfo(settings, access_token),
    )
    logger.info("User logged in")
    return RedirectResponse("/", status_code=302)


@router.get("/logout", include_in_schema=False)
def logout(request: Request) -> RedirectResponse:
    settings = _settings(request)
    clear_session(request.session)
    if not settings.auth_configured:
        return RedirectResponse("/", status_code=302)

    params = {"client_id": settings.auth0_client_id, "returnTo": settings.base_url}
    return RedirectResponse(f"{settings.issuer_url}/v2/logout?{urlencode(params)}", status_code=302)


@router.get("/me")
def me(request: Request) -> dict[str, Any]:
    user = current_user(request.session)
    if user is None:
        raise HTTPException(status_code=401, detail="Not authenticated.")
    return user
