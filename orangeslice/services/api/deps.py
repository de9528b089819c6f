# orangeslice/services/api/deps.py
from __future__ import annotations
from http import HTTPStatus
from typing import Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from orangeslice.domain.errors import AuthError
from orangeslice.domain.ports.auth import AuthenticatorPort, CurrentUser
from orangeslice.services.context import AppContext

bearer = HTTPBearer(auto_error=False)


def get_context(request: Request) -> AppContext:
    """The AppContext built by the app lifespan."""
    return request.app.state.ctx


def get_authenticator(ctx: AppContext = Depends(get_context)) -> AuthenticatorPort:
    return ctx.authenticator


def get_token(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer)) -> str:
    if not credentials or not credentials.credentials:
        raise HTTPException(
            status_code=HTTPStatus.UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return credentials.credentials


def require_admin(
    token: str = Depends(get_token),
    auth: AuthenticatorPort = Depends(get_authenticator),
) -> CurrentUser:
    """
    Gate for administrator routes. Token validation is entirely the hosted
    authenticator's call.
    """
    try:
        user = auth.current_user(token)
    except AuthError as e:
        raise HTTPException(status_code=HTTPStatus.SERVICE_UNAVAILABLE, detail=str(e))
    if user is None:
        raise HTTPException(
            status_code=HTTPStatus.UNAUTHORIZED,
            detail="Invalid or expired session",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user
