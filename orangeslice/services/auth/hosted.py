# orangeslice/services/auth/hosted.py
from __future__ import annotations

from http import HTTPStatus
from typing import Any, Dict, Optional

import requests

from orangeslice.common.logging import get_logger
from orangeslice.common.settings import AuthConfig
from orangeslice.domain.errors import AuthError
from orangeslice.domain.ports.auth import CurrentUser

logger = get_logger(__name__)


class HostedAuthenticator:
    """
    Delegates every session decision to the hosted user pool: a token is
    valid iff the pool's userinfo endpoint accepts it. Nothing about users
    or credentials is stored here.
    """

    def __init__(self, cfg: AuthConfig, session: Optional[requests.Session] = None) -> None:
        self.cfg = cfg
        self.http = session or requests.Session()

    def _headers(self, token: str) -> Dict[str, str]:
        return {"Authorization": f"Bearer {token}", "Accept": "application/json"}

    def current_user(self, token: str) -> Optional[CurrentUser]:
        if not token:
            return None
        try:
            r = self.http.get(self.cfg.userinfo_url, headers=self._headers(token), timeout=self.cfg.timeout_sec)
        except requests.RequestException as e:
            raise AuthError(f"authenticator unreachable: {e}") from e

        if r.status_code in (HTTPStatus.UNAUTHORIZED, HTTPStatus.FORBIDDEN):
            return None
        if r.status_code != HTTPStatus.OK:
            raise AuthError(f"authenticator answered {r.status_code}")
        try:
            data: Dict[str, Any] = r.json()
        except ValueError as e:
            raise AuthError("authenticator returned invalid JSON") from e
        return self.normalize(data)

    @staticmethod
    def normalize(data: Dict[str, Any]) -> Optional[CurrentUser]:
        username = data.get("username") or data.get("cognito:username") or data.get("sub")
        if not username:
            return None
        return CurrentUser(username=str(username), email=data.get("email"))

    def sign_out(self, token: str) -> None:
        payload = {"token": token}
        if self.cfg.client_id:
            payload["client_id"] = self.cfg.client_id
        try:
            r = self.http.post(
                self.cfg.signout_url,
                data=payload,
                headers=self._headers(token),
                timeout=self.cfg.timeout_sec,
            )
        except requests.RequestException as e:
            raise AuthError(f"sign-out failed: {e}") from e
        if r.status_code >= 400:
            raise AuthError(f"sign-out answered {r.status_code}")
        logger.info("Signed out session")
