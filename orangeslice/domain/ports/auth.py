from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass(frozen=True)
class CurrentUser:
    username: str
    email: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.email or self.username or "User"


class AuthenticatorPort(Protocol):
    def current_user(self, token: str) -> Optional[CurrentUser]:
        """Resolve a session token to its user, or None if the token is not valid."""
        ...

    def sign_out(self, token: str) -> None: ...
