# orangeslice/domain/errors.py
from __future__ import annotations


class GatewayError(Exception):
    """A remote data call was rejected (network, validation or authorization failure)."""


class RecordNotFound(GatewayError):
    def __init__(self, kind: str, record_id) -> None:
        super().__init__(f"{kind} {record_id} not found")
        self.kind = kind
        self.record_id = record_id


class SubscriptionError(GatewayError):
    """A live-query stream failed. Terminal for that stream."""


class EditorStateError(Exception):
    """Illegal editor state transition."""


class EditorBusy(EditorStateError):
    """Another save/delete for the same entry is still in flight."""


class AuthError(Exception):
    """The hosted authenticator could not be reached or answered unexpectedly."""
