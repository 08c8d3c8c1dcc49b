"""
Caller Identity Resolution

The accessor never looks up who is calling. The UI asks an
IdentityProvider once per action and passes the result in explicitly.
A None identity means "no caller".
"""

from abc import ABC, abstractmethod
from typing import Optional


class IdentityProvider(ABC):
    """Resolves the authenticated principal behind the current request."""

    @abstractmethod
    def resolve_caller_identity(self) -> Optional[str]:
        """
        Return the caller's identity, or None if nobody is signed in.

        The result is trusted as-is.
        """
        pass


class StaticIdentityProvider(IdentityProvider):
    """Always returns the same identity. Used for local runs and tests."""

    def __init__(self, identity: Optional[str]):
        self._identity = normalize_identity(identity)

    def resolve_caller_identity(self) -> Optional[str]:
        return self._identity


def normalize_identity(identity: Optional[str]) -> Optional[str]:
    """Treat blank identities as absent."""
    if identity is None:
        return None
    identity = identity.strip()
    return identity or None
