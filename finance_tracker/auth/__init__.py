"""Authentication collaborator package."""

from finance_tracker.auth.identity import (
    IdentityProvider,
    StaticIdentityProvider,
    normalize_identity,
)

__all__ = ["IdentityProvider", "StaticIdentityProvider", "normalize_identity"]
