"""Identity adapter layer - turns caller credentials into verified users."""

from app.adapters.identity.base import AbstractIdentityVerifier, VerifiedUser
from app.adapters.identity.factory import create_identity_verifier
from app.adapters.identity.supabase_auth import SupabaseIdentityVerifier

__all__ = [
    "AbstractIdentityVerifier",
    "SupabaseIdentityVerifier",
    "VerifiedUser",
    "create_identity_verifier",
]
