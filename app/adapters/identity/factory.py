"""Factory for the identity verifier."""

from app.adapters.identity.base import AbstractIdentityVerifier
from app.adapters.identity.supabase_auth import SupabaseIdentityVerifier
from app.core.config import settings


def create_identity_verifier() -> AbstractIdentityVerifier:
    """Build the identity verifier from ``settings.supabase``."""
    return SupabaseIdentityVerifier(
        base_url=settings.supabase.url,
        anon_key=settings.supabase.anon_key,
        timeout_seconds=settings.supabase.timeout_seconds,
    )
