"""Durable storage adapter layer for review records."""

from app.adapters.storage.base import AbstractReviewRepository
from app.adapters.storage.factory import create_review_repository
from app.adapters.storage.supabase_rest import SupabaseReviewRepository

__all__ = [
    "AbstractReviewRepository",
    "SupabaseReviewRepository",
    "create_review_repository",
]
