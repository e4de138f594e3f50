from __future__ import annotations

from abc import ABC, abstractmethod

from app.schemas.review import ReviewRecord, ReviewSubmission


class AbstractReviewRepository(ABC):
	"""Interface for reading and writing review rows."""

	@abstractmethod
	async def get_review(self, review_id: str) -> ReviewRecord | None:
		"""Fetch a review by id using the repository's own credentials.

		Args:
			review_id: Identifier of the review.

		Returns:
			ReviewRecord, or None when no such review exists.

		Raises:
			UpstreamAppError: If storage cannot be reached or answers with an error.
		"""
		...

	@abstractmethod
	async def insert_review(
		self,
		submission: ReviewSubmission,
		*,
		user_id: str,
		access_token: str,
	) -> ReviewRecord:
		"""Store a new review on behalf of a signed-in user.

		Args:
			submission: Validated review input.
			user_id: Owner recorded on the row.
			access_token: The user's session token; row-level policies apply to it.

		Returns:
			ReviewRecord: The stored row, including its generated id.

		Raises:
			UpstreamAppError: If the write is rejected or storage is unreachable.
		"""
		...
