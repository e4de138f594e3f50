"""Pydantic schemas for reviews and review notifications."""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_CUSTOMER_NAME = "Valued Customer"


class ReviewRecord(BaseModel):
    """A stored review as read back from durable storage.

    Only the columns the notification pipeline needs are modelled; extra
    columns returned by storage are ignored.
    """

    id: str
    user_id: str = Field(..., description="Owner of the review (auth user id).")
    customer_name: str
    rating: int = Field(..., ge=1, le=5)
    review_text: str
    order_id: str | None = None

    @field_validator("id", "user_id", "order_id", mode="before")
    @classmethod
    def _stringify_ids(cls, value: object) -> object:
        # Storage may hand back UUID objects or ints for identifier columns
        if value is None or isinstance(value, str):
            return value
        return str(value)


class ReviewSubmission(BaseModel):
    """Review input accepted from a signed-in customer before it is stored."""

    rating: int = Field(
        ...,
        ge=1,
        le=5,
        description="Star rating from 1 to 5.",
    )
    review_text: str = Field(
        ...,
        min_length=10,
        max_length=500,
        description="Review body (trimmed, 10 to 500 characters).",
    )
    order_id: UUID = Field(..., description="Order the review refers to.")
    customer_name: str = Field(
        DEFAULT_CUSTOMER_NAME,
        min_length=1,
        max_length=100,
        description="Name displayed with the review.",
    )

    @field_validator("review_text", mode="before")
    @classmethod
    def _strip_text(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @field_validator("customer_name", mode="before")
    @classmethod
    def _default_name(cls, value: object) -> object:
        if value is None:
            return DEFAULT_CUSTOMER_NAME
        if isinstance(value, str):
            return value.strip() or DEFAULT_CUSTOMER_NAME
        return value

    def to_row(self, user_id: str) -> dict[str, object]:
        """Column mapping used when inserting the review."""
        return {
            "user_id": user_id,
            "order_id": str(self.order_id),
            "customer_name": self.customer_name,
            "rating": self.rating,
            "review_text": self.review_text,
        }


class NotificationRequest(BaseModel):
    """Body of a review notification request.

    Carries nothing but the review id: everything rendered into the
    notification is re-read from storage by the dispatcher.
    """

    model_config = ConfigDict(extra="forbid")

    review_id: str = Field(..., alias="reviewId", min_length=1)


class DispatchResponse(BaseModel):
    """Result reported once every recipient delivery has settled."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str
    success_count: int = Field(..., alias="successCount", ge=0)
    fail_count: int = Field(..., alias="failCount", ge=0)
