from fastapi import APIRouter, Depends, Request

from app.api.dependencies import get_notification_dispatcher
from app.schemas.review import DispatchResponse
from app.services.notification_dispatcher import NotificationDispatcher

router = APIRouter(tags=["Notifications"])


@router.post(
    "/notifications/review",
    response_model=DispatchResponse,
    responses={
        400: {"description": "Body is not {\"reviewId\": \"...\"}"},
        401: {"description": "Missing or invalid credential"},
        403: {"description": "Caller does not own the review"},
        404: {"description": "Review not found"},
        500: {"description": "Email not configured or unexpected error"},
    },
)
async def send_review_notification(
    request: Request,
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> DispatchResponse:
    """Notify admins that a review was submitted.

    The body must be ``{"reviewId": "<id>"}`` and nothing else. The caller
    must own the review; all notification content is read from storage.
    The raw body is handed to the dispatcher so credentials are checked
    before the body is even parsed.

    Returns:
        DispatchResponse: Delivered and failed counts. Some or all
            deliveries failing still yields 200.
    """
    body = await request.body()
    summary = await dispatcher.handle(request.headers.get("authorization"), body)
    return DispatchResponse(
        success=True,
        message=summary.message,
        success_count=summary.success_count,
        fail_count=summary.fail_count,
    )
