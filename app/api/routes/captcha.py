from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.api.dependencies import get_captcha_service
from app.schemas.captcha import CaptchaVerifyRequest, CaptchaVerifyResponse
from app.services.captcha import CaptchaService

router = APIRouter(tags=["Captcha"])


@router.post("/captcha/verify", response_model=CaptchaVerifyResponse)
async def verify_captcha(
    payload: CaptchaVerifyRequest,
    service: CaptchaService = Depends(get_captcha_service),
):
    """Verify a reCAPTCHA v3 token.

    Returns 200 when the token is valid and the score reaches the threshold,
    400 for a missing token, a low score or a rejected token.
    """
    if not payload.token:
        return JSONResponse(
            status_code=400,
            content=CaptchaVerifyResponse(success=False, error="No token provided").model_dump(exclude_none=True),
        )

    result = await service.verify(payload.token)
    return JSONResponse(
        status_code=200 if result.success else 400,
        content=result.model_dump(exclude_none=True),
    )
