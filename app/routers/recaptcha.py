# /app/routers/recaptcha.py
import logging
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from security.recaptcha import verify_recaptcha, RecaptchaError
from observability.metrics import RECAPTCHA_VERIFICATIONS

logger = logging.getLogger(__name__)

router = APIRouter(tags=["recaptcha"])


def _client_ip(request: Request):
    return request.client.host if request.client else None


@router.post("/verify-recaptcha")
async def verify_recaptcha_token(request: Request):
    try:
        body = await request.json()
    except ValueError:
        body = None
    token = body.get("token") if isinstance(body, dict) else None

    if not token or not isinstance(token, str):
        logger.warning("recaptcha router: request without token from %s", _client_ip(request))
        return JSONResponse(status_code=400, content={"success": False, "message": "No token provided"})

    try:
        result = await verify_recaptcha(token, _client_ip(request))
    except RecaptchaError as e:
        logger.exception("recaptcha router: verification failed (%s): %s", e.reason, e)
        RECAPTCHA_VERIFICATIONS.labels(outcome=e.reason).inc()
        return JSONResponse(status_code=500, content={"success": False, "message": "Server error"})

    # low score is a normal answer, still 200
    RECAPTCHA_VERIFICATIONS.labels(outcome="admitted" if result.admitted else "rejected").inc()
    return {"success": result.admitted, "score": result.score}
