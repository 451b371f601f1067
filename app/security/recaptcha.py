# app/security/recaptcha.py
import logging
from dataclasses import dataclass, field
from typing import List, Optional

import httpx

from configs import config

logger = logging.getLogger(__name__)

MIN_SCORE = 0.5


class RecaptchaError(Exception):
    """Base class for anything that stops us from getting a verdict."""
    reason = "error"


class RecaptchaNotConfigured(RecaptchaError):
    reason = "not_configured"


class RecaptchaUnavailable(RecaptchaError):
    """Network failure, timeout or non-2xx from siteverify."""
    reason = "unavailable"


class RecaptchaBadResponse(RecaptchaError):
    """siteverify answered, but not with the JSON we expect."""
    reason = "bad_response"


@dataclass
class VerificationResult:
    success: bool
    score: float
    hostname: Optional[str] = None
    action: Optional[str] = None
    error_codes: List[str] = field(default_factory=list)

    @property
    def admitted(self) -> bool:
        return self.success and self.score >= MIN_SCORE


def _http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=config.recaptcha.TIMEOUT)


def _parse(payload) -> VerificationResult:
    if not isinstance(payload, dict) or "success" not in payload:
        raise RecaptchaBadResponse("siteverify payload has no 'success' field")

    raw_score = payload.get("score")
    if raw_score is None:
        score = 0.0
    else:
        # bool is an int subclass, reject it explicitly
        if isinstance(raw_score, bool) or not isinstance(raw_score, (int, float)):
            raise RecaptchaBadResponse(f"siteverify score is not a number: {raw_score!r}")
        score = float(raw_score)

    return VerificationResult(
        success=payload.get("success") is True,
        score=score,
        hostname=payload.get("hostname"),
        action=payload.get("action"),
        error_codes=list(payload.get("error-codes") or []),
    )


async def verify_recaptcha(token: str, remote_ip: Optional[str] = None) -> VerificationResult:
    """
    Ask Google siteverify about a reCAPTCHA v3 token.

    Exactly one outbound POST, no retries. Returns the normalized verdict;
    a low score is a normal result, not an error. Raises a RecaptchaError
    subclass when no verdict could be obtained.
    """
    secret = config.recaptcha.SECRET
    if not secret:
        logger.error("recaptcha.py: RECAPTCHA_SECRET is not configured")
        raise RecaptchaNotConfigured("reCAPTCHA secret missing")

    data = {"secret": secret, "response": token}
    if remote_ip:
        data["remoteip"] = remote_ip

    try:
        async with _http_client() as client:
            r = await client.post(config.recaptcha.VERIFY_URL, data=data)
        r.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise RecaptchaUnavailable(f"siteverify returned HTTP {e.response.status_code}") from e
    except httpx.HTTPError as e:
        raise RecaptchaUnavailable(f"siteverify unreachable: {e!r}") from e

    try:
        payload = r.json()
    except ValueError as e:
        raise RecaptchaBadResponse("siteverify did not return JSON") from e

    result = _parse(payload)
    logger.info(
        "recaptcha.py: verdict success=%s score=%.2f admitted=%s host=%s action=%s errors=%s",
        result.success, result.score, result.admitted, result.hostname, result.action, result.error_codes,
    )
    return result
