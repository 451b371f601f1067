# /app/routers/contact.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from configs import config
from methods.guard.rules import FormSubmission
from methods.guard.session import FormSession
from methods.guard.transport import (
    FormSubmitTransport,
    TransportError,
    build_mailto,
    get_formsubmit_transport,
)
from methods.manager.SessionManager import FormSessionStore, get_session_store
from observability.metrics import CONTACT_SUBMISSIONS, RECAPTCHA_VERIFICATIONS
from security.recaptcha import RecaptchaError, verify_recaptcha

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/contact", tags=["contact"])


class ContactJSON(BaseModel):
    session_id: str
    name: str = ""
    email: str = ""
    message: str = ""
    project: Optional[str] = None
    website: str = ""  # honeypot, hidden from humans
    challenge: str = ""
    recaptcha_token: Optional[str] = None


def _fail(status: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status, content={"ok": False, "message": message, **extra})


def _expired() -> JSONResponse:
    return _fail(404, "Form session expired")


async def _token_admitted(token: Optional[str], remote_ip: Optional[str]) -> bool:
    """
    Server-side confirmation of the browser's reCAPTCHA token.
    A token that comes back below threshold blocks; an unreachable
    authority does not (assume human).
    """
    if not token:
        return not config.recaptcha.REQUIRED
    try:
        result = await verify_recaptcha(token, remote_ip)
    except RecaptchaError as e:
        logger.warning("contact.py: reCAPTCHA check skipped (%s): %s", e.reason, e)
        RECAPTCHA_VERIFICATIONS.labels(outcome=e.reason).inc()
        return True
    RECAPTCHA_VERIFICATIONS.labels(outcome="admitted" if result.admitted else "rejected").inc()
    return result.admitted


@router.post("/session")
def open_session(store: FormSessionStore = Depends(get_session_store)):
    try:
        session = FormSession()
        store.save(session)
        logger.info("contact.py: opened form session %s", session.session_id)
        return {"session_id": session.session_id, "challenge": session.challenge.prompt}
    except Exception as e:
        logger.exception("contact.py: failed to open form session: %s", e)
        return _fail(500, "Server error")


@router.post("/session/{sid}/interaction")
def mark_interaction(sid: str, store: FormSessionStore = Depends(get_session_store)):
    try:
        session = store.load(sid)
        if session is None:
            return _expired()
        if session.started_at is None:
            session.mark_interaction()
            store.save(session)
        return {"ok": True}
    except Exception as e:
        logger.exception("contact.py: interaction mark failed for %s: %s", sid, e)
        return _fail(500, "Server error")


@router.post("/session/{sid}/challenge")
def new_challenge(sid: str, store: FormSessionStore = Depends(get_session_store)):
    try:
        session = store.load(sid)
        if session is None:
            return _expired()
        session.rotate_challenge()
        store.save(session)
        return {"session_id": sid, "challenge": session.challenge.prompt}
    except Exception as e:
        logger.exception("contact.py: challenge refresh failed for %s: %s", sid, e)
        return _fail(500, "Server error")


@router.post("/submit")
async def submit_contact(
    payload: ContactJSON,
    request: Request,
    store: FormSessionStore = Depends(get_session_store),
    transport: Optional[FormSubmitTransport] = Depends(get_formsubmit_transport),
):
    try:
        session = store.load(payload.session_id)
        if session is None:
            return _expired()

        submission = FormSubmission(
            name=payload.name,
            email=payload.email,
            message=payload.message,
            project=payload.project,
            honeypot=payload.website,
            challenge_answer=payload.challenge,
        )
        outcome = session.evaluate(submission)

        if outcome.silent:
            # looks like success to whoever sent it; nothing is delivered
            CONTACT_SUBMISSIONS.labels(outcome="silent").inc()
            return {"ok": True}

        if not outcome.accepted:
            CONTACT_SUBMISSIONS.labels(outcome="invalid").inc()
            return JSONResponse(
                status_code=422,
                content={"ok": False, "errors": outcome.errors(), "focus": outcome.focus},
            )

        remote_ip = request.client.host if request.client else None
        if not await _token_admitted(payload.recaptcha_token, remote_ip):
            CONTACT_SUBMISSIONS.labels(outcome="blocked").inc()
            logger.info("contact.py: form %s blocked by reCAPTCHA", session.session_id)
            return _fail(403, "Verification failed")

        if not store.claim(session.session_id):
            logger.info("contact.py: form %s already being handed off", session.session_id)
            return _fail(409, "Submission already in progress")
        try:
            # another submit may have handed off and rotated between our load and the claim
            current = store.load(session.session_id)
            if current is None or current.challenge != session.challenge:
                logger.info("contact.py: form %s challenge consumed concurrently", session.session_id)
                return _fail(409, "Submission already in progress")

            extra = {}
            mode = config.contact.TRANSPORT
            if mode == "formsubmit":
                if transport is None:
                    logger.error("contact.py: CONTACT_TRANSPORT=formsubmit but CONTACT_RECIPIENT is empty")
                    return _fail(500, "Server error")
                try:
                    await transport.send(submission)
                except TransportError:
                    CONTACT_SUBMISSIONS.labels(outcome="undelivered").inc()
                    return _fail(502, "Could not deliver message")
            else:
                recipient = config.contact.RECIPIENT
                if not recipient:
                    logger.error("contact.py: CONTACT_RECIPIENT is not configured")
                    return _fail(500, "Server error")
                extra["mailto"] = build_mailto(recipient, config.contact.SUBJECT, submission)

            challenge = session.complete()
            store.save(session)
        finally:
            store.release(session.session_id)

        CONTACT_SUBMISSIONS.labels(outcome="accepted").inc()
        return {"ok": True, "challenge": challenge.prompt, **extra}

    except Exception as e:
        logger.exception("contact.py: submit failed for session %s: %s", payload.session_id, e)
        return _fail(500, "Server error")
