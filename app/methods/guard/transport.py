# /app/methods/guard/transport.py
import logging
from typing import Dict, Optional
from urllib.parse import quote

import httpx

from configs import config
from configs.guard_config import GuardConfig, guard_config
from methods.guard.rules import FormSubmission

logger = logging.getLogger(__name__)

# characters JavaScript's encodeURIComponent leaves alone
_URI_SAFE = "-_.!~*'()"


class TransportError(Exception):
    pass


def sanitize(value, max_len: int = 500) -> str:
    """Drop CR/LF (header injection in mailto), cap length, trim."""
    text = "" if value is None else str(value)
    return text.replace("\r", " ").replace("\n", " ")[:max_len].strip()


def clean_submission(sub: FormSubmission, cfg: GuardConfig = guard_config) -> Dict[str, str]:
    limits = cfg.field_limits
    return {
        "name": sanitize(sub.name, limits["name"]) or "Prospect",
        "email": sanitize(sub.email, limits["email"]),
        "message": sanitize(sub.message, limits["message"]),
        "project": sanitize(sub.project, limits["name"]),
    }


def build_mailto(recipient: str, subject: str, sub: FormSubmission, cfg: GuardConfig = guard_config) -> str:
    data = clean_submission(sub, cfg)
    body = f"Name: {data['name']}\nEmail: {data['email']}\n\nMessage:\n{data['message']}"
    return (
        f"mailto:{recipient}"
        f"?subject={quote(subject, safe=_URI_SAFE)}"
        f"&body={quote(body, safe=_URI_SAFE)}"
    )


def formsubmit_fields(
    sub: FormSubmission,
    next_url: str = "",
    cfg: GuardConfig = guard_config,
) -> Dict[str, str]:
    data = clean_submission(sub, cfg)
    fields = {
        "name": data["name"],
        "email": data["email"],
        "message": data["message"],
        "project": data["project"],
        "_subject": f"Portfolio Inquiry - {data['project'] or 'General'}",
        # FormSubmit's own captcha is off, the guard already ran
        "_captcha": "false",
        "_template": "table",
        "_blacklist": ",".join(cfg.spam_keywords),
    }
    if next_url:
        fields["_next"] = next_url
    return fields


class FormSubmitTransport:
    """Forwards an accepted submission to the FormSubmit relay."""

    def __init__(
        self,
        recipient: str,
        base_url: str = "https://formsubmit.co/ajax",
        next_url: str = "",
        timeout: float = 10.0,
        cfg: GuardConfig = guard_config,
    ) -> None:
        if not recipient:
            raise ValueError("FormSubmit recipient is required")
        self.url = f"{base_url.rstrip('/')}/{recipient}"
        self.next_url = next_url
        self.timeout = timeout
        self.cfg = cfg

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout)

    async def send(self, sub: FormSubmission) -> Optional[dict]:
        fields = formsubmit_fields(sub, self.next_url, self.cfg)
        logger.info("transport.py: forwarding contact message to %s", self.url)
        try:
            async with self._client() as client:
                r = await client.post(self.url, data=fields, headers={"Accept": "application/json"})
            r.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("transport.py: FormSubmit delivery failed: %s", e)
            raise TransportError(str(e)) from e

        try:
            return r.json()
        except ValueError:
            return None


# DI factory
def get_formsubmit_transport() -> Optional[FormSubmitTransport]:
    c = config.contact
    if c.TRANSPORT != "formsubmit" or not c.RECIPIENT:
        return None
    return FormSubmitTransport(
        c.RECIPIENT,
        base_url=c.FORMSUBMIT_URL,
        next_url=c.NEXT_URL,
        timeout=c.FORMSUBMIT_TIMEOUT,
    )
