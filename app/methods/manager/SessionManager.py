# /app/methods/manager/SessionManager.py
from __future__ import annotations
from typing import Optional, Dict
import redis
from configs import config
from configs.config import get_redis
from methods.guard.session import FormSession

# upper bound on one hand-off (reCAPTCHA + delivery); a crashed worker frees the claim after this
CLAIM_TTL = 30

class FormSessionStore:
    """
    Redis-backed store for in-progress contact forms.
    Keys:
      form:{sid}         (HASH)  → prompt, answer, kind, started_at, opened_at   (expires after SESSION_TTL)
      form:{sid}:claim   (STR)   → present while one submit is delivering         (expires after CLAIM_TTL)
    """
    def __init__(self, r: Optional[redis.Redis] = None, ttl: Optional[int] = None) -> None:
        self.r = r or get_redis()
        self.ttl = ttl or config.contact.SESSION_TTL

    # ----- key helpers
    def _k_form(self, sid: str) -> str:           return f"form:{sid}"
    def _k_claim(self, sid: str) -> str:          return f"form:{sid}:claim"

    # ----- raw API
    def get(self, sid: str) -> Optional[Dict[str, str]]:
        h = self.r.hgetall(self._k_form(sid))
        return h or None

    def set(self, sid: str, payload: dict) -> None:
        # flatten & stringify for Redis
        data = {k: ("" if v is None else str(v)) for k, v in payload.items()}
        pipe = self.r.pipeline()
        pipe.hset(self._k_form(sid), mapping=data)
        pipe.expire(self._k_form(sid), self.ttl)
        pipe.execute()

    def delete(self, sid: str) -> None:
        self.r.delete(self._k_form(sid), self._k_claim(sid))

    # ----- hand-off claim (SET NX): only one submit per session delivers at a time
    def claim(self, sid: str) -> bool:
        return bool(self.r.set(self._k_claim(sid), "1", nx=True, ex=CLAIM_TTL))

    def release(self, sid: str) -> None:
        self.r.delete(self._k_claim(sid))

    # ----- FormSession helpers
    def load(self, sid: str) -> Optional[FormSession]:
        data = self.get(sid)
        if not data or "answer" not in data:
            return None
        return FormSession.from_dict(sid, data)

    def save(self, session: FormSession) -> None:
        self.set(session.session_id, session.to_dict())

# DI factory
def get_session_store() -> FormSessionStore:
    return FormSessionStore()
