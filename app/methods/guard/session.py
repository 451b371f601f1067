# /app/methods/guard/session.py
from __future__ import annotations

import time
import uuid
import logging
from dataclasses import replace
from typing import Dict, Optional

from configs.guard_config import GuardConfig, guard_config
from methods.guard.challenge import Challenge, ChallengeGenerator
from methods.guard.rules import FormSubmission, GuardOutcome, evaluate_submission

logger = logging.getLogger(__name__)


class FormSession:
    """
    One in-progress contact form: the pending challenge and the
    elapsed-time clock belong to this object, not to the process.
    """

    def __init__(
        self,
        session_id: Optional[str] = None,
        challenge: Optional[Challenge] = None,
        started_at: Optional[float] = None,
        opened_at: Optional[float] = None,
        *,
        cfg: GuardConfig = guard_config,
        generator: Optional[ChallengeGenerator] = None,
    ) -> None:
        self.cfg = cfg
        self.generator = generator or ChallengeGenerator(cfg)
        self.session_id = session_id or uuid.uuid4().hex
        self.challenge = challenge or self.generator.new()
        self.started_at = started_at
        # fallback clock start when the page never reported an interaction
        self.opened_at = time.time() if opened_at is None else opened_at

    def mark_interaction(self, now: Optional[float] = None) -> float:
        """Start the clock on first focus/keystroke. Later calls keep the first value."""
        if self.started_at is None:
            self.started_at = time.time() if now is None else now
        return self.started_at

    def rotate_challenge(self) -> Challenge:
        self.challenge = self.generator.new()
        return self.challenge

    @property
    def clock_start(self) -> float:
        return self.opened_at if self.started_at is None else self.started_at

    def evaluate(self, submission: FormSubmission, now: Optional[float] = None) -> GuardOutcome:
        filled = replace(
            submission,
            expected_answer=self.challenge.answer,
            started_at=self.clock_start,
            submitted_at=time.time() if now is None else now,
        )
        return evaluate_submission(filled, self.cfg)

    def complete(self, now: Optional[float] = None) -> Challenge:
        """Reset after a hand-off: fresh challenge, interaction clock stopped, fallback clock restarted."""
        self.started_at = None
        self.opened_at = time.time() if now is None else now
        logger.info("session.py: form %s handed off, challenge rotated", self.session_id)
        return self.rotate_challenge()

    def submit(self, submission: FormSubmission, now: Optional[float] = None) -> GuardOutcome:
        outcome = self.evaluate(submission, now)
        if outcome.accepted:
            self.complete(now)
        elif not outcome.silent:
            logger.info(
                "session.py: form %s rejected: %s",
                self.session_id, ",".join(f"{i.field}:{i.code}" for i in outcome.issues),
            )
        return outcome

    # ----- (de)serialisation for the session store
    def to_dict(self) -> Dict[str, str]:
        return {
            "prompt": self.challenge.prompt,
            "answer": self.challenge.answer,
            "kind": self.challenge.kind,
            "started_at": "" if self.started_at is None else repr(self.started_at),
            "opened_at": repr(self.opened_at),
        }

    @classmethod
    def from_dict(cls, session_id: str, data: Dict[str, str], **kwargs) -> "FormSession":
        started = data.get("started_at") or ""
        opened = data.get("opened_at") or ""
        return cls(
            session_id=session_id,
            challenge=Challenge(data["prompt"], data["answer"], data.get("kind") or "word"),
            started_at=float(started) if started else None,
            opened_at=float(opened) if opened else None,
            **kwargs,
        )
