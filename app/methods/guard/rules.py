# /app/methods/guard/rules.py
"""
Contact-form guard rules.

Every check is a pure function of a FormSubmission (plus the GuardConfig)
and returns either None or a GuardIssue. `evaluate_submission` composes them:
the silent checks (honeypot, time-to-submit) run first and swallow every
other result, then all visible checks run so the caller can render the
whole error summary at once.
"""
import re
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional, Tuple

from email_validator import EmailNotValidError, validate_email

from configs.guard_config import GuardConfig, guard_config

logger = logging.getLogger(__name__)

FIELD_ORDER = ("name", "email", "message", "challenge")

REQUIRED = "This field is required"
EMAIL_FORMAT = "Please enter a valid email address (e.g., name@example.com)"

_EMAIL_RE = re.compile(
    r"^[a-zA-Z0-9][a-zA-Z0-9._-]*[a-zA-Z0-9]@[a-zA-Z0-9][a-zA-Z0-9.-]*[a-zA-Z0-9]\.[a-zA-Z]{2,}$"
)


@dataclass
class FormSubmission:
    name: str = ""
    email: str = ""
    message: str = ""
    project: Optional[str] = None
    honeypot: str = ""
    challenge_answer: str = ""
    expected_answer: Optional[str] = None
    started_at: Optional[float] = None
    submitted_at: Optional[float] = None


@dataclass
class GuardIssue:
    field: str
    code: str
    message: str


@dataclass
class GuardOutcome:
    accepted: bool
    silent: bool = False
    issues: List[GuardIssue] = field(default_factory=list)

    @property
    def focus(self) -> Optional[str]:
        for name in FIELD_ORDER:
            if any(i.field == name for i in self.issues):
                return name
        return None

    def errors(self) -> dict:
        return {i.field: i.message for i in self.issues}


def _text(value) -> str:
    return value.strip() if isinstance(value, str) else ""


@lru_cache(maxsize=8)
def _compiled(patterns: Tuple[Tuple[str, bool], ...]):
    return [re.compile(p, re.IGNORECASE if ci else 0) for p, ci in patterns]


def email_domain(email: str) -> str:
    domain = _text(email).rpartition("@")[2].lower()
    if domain.startswith("www."):
        domain = domain[4:]
    return domain

# ---------------------------
# visible checks
# ---------------------------

def check_name(sub: FormSubmission, cfg: GuardConfig = guard_config) -> Optional[GuardIssue]:
    value = _text(sub.name)
    if not value:
        return GuardIssue("name", "required", REQUIRED)
    if len(value) < cfg.name_min_length:
        return GuardIssue("name", "too_short", f"Name must be at least {cfg.name_min_length} characters")
    return None


def check_email_format(sub: FormSubmission, cfg: GuardConfig = guard_config) -> Optional[GuardIssue]:
    value = _text(sub.email)
    if not value:
        return GuardIssue("email", "required", REQUIRED)
    if len(value) < cfg.email_min_length:
        return GuardIssue("email", "too_short", "Email address is too short")
    if len(value) > cfg.email_max_length:
        return GuardIssue("email", "too_long", "Email address is too long")

    if (
        ".." in value
        or value.startswith((".", "@"))
        or value.endswith((".", "@"))
        or value.count("@") != 1
        or not _EMAIL_RE.match(value)
    ):
        return GuardIssue("email", "format", EMAIL_FORMAT)

    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        logger.debug("rules.py: email-validator rejected address: %s", e)
        return GuardIssue("email", "format", EMAIL_FORMAT)
    return None


def check_email_domain(sub: FormSubmission, cfg: GuardConfig = guard_config) -> Optional[GuardIssue]:
    if email_domain(sub.email) in cfg.disposable_domains:
        return GuardIssue("email", "disposable", "Please use a permanent email address")
    return None


def check_email_pattern(sub: FormSubmission, cfg: GuardConfig = guard_config) -> Optional[GuardIssue]:
    value = _text(sub.email)
    if any(p.search(value) for p in _compiled(cfg.suspicious_patterns)):
        return GuardIssue("email", "suspicious", "Please use a valid email address")
    return None


def check_email(sub: FormSubmission, cfg: GuardConfig = guard_config) -> Optional[GuardIssue]:
    for check in (check_email_format, check_email_domain, check_email_pattern):
        issue = check(sub, cfg)
        if issue:
            return issue
    return None


def check_message(sub: FormSubmission, cfg: GuardConfig = guard_config) -> Optional[GuardIssue]:
    value = _text(sub.message)
    if not value:
        return GuardIssue("message", "required", REQUIRED)
    if len(value) < cfg.message_min_length:
        return GuardIssue(
            "message", "too_short", f"Message must be at least {cfg.message_min_length} characters"
        )
    return None


def check_challenge(sub: FormSubmission, cfg: GuardConfig = guard_config) -> Optional[GuardIssue]:
    # no pending challenge means nothing to compare against
    if not sub.expected_answer:
        return None
    if _text(sub.challenge_answer) != sub.expected_answer:
        return GuardIssue("challenge", "mismatch", "That answer didn't match. Try again.")
    return None

# ---------------------------
# silent checks
# ---------------------------

def honeypot_tripped(sub: FormSubmission) -> bool:
    return _text(sub.honeypot) != ""


def submitted_too_fast(sub: FormSubmission, cfg: GuardConfig = guard_config) -> bool:
    if sub.started_at is None or sub.submitted_at is None:
        return False
    return (sub.submitted_at - sub.started_at) < cfg.min_fill_seconds


VISIBLE_CHECKS = (check_name, check_email, check_message, check_challenge)


def evaluate_submission(sub: FormSubmission, cfg: GuardConfig = guard_config) -> GuardOutcome:
    if honeypot_tripped(sub):
        logger.info("rules.py: honeypot filled, discarding silently")
        return GuardOutcome(accepted=False, silent=True)
    if submitted_too_fast(sub, cfg):
        logger.info(
            "rules.py: submitted %.2fs after first interaction, discarding silently",
            sub.submitted_at - sub.started_at,
        )
        return GuardOutcome(accepted=False, silent=True)

    issues = [issue for issue in (check(sub, cfg) for check in VISIBLE_CHECKS) if issue]
    return GuardOutcome(accepted=not issues, issues=issues)
