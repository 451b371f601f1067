# app/configs/guard_config.py
from dataclasses import dataclass, field
from typing import Tuple

DISPOSABLE_DOMAINS: Tuple[str, ...] = (
    "tempmail.com", "10minutemail.com", "guerrillamail.com", "guerrillamailblock.com",
    "mailinator.com", "throwaway.email", "temp-mail.org", "yopmail.com",
    "getnada.com", "mohmal.com", "maildrop.cc", "trashmail.com", "tempail.com",
    "fakeinbox.com", "mintemail.com", "sharklasers.com", "grr.la", "guerrillamail.info",
    "dispostable.com", "emailondeck.com", "meltmail.com", "melt.li", "33mail.com",
    "mailcatch.com", "spamgourmet.com", "spamhole.com", "spam.la", "spamevader.com",
    "spamfree24.org", "spamfree24.de", "spamfree24.eu",
    "tempr.email", "tmpmail.org", "tmpmail.net", "tmpmail.io", "tmpmail.com",
    "throwawaymail.com", "throwawaymail.net", "throwawaymail.org", "throwawaymail.io",
    "emailtemp.org", "emailtemp.net", "emailtemp.com", "emailtemp.io",
    "mytemp.email", "mailnesia.com", "mintemail.net", "mintemail.org",
    "inboxkitten.com", "getairmail.com", "airmail.cc", "airmail.co",
    "test.com", "example.com", "invalid.com", "test.test",
)

# (pattern, case-insensitive)
SUSPICIOUS_PATTERNS: Tuple[Tuple[str, bool], ...] = (
    (r"^test\d+@", True),          # test123@
    (r"^user\d+@", True),          # user456@
    (r"^email\d+@", True),         # email789@
    (r"^spam", True),
    (r"spam@", True),
    (r"\d{10,}@", False),          # 10+ digits before @
    (r"^[a-z]\d{5,}@", True),      # a12345@
    (r"^[a-z]{1,2}\d{6,}@", True), # ab123456@
)

WORD_BANK: Tuple[str, ...] = (
    "Artur", "Morin", "Photography", "Camera", "Lens", "Shutter", "Aperture",
    "Frame", "Light", "Portrait", "Editorial", "Tallinn", "Studio", "Creative",
    "Visual", "Story", "Image", "Photo", "Capture", "Dominant", "SmileXFD",
    "2024", "2025", "100", "50", "24", "35", "507",
)

SPAM_KEYWORDS: Tuple[str, ...] = (
    "viagra", "cialis", "pharmacy", "loan", "debt", "credit", "investment", "bitcoin",
    "crypto", "casino", "gambling", "poker", "lottery", "winner", "prize", "free money",
    "get rich", "work from home", "make money fast", "click here", "limited time offer",
    "act now", "urgent", "guaranteed", "no risk", "risk free", "weight loss", "diet pill",
    "miracle", "sexy", "adult", "xxx", "porn", "escort", "dating", "meet singles",
    "enlarge", "penis", "breast", "hot girls", "sexy girls",
)


@dataclass(frozen=True)
class GuardConfig:
    name_min_length: int = 6
    message_min_length: int = 3
    email_min_length: int = 5
    email_max_length: int = 254
    min_fill_seconds: float = 3.0
    disposable_domains: Tuple[str, ...] = DISPOSABLE_DOMAINS
    suspicious_patterns: Tuple[Tuple[str, bool], ...] = SUSPICIOUS_PATTERNS
    word_bank: Tuple[str, ...] = WORD_BANK
    spam_keywords: Tuple[str, ...] = SPAM_KEYWORDS
    # share of arithmetic prompts vs word typing
    arithmetic_ratio: float = 0.5
    field_limits: dict = field(default_factory=lambda: {"name": 80, "email": 120, "message": 1000})


guard_config = GuardConfig()
