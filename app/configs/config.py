# config.py
from pathlib import Path
from types import SimpleNamespace
from dotenv import load_dotenv, find_dotenv
import os, logging, redis as _redis

# --- Load .env (doesn't override real env vars) ---
load_dotenv(find_dotenv(filename=".env", usecwd=True), override=False)

APP_DIR = Path(__file__).resolve().parents[1]

# --- tiny env helper ---
def env(name, default=None, *, required=False, cast=str):
    v = os.getenv(name, default)
    if required and (v is None or v == ""):
        raise RuntimeError(f"{name} is required but missing")
    if v is None:
        return None
    if cast is bool:
        return str(v).lower() in {"1", "true", "yes", "on"}
    if cast is int:
        return int(v)
    if cast is float:
        return float(v)
    return v  # str

# ---------- server ----------
HOST       = env("HOST", "0.0.0.0")
PORT       = env("PORT", 3000, cast=int)
DEBUG      = env("DEBUG", False, cast=bool)
PUBLIC_DIR = Path(env("PUBLIC_DIR", "") or APP_DIR / "public")

# ---------- reCAPTCHA ----------
# secret comes from the environment only, never from source
RECAPTCHA_SECRET     = env("RECAPTCHA_SECRET", "")
RECAPTCHA_VERIFY_URL = env("RECAPTCHA_VERIFY_URL", "https://www.google.com/recaptcha/api/siteverify")
RECAPTCHA_TIMEOUT    = env("RECAPTCHA_TIMEOUT", 5.0, cast=float)
RECAPTCHA_REQUIRED   = env("RECAPTCHA_REQUIRED", False, cast=bool)

# ---------- contact form ----------
CONTACT_TRANSPORT = env("CONTACT_TRANSPORT", "mailto")  # mailto|formsubmit
CONTACT_RECIPIENT = env("CONTACT_RECIPIENT", "")
CONTACT_SUBJECT   = env("CONTACT_SUBJECT", "Portfolio inquiry")
CONTACT_NEXT_URL  = env("CONTACT_NEXT_URL", "")
FORMSUBMIT_URL    = env("FORMSUBMIT_URL", "https://formsubmit.co/ajax")
FORMSUBMIT_TIMEOUT = env("FORMSUBMIT_TIMEOUT", 10.0, cast=float)
FORM_SESSION_TTL  = env("FORM_SESSION_TTL", 1800, cast=int)

# ---------- Redis ----------
REDIS_URL = env("REDIS_URL", "redis://127.0.0.1:6379/0")
def get_redis() -> _redis.Redis:
    # decode_responses=True → plain str in/out
    return _redis.from_url(REDIS_URL, decode_responses=True)

# ---------- Logging ----------
LOG_DIR = env("LOG_DIR", "logs")
LOG_NAME = env("LOG_NAME", "logs.log")
LOG_LEVEL = env("LOG_LEVEL", "INFO").upper()
log_file_path = os.path.join(LOG_DIR, LOG_NAME)
os.makedirs(LOG_DIR, exist_ok=True)
logging.basicConfig(
    filename=log_file_path,
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s.%(msecs)03d [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    force=True,
)

# ---------- Pretty namespaces for simple imports ----------
server = SimpleNamespace(
    HOST=HOST,
    PORT=PORT,
    DEBUG=DEBUG,
    PUBLIC_DIR=PUBLIC_DIR,
)

recaptcha = SimpleNamespace(
    SECRET=RECAPTCHA_SECRET,
    VERIFY_URL=RECAPTCHA_VERIFY_URL,
    TIMEOUT=RECAPTCHA_TIMEOUT,
    REQUIRED=RECAPTCHA_REQUIRED,
)

contact = SimpleNamespace(
    TRANSPORT=CONTACT_TRANSPORT,
    RECIPIENT=CONTACT_RECIPIENT,
    SUBJECT=CONTACT_SUBJECT,
    NEXT_URL=CONTACT_NEXT_URL,
    FORMSUBMIT_URL=FORMSUBMIT_URL,
    FORMSUBMIT_TIMEOUT=FORMSUBMIT_TIMEOUT,
    SESSION_TTL=FORM_SESSION_TTL,
)

redis = SimpleNamespace(
    REDIS_URL=REDIS_URL,
    get=get_redis,
)

logs = SimpleNamespace(
    LOG_DIR=LOG_DIR,
    LOG_NAME=LOG_NAME,
    FILE=log_file_path,
    logging=logging,  # stdlib logging (already configured)
)

__all__ = ["server", "recaptcha", "contact", "redis", "logs", "env"]
