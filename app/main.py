# /app/main.py
from contextlib import asynccontextmanager
import logging
from pathlib import Path

# ---- load .env FIRST (before importing modules that read env) ----
from dotenv import load_dotenv
ENV_PATH = (Path(__file__).parent / "configs" / ".env").resolve()
load_dotenv(ENV_PATH)

from configs import config

logger = logging.getLogger(__name__)
logger.info("main.py: loaded .env from %s (exists=%s)", ENV_PATH, ENV_PATH.exists())

# ---- now import the rest ----
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from routers.root import router as root_router
from routers.recaptcha import router as recaptcha_router
from routers.contact import router as contact_router
from observability.metrics import router as metrics_router, install_http_metrics


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not config.recaptcha.SECRET:
        logger.warning("main.py: RECAPTCHA_SECRET is empty, /verify-recaptcha will answer 500")
    if not config.server.PUBLIC_DIR.is_dir():
        logger.warning("main.py: PUBLIC_DIR %s does not exist", config.server.PUBLIC_DIR)
    logger.info("main.py: startup (transport=%s)", config.contact.TRANSPORT)
    yield
    logger.info("main.py: shutdown")

app = FastAPI(lifespan=lifespan)

# ---- HTTP metrics middleware ----
install_http_metrics(app)

# ---- Routers ----
app.include_router(root_router)
app.include_router(recaptcha_router)
app.include_router(contact_router)
app.include_router(metrics_router)

# ---- Static (last, so API routes win) ----
app.mount("/", StaticFiles(directory=config.server.PUBLIC_DIR, html=True, check_dir=False), name="public")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=config.server.HOST, port=config.server.PORT)
