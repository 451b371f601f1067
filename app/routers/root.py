# /app/routers/root.py
from fastapi import APIRouter
from fastapi.responses import FileResponse
from configs import config

router = APIRouter()

@router.get("/", response_class=FileResponse)
async def serve_index():
    return FileResponse(config.server.PUBLIC_DIR / "index.html")

@router.get("/health")
def health():
    return {"status": "ok"}
