# tests/conftest.py
import os, sys, tempfile
from pathlib import Path
from typing import Dict, Optional

import httpx
import pytest

# repo root = folder that contains both `app/` and `tests/`
REPO_ROOT = Path(__file__).resolve().parents[1]
APP_DIR = REPO_ROOT / "app"

# Make `from main import app` and `from routers...` work
sys.path.insert(0, str(APP_DIR))

# Make relative paths inside app/ resolve correctly
os.chdir(APP_DIR)

# env must be in place before configs.config is imported
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="portfolio-logs-"))

from methods.guard.session import FormSession  # noqa: E402


class FakeFormSessionStore:
    """Mimics FormSessionStore, backed by an in-memory dict."""
    def __init__(self):
        self._b: Dict[str, dict] = {}
        self.claims = set()

    def get(self, sid: str) -> Optional[dict]:
        data = self._b.get(sid)
        return dict(data) if data else None

    def set(self, sid: str, payload: dict) -> None:
        self._b[sid] = {k: ("" if v is None else str(v)) for k, v in payload.items()}

    def delete(self, sid: str) -> None:
        self._b.pop(sid, None)
        self.claims.discard(sid)

    def claim(self, sid: str) -> bool:
        if sid in self.claims:
            return False
        self.claims.add(sid)
        return True

    def release(self, sid: str) -> None:
        self.claims.discard(sid)

    def load(self, sid: str) -> Optional[FormSession]:
        data = self.get(sid)
        return FormSession.from_dict(sid, data) if data else None

    def save(self, session: FormSession) -> None:
        self.set(session.session_id, session.to_dict())


@pytest.fixture(autouse=True)
def pinned_config(monkeypatch):
    """Same settings for every test, whatever the developer's .env says."""
    from configs import config
    monkeypatch.setattr(config.recaptcha, "SECRET", "test-secret")
    monkeypatch.setattr(config.recaptcha, "REQUIRED", False)
    monkeypatch.setattr(config.contact, "TRANSPORT", "mailto")
    monkeypatch.setattr(config.contact, "RECIPIENT", "studio@artur-morin.ee")
    monkeypatch.setattr(config.contact, "SUBJECT", "Portfolio inquiry")
    return config


@pytest.fixture()
def fake_store():
    return FakeFormSessionStore()


@pytest.fixture()
def client(fake_store):
    from fastapi.testclient import TestClient
    from main import app
    from methods.manager.SessionManager import get_session_store

    app.dependency_overrides[get_session_store] = lambda: fake_store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def siteverify(monkeypatch):
    """
    Replace the outbound siteverify client. `install(handler)` takes an
    httpx.MockTransport handler and returns the list of captured requests.
    """
    from security import recaptcha

    def install(handler):
        calls = []

        def _recording(request: httpx.Request):
            calls.append(request)
            return handler(request)

        monkeypatch.setattr(
            recaptcha,
            "_http_client",
            lambda: httpx.AsyncClient(transport=httpx.MockTransport(_recording), timeout=5.0),
        )
        return calls

    return install


@pytest.fixture()
def valid_fields():
    return {
        "name": "Jane Doe",
        "email": "jane.doe@gmail.com",
        "message": "Hello, I would like to book a portrait session.",
    }
