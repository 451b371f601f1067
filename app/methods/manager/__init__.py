# /app/methods/manager/__init__.py
from .SessionManager import FormSessionStore, get_session_store

__all__ = ["FormSessionStore", "get_session_store"]
