"""Clipspace Accounts -- example app running the session core end to end.

Wires ``create_app()`` with an in-memory account repository and a small
"clips" router whose endpoints require an authenticated principal.

Modules:
    domain: Clip record, ClipNotFoundError
    router: FastAPI endpoints (POST /clips/, GET /clips/, GET /clips/{id})
    app:    Application factory (create_accounts_app)
"""

from .app import create_accounts_app
from .domain import Clip, ClipNotFoundError

__all__ = ["Clip", "ClipNotFoundError", "create_accounts_app"]
