"""FastAPI host for the chat UI.

Endpoints:
    - GET /health: Service health status
    - GET /: NiceGUI chat page (mounted in main)
"""

from studio_chat.api.app import app, create_app, get_http_client

__all__ = ["app", "create_app", "get_http_client"]
