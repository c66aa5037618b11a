"""Main application entry point.

Runs FastAPI with the NiceGUI chat page mounted on the same server.
Environment variables are loaded from .env file.
"""

import logging
import os
import sys

from dotenv import load_dotenv

# Load environment variables before any other imports that might need them
load_dotenv()

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def run_integrated() -> None:
    """Serve the health endpoint and the chat UI from one process."""
    import uvicorn
    from nicegui import ui

    from studio_chat.api.app import create_app
    from studio_chat.ui.chat_page import chat_page  # noqa: F401 - Registers the page

    app = create_app()

    ui.run_with(
        app,
        title="Studio Chat",
        favicon="🤖",
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "studio-chat-secret"),
    )

    host = os.getenv("HOST", "127.0.0.1")
    port = int(os.getenv("PORT", "8000"))
    logger.info(f"Chat UI available at http://{host}:{port}/")

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


def main() -> None:
    """Application entry point.

    Set RUN_MODE=ui to run the NiceGUI page standalone on port 8080.
    Default is integrated mode (FastAPI + UI on port 8000).
    """
    mode = os.getenv("RUN_MODE", "integrated").lower()

    logger.info(f"Starting Studio Chat in {mode} mode")

    if mode == "ui":
        from studio_chat.ui.chat_page import main as run_ui

        run_ui()
    else:
        run_integrated()


if __name__ == "__main__":
    main()
