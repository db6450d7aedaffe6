"""Entrypoint for the Canvas assignment MCP server."""

from __future__ import annotations

import logging
import sys

from .client import CanvasClient
from .config import get_settings
from .server import create_server

# stdout carries the MCP stdio transport, so logs must stay on stderr.
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    stream=sys.stderr,
)
LOGGER = logging.getLogger(__name__)


def check_authentication(client: CanvasClient) -> bool:
    """Log whether the configured token works; never raises."""
    settings = client.settings
    if not settings.api_token:
        LOGGER.warning("CANVAS_API_TOKEN not set. Server will not function correctly.")
    if not settings.api_host:
        LOGGER.warning("CANVAS_DOMAIN not set. Server will not function correctly.")
    if not settings.is_configured:
        return False

    LOGGER.info("Environment configured correctly for domain: %s", settings.api_host)
    try:
        user = client.get_current_user()
    except Exception as exc:  # noqa: BLE001
        LOGGER.error("Authentication failed: %s", exc)
        return False

    LOGGER.info("Successfully authenticated as %s (%s)", user.name, user.email)
    return True


def main() -> int:
    """Run the MCP server on stdio until the client disconnects."""
    try:
        settings = get_settings()
    except ValueError as exc:
        LOGGER.error("Configuration error: %s", exc)
        return 1

    logging.getLogger().setLevel(settings.log_level)

    client = CanvasClient(settings)
    check_authentication(client)
    server = create_server(client)

    LOGGER.info("Canvas MCP server starting on stdio")
    try:
        server.run()
    except Exception as exc:  # noqa: BLE001
        LOGGER.error("Server failed to start: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
