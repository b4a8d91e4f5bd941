"""Run the User Registry HTTP server.

Usage:
    python -m user_registry
"""

import sys

import structlog
import uvicorn

from user_registry.adapters.inbound.rest_api import create_app
from user_registry.infrastructure.container import Container
from user_registry.ports.outbound import StorageError


def main() -> int:
    """Build the container, bootstrap storage and serve until stopped."""
    try:
        container = Container.create()
    except StorageError as e:
        # Logging is configured before storage is touched
        structlog.get_logger().error("user_registry_startup_failed", error=str(e))
        return 1

    server = container.config.server
    app = create_app(container.service, max_body_bytes=server.max_body_bytes)

    uvicorn.run(
        app,
        host=server.host,
        port=server.port,
        timeout_keep_alive=server.timeout_keep_alive_seconds,
        log_config=None,
    )
    container.logger.info("user_registry_offline")
    return 0


if __name__ == "__main__":
    sys.exit(main())
