#!/usr/bin/env python3
"""
app.py - Main Server Application

Creates and configures the Starlette application serving one ``MCPServer``.
"""

import contextlib
import logging
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware
from starlette.routing import Route

from .constants import HEADER_MCP_PROTOCOL_VERSION, HEADER_MCP_SESSION_ID
from .endpoints.constants import METHOD_DELETE, METHOD_GET, METHOD_OPTIONS, METHOD_POST, PATH_HEALTH, PATH_MCP
from .endpoints.health import HealthEndpoint
from .endpoints.mcp import MCPEndpoint

if TYPE_CHECKING:
    from .core import MCPServer

logger = logging.getLogger(__name__)


# ============================================================================
# Application Factory
# ============================================================================


def create_app(server: "MCPServer", debug: bool = False) -> Starlette:
    """
    Create and configure the Starlette application.

    Args:
        server: The server context that owns registries and sessions
        debug: Enable Starlette debug mode

    Returns:
        Configured Starlette application
    """
    config = server.config

    # Middleware stack - order matters
    middleware = []
    if config.enable_dns_rebinding_protection:
        # Host header allow-list guards local servers against DNS rebinding
        middleware.append(Middleware(TrustedHostMiddleware, allowed_hosts=list(config.allowed_hosts)))
        logger.debug(f"DNS rebinding protection enabled for hosts: {', '.join(config.allowed_hosts)}")
    middleware.append(
        Middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=[METHOD_GET, METHOD_POST, METHOD_DELETE, METHOD_OPTIONS],
            allow_headers=["*"],
            expose_headers=[HEADER_MCP_SESSION_ID, HEADER_MCP_PROTOCOL_VERSION],
            max_age=3600,
        )
    )

    mcp_endpoint = MCPEndpoint(server)
    health_endpoint = HealthEndpoint(server)

    routes = [
        Route(PATH_MCP, mcp_endpoint.handle_request, methods=[METHOD_GET, METHOD_POST, METHOD_DELETE]),
        Route(PATH_HEALTH, health_endpoint.handle_request, methods=[METHOD_GET]),
    ]

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        await server.start()
        try:
            yield
        finally:
            await server.shutdown()

    return Starlette(debug=debug, routes=routes, middleware=middleware, lifespan=lifespan)


__all__ = ["create_app"]
