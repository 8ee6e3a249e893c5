#!/usr/bin/env python3
"""
endpoints/health.py - Health Endpoint

Read-only status for load balancers and monitoring. Always answers 200.
"""

from typing import TYPE_CHECKING

from starlette.requests import Request
from starlette.responses import Response

from .constants import CACHE_NO_STORE, HEADER_CACHE_CONTROL
from .utils import json_response

if TYPE_CHECKING:
    from ..core import MCPServer


class HealthEndpoint:
    def __init__(self, server: "MCPServer"):
        self.server = server

    async def handle_request(self, request: Request) -> Response:
        """Server identity, version and live session count."""
        return json_response(self.server.status(), headers={HEADER_CACHE_CONTROL: CACHE_NO_STORE})


__all__ = ["HealthEndpoint"]
