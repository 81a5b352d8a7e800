"""
App-wide constants for route configuration.

This module provides a single source of truth for route prefixes, tags,
common response definitions and the email template environment.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape


@dataclass(frozen=True)
class RouteConfig:
    """Configuration for a route group."""

    prefix: str
    tag: str


class Routes:
    """Route configurations for all API endpoints."""

    PUBLIC = RouteConfig(prefix="/api/public", tag="auth")
    GITHUB = RouteConfig(prefix="/api/public", tag="github")
    PRIVATE = RouteConfig(prefix="/api/private", tag="users")
    COMPUTE = RouteConfig(prefix="", tag="compute")
    HEALTH = RouteConfig(prefix="", tag="health")


# Name of the cookie carrying the session token.
SESSION_COOKIE_NAME = "token"


# Common response definitions for reuse across routers
class CommonResponses:
    """Standard HTTP error response definitions for OpenAPI documentation."""

    UNAUTHORIZED: dict[int, dict[str, Any]] = {
        401: {"description": "Not authenticated or invalid credentials"}
    }
    NOT_FOUND: dict[int, dict[str, Any]] = {404: {"description": "Resource not found"}}
    CONFLICT: dict[int, dict[str, Any]] = {
        409: {"description": "Resource already exists"}
    }
    BAD_REQUEST: dict[int, dict[str, Any]] = {
        400: {"description": "Invalid request data"}
    }
    BAD_GATEWAY: dict[int, dict[str, Any]] = {
        502: {"description": "Upstream provider failed"}
    }
    UNAVAILABLE: dict[int, dict[str, Any]] = {
        503: {"description": "Service is busy, retry later"}
    }


# HTML Templates Directory
EmailTemplatesDir = Path(__file__).parent.parent / "templates" / "emails"

JinjaEmailTemplatesEnv = Environment(
    loader=FileSystemLoader(str(EmailTemplatesDir)),
    autoescape=select_autoescape(["html", "xml"]),
)
