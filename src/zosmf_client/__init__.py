"""z/OSMF client.

Typed client for the z/OSMF REST API: builds correctly shaped requests,
manages the session cookie, and parses responses into pydantic models.
"""

from .restapi import (
    AuthenticationError,
    DeserializationError,
    ReportedError,
    ServerError,
    TransportError,
    ZOsmfError,
)
from .zosmf import ZOsmf

__version__ = "0.1.0"

__all__ = [
    "AuthenticationError",
    "DeserializationError",
    "ReportedError",
    "ServerError",
    "TransportError",
    "ZOsmf",
    "ZOsmfError",
]
