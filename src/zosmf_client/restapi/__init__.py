"""z/OSMF REST API plumbing.

Provides the HTTP session, the immutable request builder every resource is
declared with, the shared response types, and the error hierarchy.

Exports:
    ZOsmfSession: HTTP session with cookie authentication and error mapping.
    Endpoint: Base class for immutable request builders.
    types: Module containing response types shared by all resources.
    ZOsmfError: Base class of every error the client raises.
    DEFAULT_TIMEOUT: Default HTTP request timeout.
"""

from . import types
from .client import DEFAULT_TIMEOUT, ZOsmfSession
from .endpoint import Body, Endpoint, Flag, Header, Option, Path, Query
from .errors import (
    AuthenticationError,
    DeserializationError,
    ReportedError,
    ServerError,
    TransportError,
    ZOsmfError,
)

__all__ = [
    "DEFAULT_TIMEOUT",
    "AuthenticationError",
    "Body",
    "DeserializationError",
    "Endpoint",
    "Flag",
    "Header",
    "Option",
    "Path",
    "Query",
    "ReportedError",
    "ServerError",
    "TransportError",
    "ZOsmfError",
    "ZOsmfSession",
    "types",
]
