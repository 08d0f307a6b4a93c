"""z/OSMF REST API session.

Provides the HTTP session shared by every endpoint: cookie-based
authentication, thread-local httpx clients, and translation of transport,
HTTP and parsing failures into :class:`~.errors.ZOsmfError` subclasses.
"""

import base64
import json
import threading
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

import httpx
import pydantic
import structlog

from .errors import (
    AuthenticationError,
    DeserializationError,
    ReportedError,
    ServerError,
    TransportError,
)
from .types import ErrorReport

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT = 30.0

AUTHENTICATE_PATH = "/zosmf/services/authenticate"

# Cookie names z/OSMF uses for LTPA and JWT session tokens.
LTPA_COOKIE = "LtpaToken2"
JWT_COOKIE = "jwtToken"

T = TypeVar("T")


def looks_like_jwt(token: str) -> bool:
    """Return True if the token has the three dot-separated JWT segments."""
    return len(token.split(".")) == 3  # noqa: PLR2004


def _jwt_claims(token: str) -> dict[str, Any] | None:
    """Decode the payload segment of a JWT without checking its signature."""
    segment = token.split(".")[1]
    # base64url without padding
    segment += "=" * (-len(segment) % 4)
    try:
        claims = json.loads(base64.urlsafe_b64decode(segment))
    except ValueError:
        return None
    return claims if isinstance(claims, dict) else None


def validate_jwt_not_expired(token: str) -> None:
    """Reject a pre-established JWT whose ``exp`` claim has passed.

    Tokens that are not JWTs (such as LTPA tokens), undecodable payloads
    and tokens without an ``exp`` claim are accepted with a warning, since
    only z/OSMF can tell whether they are still valid.

    Raises:
        AuthenticationError: If the token expired.
    """
    if not looks_like_jwt(token):
        logger.warning("Token is not a JWT, expiry not checked")
        return

    claims = _jwt_claims(token)
    if claims is None:
        logger.warning("JWT payload could not be decoded, expiry not checked")
        return

    expires_at = claims.get("exp")
    if expires_at is None:
        logger.warning("JWT carries no exp claim, expiry not checked")
        return

    remaining = expires_at - time.time()
    if remaining <= 0:
        msg = f"z/OSMF JWT has expired (exp={expires_at})"
        raise AuthenticationError(msg)

    logger.debug("JWT is valid", expires_in_seconds=int(remaining))


def check_status(response: httpx.Response) -> None:
    """Raise the matching error for a failed z/OSMF response.

    Statuses below 400 pass; 304 is a valid answer to conditional reads.
    A 401 means bad credentials or an expired session. Any other failure
    becomes a :class:`ServerError` carrying the z/OSMF error report when the
    body contains one.

    Raises:
        AuthenticationError: On HTTP 401.
        ServerError: On any other status >= 400.
    """
    if response.status_code < httpx.codes.BAD_REQUEST:
        return

    report: ErrorReport | None = None
    try:
        report = ErrorReport.model_validate_json(response.content)
    except pydantic.ValidationError:
        pass

    if report is not None:
        message = report.message
    else:
        message = response.text.strip() or response.reason_phrase

    if response.status_code == httpx.codes.UNAUTHORIZED:
        error_class: type[ReportedError] = AuthenticationError
    else:
        error_class = ServerError
    raise error_class(
        message,
        response.status_code,
        url=str(response.url),
        category=report.category if report else None,
        return_code=report.return_code if report else None,
        reason=report.reason if report else None,
        details=report.details if report else None,
    )


class ZOsmfSession:
    """HTTP session for the z/OSMF REST API.

    Holds the base URL, the transport settings and the session credential
    (the cookies returned by z/OSMF on login). Every request built through the
    session carries the credential, and every response is checked and parsed
    here so endpoints only describe request shapes.

    Thread-safe through thread-local storage of httpx.Client instances; the
    credential is shared and guarded by a lock. Can be used as a context
    manager for automatic cleanup.
    """

    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        token_file: str | Path | None = None,
        token_cookie: str | None = None,
        verify: bool | str = True,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the session.

        Args:
            base_url: z/OSMF base URL (e.g., "https://zosmf.example.com").
            token: Pre-established session token.
            token_file: Path to a file containing a pre-established token.
            token_cookie: Cookie name for the token. Defaults to "jwtToken"
                for JWTs and "LtpaToken2" otherwise.
            verify: TLS verification flag or path to a CA bundle.
            timeout: Request timeout in seconds (default: 30.0).
            transport: Optional httpx transport, used instead of the network.

        Raises:
            ValueError: If base_url is empty or timeout is not positive.
            FileNotFoundError: If token_file is specified but doesn't exist.
            AuthenticationError: If the token is a JWT that has expired.
        """
        if not base_url:
            msg = "base_url cannot be empty"
            raise ValueError(msg)
        if timeout <= 0:
            msg = "timeout must be positive"
            raise ValueError(msg)

        self.base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._verify = verify
        self._transport = transport

        # z/OSMF rejects modifying requests that lack the CSRF header
        self._headers = {"X-CSRF-ZOSMF-HEADER": "true"}

        self._credential_lock = threading.Lock()
        self._credential: dict[str, str] = {}

        if token_file:
            token_path = Path(token_file)
            if not token_path.exists():
                msg = f"Token file not found: {token_file}"
                raise FileNotFoundError(msg)
            token = token_path.read_text().strip()

        if token:
            validate_jwt_not_expired(token)
            default_cookie = JWT_COOKIE if looks_like_jwt(token) else LTPA_COOKIE
            cookie = token_cookie or default_cookie
            self._credential = {cookie: token}

        # One httpx.Client per thread; see the client property
        self._local = threading.local()

    @property
    def client(self) -> httpx.Client:
        """The calling thread's httpx client, created on first use."""
        if not hasattr(self._local, "client") or self._local.client.is_closed:
            self._local.client = httpx.Client(
                base_url=self.base_url,
                headers=self._headers,
                timeout=self._timeout,
                verify=self._verify,
                transport=self._transport,
            )
        return self._local.client

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        """Close this thread's HTTP client; other threads keep theirs."""
        if hasattr(self._local, "client") and not self._local.client.is_closed:
            self._local.client.close()

    @property
    def credential(self) -> dict[str, str]:
        """Copy of the current session cookies."""
        with self._credential_lock:
            return dict(self._credential)

    @property
    def is_authenticated(self) -> bool:
        """Whether a session credential is currently held."""
        with self._credential_lock:
            return bool(self._credential)

    def _set_credential(self, cookies: dict[str, str]) -> None:
        with self._credential_lock:
            self._credential = dict(cookies)

    def build_request(
        self,
        method: str,
        path: str,
        *,
        params: list[tuple[str, str]] | None = None,
        headers: dict[str, str] | None = None,
        json: Any = None,
        content: str | bytes | None = None,
    ) -> httpx.Request:
        """Build a request carrying the session credential.

        Args:
            method: HTTP method.
            path: Path relative to the base URL (e.g., "/zosmf/info").
            params: Query parameters as ordered key/value pairs.
            headers: Request-specific headers.
            json: JSON body.
            content: Raw text or bytes body.

        Returns:
            The unsent httpx.Request.
        """
        request_headers = dict(headers or {})
        credential = self.credential
        if credential:
            request_headers["Cookie"] = "; ".join(
                f"{name}={value}" for name, value in credential.items()
            )
        return self.client.build_request(
            method,
            path,
            params=params or None,
            headers=request_headers,
            json=json,
            content=content,
        )

    def send(
        self,
        request: httpx.Request,
        *,
        auth: httpx.Auth | None = None,
    ) -> httpx.Response:
        """Send a request and check the response status.

        Logs request details and duration.

        Args:
            request: Request built by :meth:`build_request`.
            auth: Optional per-request authentication (used by login).

        Returns:
            The response, with a status below 400.

        Raises:
            TransportError: If no HTTP response was received.
            AuthenticationError: On HTTP 401.
            ServerError: On any other failed status.
        """
        start_time = time.time()
        logger.debug(
            "Making API request",
            method=request.method,
            url=str(request.url),
        )
        try:
            response = self.client.send(request, auth=auth)
        except httpx.TransportError as exc:
            duration = time.time() - start_time
            logger.error(
                "API request failed",
                method=request.method,
                url=str(request.url),
                error=str(exc),
                duration_seconds=round(duration, 3),
            )
            msg = f"{request.method} {request.url} failed: {exc}"
            raise TransportError(msg) from exc

        # Session cookies live in the credential, not the per-thread jar
        self.client.cookies.clear()

        duration = time.time() - start_time
        logger.debug(
            "API request completed",
            status=response.status_code,
            duration_seconds=round(duration, 3),
        )

        if response.status_code >= httpx.codes.BAD_REQUEST:
            logger.warning(
                "API error response",
                method=request.method,
                url=str(request.url),
                status=response.status_code,
            )
        check_status(response)
        return response

    def parse(
        self, response: httpx.Response, parser: Callable[[httpx.Response], T]
    ) -> T:
        """Turn a checked response into a typed result.

        Args:
            response: Response returned by :meth:`send`.
            parser: Callable producing the typed result.

        Returns:
            Whatever the parser returns.

        Raises:
            DeserializationError: If the body is not valid JSON or does not
                match the expected model.
        """
        try:
            return parser(response)
        except ValueError as exc:
            # json.JSONDecodeError and pydantic.ValidationError both land here
            logger.error(
                "Failed to deserialize response",
                url=str(response.url),
                error=str(exc),
            )
            msg = f"Unexpected response from {response.url}: {exc}"
            raise DeserializationError(msg, status=response.status_code) from exc

    def login(self, username: str, password: str) -> None:
        """Authenticate with z/OSMF and store the returned session cookies.

        Args:
            username: z/OS user ID.
            password: Password or passphrase.

        Raises:
            AuthenticationError: If the credentials are rejected or no
                session token is returned.
            TransportError: If z/OSMF cannot be reached.
            ServerError: On any other failed status.
        """
        request = self.client.build_request("POST", AUTHENTICATE_PATH)
        response = self.send(request, auth=httpx.BasicAuth(username, password))

        cookies = dict(response.cookies)
        if not cookies:
            msg = "z/OSMF did not return a session token"
            raise AuthenticationError(msg, status=response.status_code)

        self._set_credential(cookies)
        logger.info("Logged in to z/OSMF", base_url=self.base_url, user=username)

    def logout(self) -> None:
        """Invalidate the session server-side and clear the local credential.

        Raises:
            AuthenticationError: If the session was already invalid.
            TransportError: If z/OSMF cannot be reached.
            ServerError: On any other failed status.
        """
        request = self.build_request("DELETE", AUTHENTICATE_PATH)
        self.send(request)
        self._set_credential({})
        logger.info("Logged out of z/OSMF", base_url=self.base_url)
