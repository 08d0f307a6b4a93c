"""Shared fixtures: a scripted z/OSMF server behind httpx.MockTransport.

Requests go through the real session, so cookie handling, status checks and
response parsing are exercised exactly as against a live server.
"""

from typing import Any

import httpx
import pytest

from zosmf_client import ZOsmf

BASE_URL = "https://zosmf.example.com"


class ScriptedServer:
    """Records every request and answers with queued responses in order."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self._responses: list[httpx.Response | Exception] = []

    def respond(
        self,
        status_code: int = 200,
        *,
        json: Any = None,
        text: str | None = None,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        """Queue the next response."""
        if json is not None:
            response = httpx.Response(status_code, json=json, headers=headers)
        elif text is not None:
            response = httpx.Response(status_code, text=text, headers=headers)
        else:
            response = httpx.Response(status_code, content=content, headers=headers)
        self._responses.append(response)

    def fail(self, error: Exception) -> None:
        """Queue a transport failure instead of a response."""
        self._responses.append(error)

    def handler(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        answer = self._responses.pop(0)
        if isinstance(answer, Exception):
            raise answer
        return answer

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def server() -> ScriptedServer:
    """Scripted z/OSMF server with no queued responses."""
    return ScriptedServer()


@pytest.fixture
def zosmf(server: ScriptedServer):
    """Client holding an LTPA session token, wired to the scripted server."""
    client = ZOsmf(BASE_URL, token="ltpa-session-token", transport=server.transport)
    yield client
    client.close()


@pytest.fixture
def txid() -> dict[str, str]:
    """Headers z/OSMF sends with every REST files response."""
    return {"X-IBM-Txid": "ZOSMFAD.00000001"}
