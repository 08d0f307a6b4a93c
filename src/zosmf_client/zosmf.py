"""Top-level handle for one z/OSMF server."""

from pathlib import Path

import httpx

from .resources.datasets import Datasets
from .resources.files import Files
from .resources.info import GetInfo, info
from .resources.jobs import Jobs
from .resources.variables import Variables
from .restapi.client import DEFAULT_TIMEOUT, ZOsmfSession


class ZOsmf:
    """Client for one z/OSMF server.

    Log in once, then reach each REST service through its accessor::

        with ZOsmf("https://zosmf.example.com") as zosmf:
            zosmf.login("IBMUSER", "SYS1")
            active = zosmf.jobs().list().owner("*").active_only().build()

    Accessors are cheap; each returns a fresh entry point bound to the
    shared session.
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
        self.session = ZOsmfSession(
            base_url,
            token=token,
            token_file=token_file,
            token_cookie=token_cookie,
            verify=verify,
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        self.session.close()

    @property
    def base_url(self) -> str:
        return self.session.base_url

    @property
    def is_authenticated(self) -> bool:
        return self.session.is_authenticated

    def login(self, username: str, password: str) -> None:
        """Authenticate and keep the session cookies for later calls."""
        self.session.login(username, password)

    def logout(self) -> None:
        self.session.logout()

    def datasets(self) -> Datasets:
        return Datasets(self.session)

    def files(self) -> Files:
        return Files(self.session)

    def jobs(self) -> Jobs:
        return Jobs(self.session)

    def variables(self) -> Variables:
        return Variables(self.session)

    def info(self) -> GetInfo:
        return info(self.session)
