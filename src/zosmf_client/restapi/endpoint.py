"""Immutable request builders.

An :class:`Endpoint` describes one z/OSMF request shape: an HTTP method, a
route template, and a set of parameters declared as class-level descriptors.
Reading a parameter on a builder returns its setter, and every setter returns
a new builder, so a partially configured builder can be shared and extended
without the branches affecting each other::

    jobs = ListJobs(session, array_parser(Job))
    mine = jobs.owner("IBMUSER")
    everyone = jobs.owner("*").active_only()
    result = everyone.build()
"""

import copy
from collections.abc import Callable
from enum import Enum
from typing import Any, ClassVar, Generic, TypeVar
from urllib.parse import quote

import httpx

from .client import ZOsmfSession

T = TypeVar("T")
U = TypeVar("U")

QUERY = "query"
HEADER = "header"
BODY = "body"

# Characters z/OSMF expects verbatim in data set and file names
PATH_SAFE = "/$@"


def render(value: Any) -> str:
    """Render a parameter value the way z/OSMF expects it on the wire."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value


class Param:
    """Base descriptor for a builder parameter.

    Subclasses decide where the value lands in the request. The owning
    attribute name is the parameter's name for :meth:`Endpoint.replace`.
    """

    location: str | None = None

    def __init__(self, key: str | None = None):
        self.key = key
        self.name = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name
        if self.key is None:
            self.key = name

    def __get__(self, instance: "Endpoint | None", owner: type | None = None):
        if instance is None:
            return self

        def setter(value: Any) -> "Endpoint":
            return instance.replace(**{self.name: value})

        setter.__name__ = self.name
        return setter

    def pairs(self, value: Any) -> list[tuple[str, str]]:
        return [(self.key, render(value))]


class Query(Param):
    """Query string parameter; list and tuple values repeat the key."""

    location = QUERY

    def pairs(self, value: Any) -> list[tuple[str, str]]:
        if isinstance(value, (list, tuple)):
            return [(self.key, render(item)) for item in value]
        return super().pairs(value)


class Header(Param):
    """Request header."""

    location = HEADER


class Body(Param):
    """Key of the JSON request body."""

    location = BODY


class Path(Param):
    """Route placeholder.

    ``template`` wraps the quoted value, e.g. ``"-({})/"`` for a volume
    prefix. An unset path parameter renders as the empty string.
    """

    def __init__(self, template: str = "{}"):
        super().__init__()
        self.template = template

    def format(self, value: Any) -> str:
        if value is None:
            return ""
        return self.template.format(quote(render(value), safe=PATH_SAFE))


class Flag(Param):
    """Switch that sends ``key=on`` when enabled and nothing otherwise."""

    def __init__(self, key: str, on: str = "true", location: str = QUERY):
        super().__init__(key)
        self.on = on
        self.location = location

    def __get__(self, instance: "Endpoint | None", owner: type | None = None):
        if instance is None:
            return self

        def setter(value: bool | None = True) -> "Endpoint":
            return instance.replace(**{self.name: value or None})

        setter.__name__ = self.name
        return setter

    def pairs(self, value: Any) -> list[tuple[str, str]]:
        return [(self.key, self.on)]


class Option(Param):
    """Value kept on the builder for hooks to render themselves."""


class Endpoint(Generic[T]):
    """Immutable builder for one z/OSMF request.

    Subclasses set ``method`` and ``route`` and declare parameters as class
    attributes. The ``_query``, ``_headers``, ``_json`` and ``_content`` hooks
    may be overridden where a request needs more than the declared
    parameters give.
    """

    method: ClassVar[str] = "GET"
    route: ClassVar[str] = ""

    _parameters: ClassVar[dict[str, Param]] = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        parameters: dict[str, Param] = {}
        for klass in reversed(cls.__mro__):
            for name, attr in vars(klass).items():
                if isinstance(attr, Param):
                    parameters[name] = attr
        cls._parameters = parameters

    def __init__(
        self,
        session: ZOsmfSession,
        parser: Callable[[httpx.Response], T],
        **values: Any,
    ):
        self._session = session
        self._parser = parser
        self._values: dict[str, Any] = {}
        self._assign(values)

    def __repr__(self) -> str:
        values = ", ".join(f"{name}={value!r}" for name, value in self._values.items())
        return f"{type(self).__name__}({values})"

    @classmethod
    def parameters(cls) -> dict[str, Param]:
        """Declared parameters by name, including inherited ones."""
        return dict(cls._parameters)

    def get(self, name: str) -> Any:
        """Current value of a parameter, or None when unset."""
        return self._values.get(name)

    def replace(self, **values: Any) -> "Endpoint[T]":
        """Return a copy with the given parameters set; None unsets.

        Raises:
            TypeError: If a name is not a declared parameter.
        """
        clone = copy.copy(self)
        clone._values = dict(self._values)
        clone._assign(values)
        return clone

    def with_parser(self, parser: Callable[[httpx.Response], U]) -> "Endpoint[U]":
        """Return a copy producing its result with a different parser."""
        clone = copy.copy(self)
        clone._values = dict(self._values)
        clone._parser = parser
        return clone  # type: ignore[return-value]

    def _assign(self, values: dict[str, Any]) -> None:
        unknown = sorted(set(values) - set(self._parameters))
        if unknown:
            msg = f"{type(self).__name__} has no parameter {', '.join(unknown)}"
            raise TypeError(msg)
        for name, value in values.items():
            if value is None:
                self._values.pop(name, None)
            else:
                self._values[name] = value

    def _declared(self, location: str):
        for name, param in self._parameters.items():
            if param.location == location and name in self._values:
                yield param, self._values[name]

    def _route(self) -> str:
        placeholders = {
            name: param.format(self._values.get(name))
            for name, param in self._parameters.items()
            if isinstance(param, Path)
        }
        return self.route.format(**placeholders)

    def _query(self) -> list[tuple[str, str]]:
        pairs: list[tuple[str, str]] = []
        for param, value in self._declared(QUERY):
            pairs.extend(param.pairs(value))
        return pairs

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        for param, value in self._declared(HEADER):
            headers.update(param.pairs(value))
        return headers

    def _json(self) -> Any:
        body = {param.key: jsonable(value) for param, value in self._declared(BODY)}
        return body or None

    def _content(self) -> str | bytes | None:
        return None

    def get_request(self) -> httpx.Request:
        """Build the request :meth:`build` would send, without sending it."""
        return self._session.build_request(
            self.method,
            self._route(),
            params=self._query(),
            headers=self._headers(),
            json=self._json(),
            content=self._content(),
        )

    def build(self) -> T:
        """Send the request and parse the response.

        Raises:
            ZOsmfError: The subclass matching the failure.
        """
        response = self._session.send(self.get_request())
        return self._session.parse(response, self._parser)
