"""Pieces shared by the z/OSMF REST files and jobs resources."""

from enum import Enum
from typing import TypeVar

from ..restapi.endpoint import Endpoint, Flag, Option

T = TypeVar("T")

RESTFILES_ROUTE = "/zosmf/restfiles"


class DataType(str, Enum):
    TEXT = "text"
    BINARY = "binary"
    RECORD = "record"


class MigratedRecall(str, Enum):
    """What to do when the target data set has been migrated."""

    WAIT = "wait"
    NO_WAIT = "nowait"
    ERROR = "error"


class Enqueue(str, Enum):
    EXCLUSIVE = "EXCLU"
    SHARED_WRITE = "SHRW"


class CopyDataType(str, Enum):
    """How z/OSMF converts content copied between a data set and a file."""

    BINARY = "binary"
    EXECUTABLE = "executable"
    TEXT = "text"


def data_type_header(
    data_type: DataType | str | None,
    encoding: str | None,
    crlf_newlines: bool = False,
) -> str | None:
    """Render the ``X-IBM-Data-Type`` header, or None when all defaults apply.

    An encoding or CRLF option without an explicit type implies text.
    """
    if data_type is None and encoding is None and not crlf_newlines:
        return None
    value = DataType(data_type or DataType.TEXT).value
    if encoding is not None:
        value += f";fileEncoding={encoding}"
    if crlf_newlines:
        value += ";crlf=true"
    return value


class Searchable(Endpoint[T]):
    """Content read that can be narrowed to the records matching a search.

    The case and size options only apply once a search term is set.
    """

    search = Option()
    search_is_regex = Flag("research", location=None)
    search_case_sensitive = Flag("insensitive", "false", location=None)
    search_max_return = Option()

    def _query(self) -> list[tuple[str, str]]:
        pairs = super()._query()
        term = self.get("search")
        if term is None:
            return pairs

        pairs.append(("research" if self.get("search_is_regex") else "search", term))
        if self.get("search_case_sensitive"):
            pairs.append(("insensitive", "false"))
        max_return = self.get("search_max_return")
        if max_return is not None:
            pairs.append(("maxreturnsize", str(max_return)))
        return pairs


class Writable(Endpoint[T]):
    """Content upload in text or binary form."""

    data = Option()
    data_type = Option()
    encoding = Option()
    crlf_newlines = Flag("crlf", location=None)

    def _headers(self) -> dict[str, str]:
        headers = super()._headers()
        data_type = DataType(self.get("data_type") or DataType.TEXT)
        if data_type is DataType.TEXT:
            headers["X-IBM-Data-Type"] = data_type_header(
                data_type, self.get("encoding"), bool(self.get("crlf_newlines"))
            )
            headers["Content-Type"] = "text/plain"
        else:
            headers["X-IBM-Data-Type"] = data_type.value
            headers["Content-Type"] = "application/octet-stream"
        return headers

    def _content(self) -> str | bytes | None:
        return self.get("data")

    def text(self, data: str) -> "Writable[T]":
        return self.replace(data=data, data_type=DataType.TEXT)

    def binary(self, data: bytes) -> "Writable[T]":
        return self.replace(data=data, data_type=DataType.BINARY)
