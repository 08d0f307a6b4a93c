"""Response types shared by the z/OSMF resources.

Pydantic models and small dataclasses for the parts of z/OSMF responses that
every resource has in common: paged item lists, the error report body, and
results built from response headers. Also holds the converters for the
server's Y/N flags and slash-separated dates.
"""

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from datetime import date, datetime
from typing import Annotated, Any, Generic, TypeVar

import httpx
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, TypeAdapter

from .errors import DeserializationError

T = TypeVar("T")
D = TypeVar("D", str, bytes)

TXID_HEADER = "X-IBM-Txid"

# z/OSMF writes this in place of a missing value
NONE_MARKER = "***None***"


def _yes_no(value: Any) -> Any:
    if isinstance(value, str):
        text = value.strip().upper()
        if text in ("Y", "YES"):
            return True
        if text in ("N", "NO"):
            return False
    return value


def _optional_text(value: Any) -> Any:
    if isinstance(value, str) and value.strip() in ("", NONE_MARKER):
        return None
    return value


def _slash_date(value: Any) -> Any:
    value = _optional_text(value)
    if isinstance(value, str):
        return datetime.strptime(value, "%Y/%m/%d").date()
    return value


YesNo = Annotated[bool, BeforeValidator(_yes_no)]
OptionalText = Annotated[str | None, BeforeValidator(_optional_text)]
SlashDate = Annotated[date | None, BeforeValidator(_slash_date)]


class ZOsmfModel(BaseModel):
    """Base for z/OSMF response items: immutable, validated by server alias."""

    model_config = ConfigDict(frozen=True)


class ErrorReport(ZOsmfModel):
    """Error body z/OSMF sends with failed requests."""

    category: int
    return_code: int = Field(alias="rc")
    reason: int
    message: str
    details: list[str] | None = None


class ItemList(ZOsmfModel, Generic[T]):
    """Ordered items of a list response plus the server's paging counters."""

    items: list[T]
    returned_rows: int | None = Field(default=None, alias="returnedRows")
    total_rows: int | None = Field(default=None, alias="totalRows")
    more_rows: bool | None = Field(default=None, alias="moreRows")
    json_version: int | None = Field(default=None, alias="JSONversion")
    transaction_id: str | None = None

    def __iter__(self) -> Iterator[T]:  # type: ignore[override]
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: int) -> T:
        return self.items[index]


@dataclass(frozen=True)
class TransactionResult:
    """Result of a request whose only output is its transaction id."""

    transaction_id: str


@dataclass(frozen=True)
class WriteResult:
    """Result of a content write."""

    etag: str | None
    transaction_id: str


@dataclass(frozen=True)
class ContentResult(Generic[D]):
    """Content read from a data set, file or job spool file.

    ``data`` is None when the server answered 304 Not Modified to a
    conditional read.
    """

    data: D | None
    etag: str | None = None
    session_ref: str | None = None
    transaction_id: str | None = None


@dataclass(frozen=True)
class RecordRange:
    """Range of records to read, rendered as ``start-end`` or ``start,count``."""

    start: int
    end: int | None = None
    count: int | None = None

    @classmethod
    def span(cls, start: int, end: int) -> "RecordRange":
        return cls(start=start, end=end)

    @classmethod
    def first(cls, start: int, count: int) -> "RecordRange":
        return cls(start=start, count=count)

    def __str__(self) -> str:
        if self.count is not None:
            return f"{self.start},{self.count}"
        if self.end is not None:
            return f"{self.start}-{self.end}"
        return f"{self.start}-"


def transaction_id(response: httpx.Response) -> str:
    """Return the transaction id header of a z/OSMF files response.

    Raises:
        DeserializationError: If the header is missing.
    """
    txid = response.headers.get(TXID_HEADER)
    if txid is None:
        msg = f"Response from {response.url} is missing the {TXID_HEADER} header"
        raise DeserializationError(msg, status=response.status_code)
    return txid


def model_parser(model: type[T]) -> Callable[[httpx.Response], T]:
    """Parser validating the whole JSON body as one model."""
    adapter = TypeAdapter(model)

    def parse(response: httpx.Response) -> T:
        return adapter.validate_json(response.content)

    return parse


def items_parser(
    model: type[T], *, with_transaction: bool = True
) -> Callable[[httpx.Response], ItemList[T]]:
    """Parser for ``{"items": [...], "returnedRows": ...}`` bodies."""
    adapter = TypeAdapter(ItemList[model])  # type: ignore[valid-type]

    def parse(response: httpx.Response) -> ItemList[T]:
        result = adapter.validate_json(response.content)
        if with_transaction:
            txid = transaction_id(response)
        else:
            txid = response.headers.get(TXID_HEADER)
        return result.model_copy(update={"transaction_id": txid})

    return parse


def array_parser(model: type[T]) -> Callable[[httpx.Response], ItemList[T]]:
    """Parser for bodies that are a bare JSON array of items."""
    adapter = TypeAdapter(list[model])  # type: ignore[valid-type]

    def parse(response: httpx.Response) -> ItemList[T]:
        items = adapter.validate_json(response.content)
        return ItemList[model](items=items)  # type: ignore[valid-type]

    return parse


def transaction_parser(response: httpx.Response) -> TransactionResult:
    """Parser for requests answered with an empty body and a transaction id."""
    return TransactionResult(transaction_id=transaction_id(response))


def write_parser(response: httpx.Response) -> WriteResult:
    """Parser for content writes; the etag is only sent for some writes."""
    return WriteResult(
        etag=response.headers.get("Etag"),
        transaction_id=transaction_id(response),
    )


def none_parser(response: httpx.Response) -> None:
    """Parser for requests whose response carries nothing of interest."""
    return


def text_parser(
    *, with_transaction: bool = True
) -> Callable[[httpx.Response], ContentResult[str]]:
    return _content_parser(lambda response: response.text, with_transaction)


def bytes_parser(
    *, with_transaction: bool = True
) -> Callable[[httpx.Response], ContentResult[bytes]]:
    return _content_parser(lambda response: response.content, with_transaction)


def _content_parser(
    read: Callable[[httpx.Response], D], with_transaction: bool
) -> Callable[[httpx.Response], ContentResult[D]]:
    def parse(response: httpx.Response) -> ContentResult[D]:
        not_modified = response.status_code == httpx.codes.NOT_MODIFIED
        return ContentResult(
            data=None if not_modified else read(response),
            etag=response.headers.get("Etag"),
            session_ref=response.headers.get("X-IBM-Session-Ref"),
            transaction_id=transaction_id(response) if with_transaction else None,
        )

    return parse
