"""Data set and member operations (``/zosmf/restfiles/ds``)."""

from typing import Any, TypeVar

from pydantic import Field

from ..restapi.client import ZOsmfSession
from ..restapi.endpoint import HEADER, Body, Endpoint, Flag, Header, Option, Path, Query
from ..restapi.types import (
    ContentResult,
    ItemList,
    OptionalText,
    SlashDate,
    TransactionResult,
    WriteResult,
    YesNo,
    ZOsmfModel,
    bytes_parser,
    items_parser,
    text_parser,
    transaction_parser,
    write_parser,
)
from .common import (
    RESTFILES_ROUTE,
    CopyDataType,
    DataType,
    Enqueue,
    Searchable,
    Writable,
    data_type_header,
)

T = TypeVar("T")

DATASETS_ROUTE = f"{RESTFILES_ROUTE}/ds"

# Volume serial z/OSMF reports for a migrated data set
VOLUME_MIGRATED = "MIGRAT"


class Dataset(ZOsmfModel):
    """Data set listed with the default ``dsname`` attributes."""

    name: str = Field(alias="dsname")


class DatasetVolume(ZOsmfModel):
    """Data set listed with the ``vol`` attributes."""

    name: str = Field(alias="dsname")
    volume: str = Field(alias="vol")

    @property
    def is_migrated(self) -> bool:
        return self.volume == VOLUME_MIGRATED


class DatasetBase(ZOsmfModel):
    """Data set listed with the full ``base`` attributes.

    Most attributes are absent for aliases, VSAM clusters and migrated data
    sets, so only the name, volume and migration flag are required.
    """

    name: str = Field(alias="dsname")
    block_size: str | None = Field(default=None, alias="blksz")
    catalog: str | None = Field(default=None, alias="catnm")
    creation_date: SlashDate = Field(default=None, alias="cdate")
    device_type: str | None = Field(default=None, alias="dev")
    dataset_type: str | None = Field(default=None, alias="dsntp")
    organization: str | None = Field(default=None, alias="dsorg")
    expiration_date: SlashDate = Field(default=None, alias="edate")
    extents_used: str | None = Field(default=None, alias="extx")
    record_length: str | None = Field(default=None, alias="lrecl")
    migrated: YesNo = Field(alias="migr")
    multi_volume: YesNo | None = Field(default=None, alias="mvol")
    space_overflow: YesNo | None = Field(default=None, alias="ovf")
    last_referenced_date: SlashDate = Field(default=None, alias="rdate")
    record_format: str | None = Field(default=None, alias="recfm")
    size_in_tracks: str | None = Field(default=None, alias="sizex")
    space_units: str | None = Field(default=None, alias="spacu")
    percent_used: str | None = Field(default=None, alias="used")
    volume: str = Field(alias="vol")
    volumes: str | None = Field(default=None, alias="vols")

    @property
    def is_migrated(self) -> bool:
        return self.migrated or self.volume == VOLUME_MIGRATED


class Member(ZOsmfModel):
    """Member listed with the default ``member`` attributes."""

    name: str = Field(alias="member")


class MemberBase(ZOsmfModel):
    """Member listed with the ``base`` attributes.

    Members of fixed and variable format libraries carry ISPF statistics;
    load library members carry the binder attributes instead.
    """

    name: str = Field(alias="member")

    # ISPF statistics
    version: int | None = Field(default=None, alias="vers")
    modification_level: int | None = Field(default=None, alias="mod")
    creation_date: SlashDate = Field(default=None, alias="c4date")
    modification_date: SlashDate = Field(default=None, alias="m4date")
    current_records: int | None = Field(default=None, alias="cnorc")
    initial_records: int | None = Field(default=None, alias="inorc")
    modified_records: int | None = Field(default=None, alias="mnorc")
    modified_time: OptionalText = Field(default=None, alias="mtime")
    modified_seconds: OptionalText = Field(default=None, alias="msec")
    user: OptionalText = None
    modified_by_sclm: YesNo | None = Field(default=None, alias="sclm")

    # Load module attributes
    authorization_code: OptionalText = Field(default=None, alias="ac")
    amode: OptionalText = None
    attributes: OptionalText = Field(default=None, alias="attr")
    rmode: OptionalText = None
    size: OptionalText = None
    ttr: OptionalText = None
    ssi: OptionalText = None


class ListDatasets(Endpoint[T]):
    """List data sets by name pattern, optionally on one volume.

    The ``attributes_*`` variants pick how much z/OSMF returns per data set
    and the model it is parsed into.
    """

    route = DATASETS_ROUTE

    name_pattern = Query("dslevel")
    volume = Query("volser")
    start = Query("start")
    max_items = Header("X-IBM-Max-Items")
    include_total = Flag("total", location=None)
    attributes = Option()

    def _headers(self) -> dict[str, str]:
        headers = super()._headers()
        attributes = self.get("attributes")
        if self.get("include_total"):
            attributes = f"{attributes or 'dsname'},total"
        if attributes:
            headers["X-IBM-Attributes"] = attributes
        return headers

    def attributes_dsname(self) -> "ListDatasets[ItemList[Dataset]]":
        return self.replace(attributes="dsname").with_parser(items_parser(Dataset))

    def attributes_base(self) -> "ListDatasets[ItemList[DatasetBase]]":
        return self.replace(attributes="base").with_parser(items_parser(DatasetBase))

    def attributes_vol(self) -> "ListDatasets[ItemList[DatasetVolume]]":
        return self.replace(attributes="vol").with_parser(items_parser(DatasetVolume))


class ListMembers(Endpoint[T]):
    """List the members of a PDS or PDSE."""

    route = DATASETS_ROUTE + "/{dataset}/member"

    dataset = Path()
    start = Query("start")
    pattern = Query("pattern")
    max_items = Header("X-IBM-Max-Items")
    migrated_recall = Header("X-IBM-Migrated-Recall")
    include_total = Flag("total", location=None)
    attributes = Option()

    def _headers(self) -> dict[str, str]:
        headers = super()._headers()
        attributes = self.get("attributes")
        if self.get("include_total"):
            attributes = f"{attributes or 'member'},total"
        if attributes:
            headers["X-IBM-Attributes"] = attributes
        return headers

    def attributes_member(self) -> "ListMembers[ItemList[Member]]":
        return self.replace(attributes="member").with_parser(
            items_parser(Member, with_transaction=False)
        )

    def attributes_base(self) -> "ListMembers[ItemList[MemberBase]]":
        return self.replace(attributes="base").with_parser(
            items_parser(MemberBase, with_transaction=False)
        )


class ReadDataset(Searchable[T]):
    """Read a data set or member as text, bytes or records."""

    route = DATASETS_ROUTE + "/{volume}{dataset}{member}"

    dataset = Path()
    volume = Path("-({})/")
    member = Path("({})")
    encoding = Option()
    data_type = Option()
    return_etag = Flag("X-IBM-Return-Etag", location=HEADER)
    migrated_recall = Header("X-IBM-Migrated-Recall")
    record_range = Header("X-IBM-Record-Range")
    obtain_enq = Header("X-IBM-Obtain-ENQ")
    session_ref = Header("X-IBM-Session-Ref")
    release_enq = Flag("X-IBM-Release-ENQ", location=HEADER)
    dsname_encoding = Header("X-IBM-Dsname-Encoding")
    if_none_match = Header("If-None-Match")

    def _headers(self) -> dict[str, str]:
        headers = super()._headers()
        data_type = data_type_header(self.get("data_type"), self.get("encoding"))
        if data_type:
            headers["X-IBM-Data-Type"] = data_type
        return headers

    def text(self) -> "ReadDataset[ContentResult[str]]":
        return self.replace(data_type=None).with_parser(text_parser())

    def binary(self) -> "ReadDataset[ContentResult[bytes]]":
        return self.replace(data_type=DataType.BINARY).with_parser(bytes_parser())

    def record(self) -> "ReadDataset[ContentResult[bytes]]":
        return self.replace(data_type=DataType.RECORD).with_parser(bytes_parser())


class WriteDataset(Writable[WriteResult]):
    method = "PUT"
    route = DATASETS_ROUTE + "/{volume}{dataset}{member}"

    dataset = Path()
    volume = Path("-({})/")
    member = Path("({})")
    if_match = Header("If-Match")
    migrated_recall = Header("X-IBM-Migrated-Recall")
    obtain_enq = Header("X-IBM-Obtain-ENQ")
    session_ref = Header("X-IBM-Session-Ref")
    release_enq = Flag("X-IBM-Release-ENQ", location=HEADER)
    dsname_encoding = Header("X-IBM-Dsname-Encoding")

    def record(self, data: bytes) -> "WriteDataset":
        return self.replace(data=data, data_type=DataType.RECORD)


class CreateDataset(Endpoint[TransactionResult]):
    """Allocate a data set with explicit attributes or ``like`` a model."""

    method = "POST"
    route = DATASETS_ROUTE + "/{dataset}"

    dataset = Path()
    volume = Body("volser")
    device_type = Body("unit")
    organization = Body("dsorg")
    space_allocation_unit = Body("alcunit")
    primary_space = Body("primary")
    secondary_space = Body("secondary")
    directory_blocks = Body("dirblk")
    average_block_size = Body("avgblk")
    record_format = Body("recfm")
    block_size = Body("blksize")
    record_length = Body("lrecl")
    storage_class = Body("storclass")
    management_class = Body("mgntclass")
    data_class = Body("dataclass")
    dataset_type = Body("dsntype")
    model_dataset = Body("like")

    def _json(self) -> Any:
        # z/OSMF expects a JSON object even when every attribute is defaulted
        return super()._json() or {}


class DeleteDataset(Endpoint[TransactionResult]):
    method = "DELETE"
    route = DATASETS_ROUTE + "/{volume}{dataset}{member}"

    dataset = Path()
    volume = Path("-({})/")
    member = Path("({})")
    dsname_encoding = Header("X-IBM-Dsname-Encoding")


class RenameDataset(Endpoint[TransactionResult]):
    method = "PUT"
    route = DATASETS_ROUTE + "/{to_dataset}{to_member}"

    to_dataset = Path()
    to_member = Path("({})")
    from_dataset = Option()
    from_member = Option()
    enqueue = Option()

    def _json(self) -> Any:
        source = {"dsn": self.get("from_dataset")}
        if self.get("from_member") is not None:
            source["member"] = self.get("from_member")
        body: dict[str, Any] = {"request": "rename", "from-dataset": source}
        if self.get("enqueue") is not None:
            body["enq"] = Enqueue(self.get("enqueue")).value
        return body


class CopyDataset(Endpoint[TransactionResult]):
    method = "PUT"
    route = DATASETS_ROUTE + "/{volume}{to_dataset}{to_member}"

    to_dataset = Path()
    to_member = Path("({})")
    volume = Path("-({})/")
    from_dataset = Option()
    from_member = Option()
    from_volume = Option()
    alias = Option()
    enqueue = Option()
    replace_existing = Option()

    def _json(self) -> Any:
        source: dict[str, Any] = {"dsn": self.get("from_dataset")}
        if self.get("from_member") is not None:
            source["member"] = self.get("from_member")
        if self.get("from_volume") is not None:
            source["volser"] = self.get("from_volume")
        if self.get("alias") is not None:
            source["alias"] = bool(self.get("alias"))
        body: dict[str, Any] = {"request": "copy", "from-dataset": source}
        if self.get("enqueue") is not None:
            body["enq"] = Enqueue(self.get("enqueue")).value
        if self.get("replace_existing") is not None:
            body["replace"] = bool(self.get("replace_existing"))
        return body


class CopyFileToDataset(Endpoint[TransactionResult]):
    """Copy a z/OS UNIX file into a sequential data set or a member."""

    method = "PUT"
    route = DATASETS_ROUTE + "/{volume}{to_dataset}{to_member}"

    to_dataset = Path()
    to_member = Path("({})")
    volume = Path("-({})/")
    from_path = Option()
    file_type = Option()
    replace_existing = Option()

    def _json(self) -> Any:
        source: dict[str, Any] = {"filename": self.get("from_path")}
        if self.get("file_type") is not None:
            source["type"] = CopyDataType(self.get("file_type")).value
        body: dict[str, Any] = {"request": "copy", "from-file": source}
        if self.get("replace_existing") is not None:
            body["replace"] = bool(self.get("replace_existing"))
        return body


class MigrateDataset(Endpoint[TransactionResult]):
    """Migrate (``hmigrate``) or recall (``hrecall``) a data set through HSM."""

    method = "PUT"
    route = DATASETS_ROUTE + "/{dataset}"

    dataset = Path()
    request = Option()
    wait = Flag("wait", location=None)

    def _json(self) -> Any:
        return {"request": self.get("request"), "wait": bool(self.get("wait"))}


class Datasets:
    """Entry point for the data set operations of one session.

    Every method returns a request builder. Nothing is sent until ``build()``
    is called on it.
    """

    def __init__(self, session: ZOsmfSession):
        self._session = session

    def list(self, name_pattern: str) -> ListDatasets[ItemList[Dataset]]:
        """List data sets matching a name pattern.

        Args:
            name_pattern: High level qualifier pattern such as ``IBMUSER.*``.

        Returns:
            Builder yielding names only. Use ``attributes_base()`` or
            ``attributes_vol()`` for more detail.
        """
        return ListDatasets(
            self._session, items_parser(Dataset), name_pattern=name_pattern
        )

    def list_members(self, dataset: str) -> ListMembers[ItemList[Member]]:
        """List the members of a partitioned data set.

        Args:
            dataset: Fully qualified name of the PDS or PDSE.
        """
        return ListMembers(
            self._session, items_parser(Member, with_transaction=False), dataset=dataset
        )

    def read(self, dataset: str) -> ReadDataset[ContentResult[str]]:
        """Read a sequential data set, or a member once ``member`` is set.

        Args:
            dataset: Fully qualified data set name.

        Returns:
            Builder reading text by default; ``binary()`` and ``record()``
            switch to bytes.
        """
        return ReadDataset(self._session, text_parser(), dataset=dataset)

    def write(self, dataset: str) -> WriteDataset:
        """Replace the content of a sequential data set or a member.

        Args:
            dataset: Fully qualified data set name.
        """
        return WriteDataset(self._session, write_parser, dataset=dataset)

    def create(self, dataset: str) -> CreateDataset:
        """Allocate a new data set.

        Args:
            dataset: Name of the data set to allocate.
        """
        return CreateDataset(self._session, transaction_parser, dataset=dataset)

    def delete(self, dataset: str) -> DeleteDataset:
        """Delete a data set, or a member once ``member`` is set.

        Args:
            dataset: Fully qualified data set name.
        """
        return DeleteDataset(self._session, transaction_parser, dataset=dataset)

    def rename(self, from_dataset: str, to_dataset: str) -> RenameDataset:
        """Rename a data set, or a member with ``from_member``/``to_member``.

        Args:
            from_dataset: Current data set name.
            to_dataset: New data set name.
        """
        return RenameDataset(
            self._session,
            transaction_parser,
            from_dataset=from_dataset,
            to_dataset=to_dataset,
        )

    def copy(self, from_dataset: str, to_dataset: str) -> CopyDataset:
        """Copy a data set or member into another data set.

        Args:
            from_dataset: Source data set name.
            to_dataset: Target data set name. It must already exist.
        """
        return CopyDataset(
            self._session,
            transaction_parser,
            from_dataset=from_dataset,
            to_dataset=to_dataset,
        )

    def copy_file_to_dataset(
        self, from_path: str, to_dataset: str
    ) -> CopyFileToDataset:
        """Copy a z/OS UNIX file into a data set or member.

        Args:
            from_path: Absolute path of the source file.
            to_dataset: Target data set name.
        """
        return CopyFileToDataset(
            self._session,
            transaction_parser,
            from_path=from_path,
            to_dataset=to_dataset,
        )

    def migrate(self, dataset: str) -> MigrateDataset:
        """Migrate a data set through HSM.

        Args:
            dataset: Fully qualified data set name.
        """
        return MigrateDataset(
            self._session, transaction_parser, dataset=dataset, request="hmigrate"
        )

    def recall(self, dataset: str) -> MigrateDataset:
        """Recall a migrated data set through HSM.

        Args:
            dataset: Fully qualified data set name.
        """
        return MigrateDataset(
            self._session, transaction_parser, dataset=dataset, request="hrecall"
        )
