"""z/OS UNIX file operations (``/zosmf/restfiles/fs``)."""

from datetime import datetime
from enum import Enum
from typing import Any, TypeVar

import httpx

from ..restapi.client import ZOsmfSession
from ..restapi.endpoint import HEADER, Body, Endpoint, Flag, Header, Option, Path, Query
from ..restapi.types import (
    ContentResult,
    ItemList,
    TransactionResult,
    WriteResult,
    ZOsmfModel,
    bytes_parser,
    items_parser,
    model_parser,
    text_parser,
    transaction_id,
    transaction_parser,
    write_parser,
)
from .common import (
    RESTFILES_ROUTE,
    CopyDataType,
    DataType,
    Searchable,
    Writable,
    data_type_header,
)

T = TypeVar("T")

FILES_ROUTE = f"{RESTFILES_ROUTE}/fs"


class FileType(str, Enum):
    CHARACTER_SPECIAL = "c"
    DIRECTORY = "d"
    FIFO = "p"
    FILE = "f"
    SOCKET = "s"
    SYMBOLIC_LINK = "l"


class CreateType(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"


class FileSystem(str, Enum):
    ALL = "all"
    SAME = "same"


class Symlinks(str, Enum):
    FOLLOW = "follow"
    REPORT = "report"


class ModeLinks(str, Enum):
    FOLLOW = "follow"
    SUPPRESS = "suppress"


class OwnerLinks(str, Enum):
    CHANGE = "change"
    FOLLOW = "follow"


class CopyLinks(str, Enum):
    ALL = "all"
    NONE = "none"
    SOURCE = "src"


class Preserve(str, Enum):
    ALL = "all"
    MODIFICATION_TIME = "modtime"
    NONE = "none"


class TagType(str, Enum):
    BINARY = "binary"
    MIXED = "mixed"
    TEXT = "text"


class TagLinks(str, Enum):
    CHANGE = "change"
    SUPPRESS = "suppress"


# First column of a chtag -p line
_TAG_KINDS = {
    "-": None,
    "b": TagType.BINARY,
    "m": TagType.MIXED,
    "t": TagType.TEXT,
}


def greater_than(value: int | str) -> str:
    """Render a ``mtime``/``size`` filter matching values above ``value``."""
    return f"+{value}"


def less_than(value: int | str) -> str:
    """Render a ``mtime``/``size`` filter matching values below ``value``."""
    return f"-{value}"


class FileAttributes(ZOsmfModel):
    """One entry of a directory listing."""

    name: str
    mode: str
    size: int
    uid: int
    user: str | None = None
    gid: int
    group: str
    mtime: datetime
    target: str | None = None

    @property
    def is_directory(self) -> bool:
        return self.mode.startswith("d")

    @property
    def is_symlink(self) -> bool:
        return self.mode.startswith("l")


class FileTag(ZOsmfModel):
    """File tag as reported by ``chtag -p``.

    Lines look like ``t IBM-1047    T=on  /u/ibmuser/a.txt``: the tag type,
    the coded character set padded to twelve columns, the text flag and the
    path.
    """

    tag_type: TagType | None
    code_set: str | None
    text_flag: bool
    path: str

    @classmethod
    def from_line(cls, line: str) -> "FileTag":
        kind = line[:1]
        if kind not in _TAG_KINDS:
            msg = f"Unrecognised file tag line: {line!r}"
            raise ValueError(msg)
        code_set = line[2:14].strip()
        return cls(
            tag_type=_TAG_KINDS[kind],
            code_set=None if code_set == "untagged" else code_set,
            text_flag=line[14:18].strip() == "T=on",
            path=line[20:],
        )


class _TagOutput(ZOsmfModel):
    stdout: list[str]


def _tags(response: httpx.Response) -> ItemList[FileTag]:
    output = model_parser(_TagOutput)(response)
    return ItemList[FileTag](
        items=[FileTag.from_line(line) for line in output.stdout],
        transaction_id=transaction_id(response),
    )


class ListFiles(Endpoint[ItemList[FileAttributes]]):
    """List a directory with optional server-side filters."""

    route = FILES_ROUTE

    path = Query("path")
    group = Query("group")
    modified_days = Query("mtime")
    name = Query("name")
    size = Query("size")
    permissions = Query("perm")
    file_type = Query("type")
    user = Query("user")
    depth = Query("depth")
    limit = Query("limit")
    file_system = Query("filesys")
    symlinks = Query("symlinks")
    lstat = Flag("X-IBM-Lstat", location=HEADER)
    max_items = Header("X-IBM-Max-Items")


class ReadFile(Searchable[T]):
    route = FILES_ROUTE + "{path}"

    path = Path()
    encoding = Option()
    data_type = Option()
    record_range = Header("X-IBM-Record-Range")
    if_none_match = Header("If-None-Match")

    def _headers(self) -> dict[str, str]:
        headers = super()._headers()
        data_type = data_type_header(self.get("data_type"), self.get("encoding"))
        if data_type:
            headers["X-IBM-Data-Type"] = data_type
        return headers

    def text(self) -> "ReadFile[ContentResult[str]]":
        return self.replace(data_type=None).with_parser(text_parser())

    def binary(self) -> "ReadFile[ContentResult[bytes]]":
        return self.replace(data_type=DataType.BINARY).with_parser(bytes_parser())


class WriteFile(Writable[WriteResult]):
    method = "PUT"
    route = FILES_ROUTE + "{path}"

    path = Path()
    if_match = Header("If-Match")


class CreateFile(Endpoint[TransactionResult]):
    method = "POST"
    route = FILES_ROUTE + "{path}"

    path = Path()
    file_type = Body("type")
    mode = Body("mode")

    def directory(self) -> "CreateFile":
        return self.replace(file_type=CreateType.DIRECTORY)


class DeleteFile(Endpoint[TransactionResult]):
    method = "DELETE"
    route = FILES_ROUTE + "{path}"

    path = Path()
    recursive = Flag("X-IBM-Option", "recursive", location=HEADER)


class ChangeMode(Endpoint[TransactionResult]):
    method = "PUT"
    route = FILES_ROUTE + "{path}"

    path = Path()
    mode = Option()
    links = Option()
    recursive = Flag("recursive", location=None)

    def _json(self) -> Any:
        body: dict[str, Any] = {"request": "chmod", "mode": self.get("mode")}
        if self.get("links") is not None:
            body["links"] = ModeLinks(self.get("links")).value
        body["recursive"] = bool(self.get("recursive"))
        return body


class ChangeOwner(Endpoint[TransactionResult]):
    method = "PUT"
    route = FILES_ROUTE + "{path}"

    path = Path()
    owner = Option()
    group = Option()
    links = Option()
    recursive = Flag("recursive", location=None)

    def _json(self) -> Any:
        body: dict[str, Any] = {"request": "chown", "owner": self.get("owner")}
        if self.get("group") is not None:
            body["group"] = self.get("group")
        if self.get("links") is not None:
            body["links"] = OwnerLinks(self.get("links")).value
        body["recursive"] = bool(self.get("recursive"))
        return body


class MoveFile(Endpoint[TransactionResult]):
    method = "PUT"
    route = FILES_ROUTE + "{to_path}"

    to_path = Path()
    from_path = Option()
    overwrite = Flag("overwrite", location=None)

    def _json(self) -> Any:
        return {
            "request": "move",
            "from": self.get("from_path"),
            "overwrite": bool(self.get("overwrite")),
        }


class CopyFile(Endpoint[TransactionResult]):
    method = "PUT"
    route = FILES_ROUTE + "{to_path}"

    to_path = Path()
    from_path = Option()
    overwrite = Flag("overwrite", location=None)
    recursive = Flag("recursive", location=None)
    links = Option()
    preserve = Option()

    def _json(self) -> Any:
        body: dict[str, Any] = {
            "request": "copy",
            "from": self.get("from_path"),
            "overwrite": bool(self.get("overwrite")),
            "recursive": bool(self.get("recursive")),
        }
        if self.get("links") is not None:
            body["links"] = CopyLinks(self.get("links")).value
        if self.get("preserve") is not None:
            body["preserve"] = Preserve(self.get("preserve")).value
        return body


class CopyDatasetToFile(Endpoint[TransactionResult]):
    """Copy a sequential data set or a member into a z/OS UNIX file."""

    method = "PUT"
    route = FILES_ROUTE + "{to_path}"

    to_path = Path()
    from_dataset = Option()
    from_member = Option()
    dataset_type = Option()

    def _json(self) -> Any:
        source: dict[str, Any] = {"dsn": self.get("from_dataset")}
        if self.get("from_member") is not None:
            source["member"] = self.get("from_member")
        if self.get("dataset_type") is not None:
            source["type"] = CopyDataType(self.get("dataset_type")).value
        return {"request": "copy", "from-dataset": source}


class ListTags(Endpoint[ItemList[FileTag]]):
    """Report the file tags of a file or directory tree."""

    method = "PUT"
    route = FILES_ROUTE + "{path}"

    path = Path()
    recursive = Flag("recursive", location=None)

    def _json(self) -> Any:
        return {
            "request": "chtag",
            "action": "list",
            "recursive": bool(self.get("recursive")),
        }


class SetTag(Endpoint[TransactionResult]):
    method = "PUT"
    route = FILES_ROUTE + "{path}"

    path = Path()
    tag_type = Option()
    code_set = Option()
    links = Option()
    recursive = Flag("recursive", location=None)

    def _json(self) -> Any:
        body: dict[str, Any] = {"request": "chtag", "action": "set"}
        if self.get("tag_type") is not None:
            body["type"] = TagType(self.get("tag_type")).value
        if self.get("code_set") is not None:
            body["codeset"] = self.get("code_set")
        if self.get("links") is not None:
            body["links"] = TagLinks(self.get("links")).value
        body["recursive"] = bool(self.get("recursive"))
        return body


class RemoveTag(Endpoint[TransactionResult]):
    method = "PUT"
    route = FILES_ROUTE + "{path}"

    path = Path()
    links = Option()
    recursive = Flag("recursive", location=None)

    def _json(self) -> Any:
        body: dict[str, Any] = {"request": "chtag", "action": "remove"}
        if self.get("links") is not None:
            body["links"] = TagLinks(self.get("links")).value
        body["recursive"] = bool(self.get("recursive"))
        return body


class Files:
    """Entry point for the z/OS UNIX file operations of one session."""

    def __init__(self, session: ZOsmfSession):
        self._session = session

    def list(self, path: str) -> ListFiles:
        """List a directory, or a single file when ``path`` names one.

        Args:
            path: Absolute path to list.

        Returns:
            Builder whose filters (``name``, ``size``, ``modified_days`` and
            so on) narrow the listing on the server.
        """
        return ListFiles(self._session, items_parser(FileAttributes), path=path)

    def read(self, path: str) -> ReadFile[ContentResult[str]]:
        """Read a file as text; call ``binary()`` on the builder for bytes.

        Args:
            path: Absolute path of the file.
        """
        return ReadFile(self._session, text_parser(), path=path)

    def write(self, path: str) -> WriteFile:
        """Replace the content of a file, creating it if needed.

        Args:
            path: Absolute path of the file.
        """
        return WriteFile(self._session, write_parser, path=path)

    def create(self, path: str) -> CreateFile:
        """Create a file; call ``directory()`` on the builder for a directory.

        Args:
            path: Absolute path to create.
        """
        return CreateFile(
            self._session, transaction_parser, path=path, file_type=CreateType.FILE
        )

    def delete(self, path: str) -> DeleteFile:
        """Delete a file, or a directory tree with ``recursive()``.

        Args:
            path: Absolute path to delete.
        """
        return DeleteFile(self._session, transaction_parser, path=path)

    def change_mode(self, path: str, mode: str) -> ChangeMode:
        """Change the permission bits of a file or directory.

        Args:
            path: Absolute path of the file or directory.
            mode: Octal (``755``) or symbolic (``rwxr-xr-x``) mode.
        """
        return ChangeMode(self._session, transaction_parser, path=path, mode=mode)

    def change_owner(self, path: str, owner: str) -> ChangeOwner:
        """Change the owner, and optionally the group, of a file.

        Args:
            path: Absolute path of the file or directory.
            owner: User name or UID of the new owner.
        """
        return ChangeOwner(self._session, transaction_parser, path=path, owner=owner)

    def move(self, from_path: str, to_path: str) -> MoveFile:
        """Move or rename a file or directory.

        Args:
            from_path: Current absolute path.
            to_path: New absolute path.
        """
        return MoveFile(
            self._session, transaction_parser, from_path=from_path, to_path=to_path
        )

    def copy(self, from_path: str, to_path: str) -> CopyFile:
        """Copy a file, or a directory tree with ``recursive()``.

        Args:
            from_path: Absolute path of the source.
            to_path: Absolute path of the target.
        """
        return CopyFile(
            self._session, transaction_parser, from_path=from_path, to_path=to_path
        )

    def copy_dataset(self, from_dataset: str, to_path: str) -> CopyDatasetToFile:
        """Copy a data set, or one member with ``from_member``, into a file.

        Args:
            from_dataset: Source data set name.
            to_path: Absolute path of the target file.
        """
        return CopyDatasetToFile(
            self._session,
            transaction_parser,
            from_dataset=from_dataset,
            to_path=to_path,
        )

    def list_tag(self, path: str) -> ListTags:
        """List the file tags of a file, or of a directory tree.

        Args:
            path: Absolute path of the file or directory.

        Returns:
            Builder yielding one :class:`FileTag` per file.

        Raises:
            DeserializationError: From ``build()``, if a line of the
                ``chtag`` output cannot be parsed.
        """
        return ListTags(self._session, _tags, path=path)

    def set_tag(self, path: str) -> SetTag:
        """Tag a file with a type and coded character set.

        Args:
            path: Absolute path of the file or directory.
        """
        return SetTag(self._session, transaction_parser, path=path)

    def remove_tag(self, path: str) -> RemoveTag:
        """Remove the tag from a file or directory tree.

        Args:
            path: Absolute path of the file or directory.
        """
        return RemoveTag(self._session, transaction_parser, path=path)
