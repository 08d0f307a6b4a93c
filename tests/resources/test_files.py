"""Tests for z/OS UNIX file operations."""

import json

import pytest

from zosmf_client import DeserializationError
from zosmf_client.resources.common import CopyDataType
from zosmf_client.resources.files import (
    CopyLinks,
    FileTag,
    FileType,
    ModeLinks,
    Preserve,
    TagLinks,
    TagType,
    greater_than,
    less_than,
)


def _entry(name: str, mode: str = "-rw-r--r--", **extra) -> dict:
    entry = {
        "name": name,
        "mode": mode,
        "size": 1024,
        "uid": 0,
        "user": "IBMUSER",
        "gid": 1,
        "group": "SYS1",
        "mtime": "2024-02-01T10:15:00",
    }
    entry.update(extra)
    return entry


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------


def test_list_directory_with_filters(server, zosmf, txid):
    server.respond(
        200,
        json={
            "items": [
                _entry("."),
                _entry("profile", "drwxr-xr-x"),
                _entry("link", "lrwxrwxrwx", target="/etc"),
            ],
            "returnedRows": 3,
            "totalRows": 3,
            "JSONversion": 1,
        },
        headers=txid,
    )

    result = (
        zosmf.files()
        .list("/u/ibmuser")
        .file_type(FileType.DIRECTORY)
        .modified_days(less_than(7))
        .size(greater_than("1M"))
        .depth(2)
        .lstat()
        .max_items(500)
        .build()
    )

    request = server.last_request
    params = request.url.params
    assert request.url.path == "/zosmf/restfiles/fs"
    assert params["path"] == "/u/ibmuser"
    assert params["type"] == "d"
    assert params["mtime"] == "-7"
    assert params["size"] == "+1M"
    assert params["depth"] == "2"
    assert request.headers["X-IBM-Lstat"] == "true"
    assert request.headers["X-IBM-Max-Items"] == "500"

    assert len(result) == 3
    assert result[1].is_directory
    assert result[2].is_symlink
    assert result[2].target == "/etc"
    assert result[0].mtime.year == 2024
    assert result.total_rows == 3


def test_list_malformed_item_raises(server, zosmf, txid):
    server.respond(200, json={"items": [{"name": "broken"}]}, headers=txid)

    with pytest.raises(DeserializationError):
        zosmf.files().list("/tmp").build()


# ---------------------------------------------------------------------------
# Reading and writing
# ---------------------------------------------------------------------------


def test_read_text_file(server, zosmf, txid):
    server.respond(200, text="export PATH=/bin\n", headers={**txid, "Etag": "E1"})

    result = zosmf.files().read("/u/ibmuser/.profile").build()

    request = server.last_request
    assert request.url.path == "/zosmf/restfiles/fs/u/ibmuser/.profile"
    assert "X-IBM-Data-Type" not in request.headers
    assert result.data == "export PATH=/bin\n"
    assert result.etag == "E1"


def test_read_binary_file_with_search(server, zosmf, txid):
    server.respond(200, content=b"\x01\x02", headers=txid)

    result = (
        zosmf.files()
        .read("/u/ibmuser/data.bin")
        .binary()
        .search("needle")
        .search_max_return(5)
        .build()
    )

    request = server.last_request
    assert request.headers["X-IBM-Data-Type"] == "binary"
    assert request.url.params["search"] == "needle"
    assert request.url.params["maxreturnsize"] == "5"
    assert result.data == b"\x01\x02"


def test_read_not_modified(server, zosmf, txid):
    server.respond(304, headers={**txid, "Etag": "E1"})

    result = zosmf.files().read("/u/ibmuser/.profile").if_none_match("E1").build()

    assert result.data is None


def test_write_text_file(server, zosmf, txid):
    server.respond(204, headers={**txid, "Etag": "E2"})

    result = (
        zosmf.files()
        .write("/u/ibmuser/hello.txt")
        .text("hello\n")
        .if_match("E1")
        .build()
    )

    request = server.last_request
    assert request.method == "PUT"
    assert request.headers["X-IBM-Data-Type"] == "text"
    assert request.headers["If-Match"] == "E1"
    assert request.content == b"hello\n"
    assert result.etag == "E2"


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


def test_create_file_and_directory(server, zosmf, txid):
    server.respond(201, headers=txid)
    server.respond(201, headers=txid)

    zosmf.files().create("/u/ibmuser/new.txt").mode("rw-r--r--").build()
    file_body = json.loads(server.last_request.content)
    zosmf.files().create("/u/ibmuser/newdir").directory().mode("rwxr-xr-x").build()
    directory_body = json.loads(server.last_request.content)

    assert file_body == {"type": "file", "mode": "rw-r--r--"}
    assert directory_body == {"type": "directory", "mode": "rwxr-xr-x"}


def test_delete_recursive(server, zosmf, txid):
    server.respond(204, headers=txid)

    result = zosmf.files().delete("/u/ibmuser/olddir").recursive().build()

    request = server.last_request
    assert request.method == "DELETE"
    assert request.headers["X-IBM-Option"] == "recursive"
    assert result.transaction_id == "ZOSMFAD.00000001"


def test_change_mode(server, zosmf, txid):
    server.respond(200, headers=txid)

    (
        zosmf.files()
        .change_mode("/u/ibmuser/bin", "755")
        .links(ModeLinks.SUPPRESS)
        .recursive()
        .build()
    )

    assert json.loads(server.last_request.content) == {
        "request": "chmod",
        "mode": "755",
        "links": "suppress",
        "recursive": True,
    }


def test_change_owner(server, zosmf, txid):
    server.respond(200, headers=txid)

    zosmf.files().change_owner("/u/ibmuser/bin", "IBMUSER").group("SYS1").build()

    assert json.loads(server.last_request.content) == {
        "request": "chown",
        "owner": "IBMUSER",
        "group": "SYS1",
        "recursive": False,
    }


def test_move_file(server, zosmf, txid):
    server.respond(200, headers=txid)

    zosmf.files().move("/tmp/a.txt", "/u/ibmuser/a.txt").overwrite().build()

    request = server.last_request
    assert request.url.path == "/zosmf/restfiles/fs/u/ibmuser/a.txt"
    assert json.loads(request.content) == {
        "request": "move",
        "from": "/tmp/a.txt",
        "overwrite": True,
    }


def test_copy_directory(server, zosmf, txid):
    server.respond(200, headers=txid)

    (
        zosmf.files()
        .copy("/u/ibmuser/src", "/u/ibmuser/dst")
        .recursive()
        .links(CopyLinks.SOURCE)
        .preserve(Preserve.MODIFICATION_TIME)
        .build()
    )

    assert json.loads(server.last_request.content) == {
        "request": "copy",
        "from": "/u/ibmuser/src",
        "overwrite": False,
        "recursive": True,
        "links": "src",
        "preserve": "modtime",
    }


def test_copy_member_to_file(server, zosmf, txid):
    server.respond(200, headers=txid)

    result = (
        zosmf.files()
        .copy_dataset("IBMUSER.CNTL", "/u/ibmuser/jcl.txt")
        .from_member("IEFBR14")
        .dataset_type(CopyDataType.TEXT)
        .build()
    )

    request = server.last_request
    assert request.method == "PUT"
    assert request.url.path == "/zosmf/restfiles/fs/u/ibmuser/jcl.txt"
    assert json.loads(request.content) == {
        "request": "copy",
        "from-dataset": {"dsn": "IBMUSER.CNTL", "member": "IEFBR14", "type": "text"},
    }
    assert result.transaction_id == "ZOSMFAD.00000001"


def test_copy_sequential_dataset_to_file(server, zosmf, txid):
    server.respond(200, headers=txid)

    zosmf.files().copy_dataset("IBMUSER.DATA", "/tmp/data.txt").build()

    assert json.loads(server.last_request.content) == {
        "request": "copy",
        "from-dataset": {"dsn": "IBMUSER.DATA"},
    }


# ---------------------------------------------------------------------------
# Tags
# ---------------------------------------------------------------------------


def test_list_tags_of_directory(server, zosmf, txid):
    server.respond(
        200,
        json={
            "stdout": [
                "t IBM-1047    T=on  /u/ibmuser/dir/a.txt",
                "b untagged    T=off /u/ibmuser/dir/b.bin",
                "m ISO8859-1   T=off /u/ibmuser/dir/c.dat",
                "- untagged    T=off /u/ibmuser/dir/d",
            ]
        },
        headers=txid,
    )

    tags = zosmf.files().list_tag("/u/ibmuser/dir").recursive().build()

    request = server.last_request
    assert request.method == "PUT"
    assert request.url.path == "/zosmf/restfiles/fs/u/ibmuser/dir"
    assert json.loads(request.content) == {
        "request": "chtag",
        "action": "list",
        "recursive": True,
    }
    assert list(tags) == [
        FileTag(
            tag_type=TagType.TEXT,
            code_set="IBM-1047",
            text_flag=True,
            path="/u/ibmuser/dir/a.txt",
        ),
        FileTag(
            tag_type=TagType.BINARY,
            code_set=None,
            text_flag=False,
            path="/u/ibmuser/dir/b.bin",
        ),
        FileTag(
            tag_type=TagType.MIXED,
            code_set="ISO8859-1",
            text_flag=False,
            path="/u/ibmuser/dir/c.dat",
        ),
        FileTag(
            tag_type=None, code_set=None, text_flag=False, path="/u/ibmuser/dir/d"
        ),
    ]
    assert tags.transaction_id == "ZOSMFAD.00000001"


def test_list_tags_unparseable_line_raises(server, zosmf, txid):
    server.respond(200, json={"stdout": ["some nonsense"]}, headers=txid)

    with pytest.raises(DeserializationError, match="some nonsense"):
        zosmf.files().list_tag("/u/ibmuser/a.txt").build()


def test_set_tag(server, zosmf, txid):
    server.respond(200, headers=txid)

    (
        zosmf.files()
        .set_tag("/u/ibmuser/dir")
        .tag_type(TagType.TEXT)
        .code_set("IBM-1047")
        .links(TagLinks.SUPPRESS)
        .recursive()
        .build()
    )

    request = server.last_request
    assert request.method == "PUT"
    assert json.loads(request.content) == {
        "request": "chtag",
        "action": "set",
        "type": "text",
        "codeset": "IBM-1047",
        "links": "suppress",
        "recursive": True,
    }


def test_remove_tag(server, zosmf, txid):
    server.respond(200, headers=txid)

    zosmf.files().remove_tag("/u/ibmuser/a.txt").build()

    assert json.loads(server.last_request.content) == {
        "request": "chtag",
        "action": "remove",
        "recursive": False,
    }
