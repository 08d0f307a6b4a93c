"""Tests for system variables and symbols."""

import json

import pytest

from zosmf_client import DeserializationError
from zosmf_client.resources.variables import SystemId, Variable

VARIABLES = "/zosmf/variables/rest/1.0/systems"


def test_system_id_renders_local_or_named():
    assert str(SystemId.local()) == "local"
    assert str(SystemId.named("PLEX1", "SY1")) == "PLEX1.SY1"


def test_list_local_variables(server, zosmf):
    server.respond(
        200,
        json={
            "system-variable-list": [
                {"name": "HLQ", "value": "IBMUSER", "description": "High level"},
                {"name": "VOL", "value": "VOL001"},
            ]
        },
    )

    variables = zosmf.variables().list().name("HLQ").name("VOL").build()

    request = server.last_request
    assert request.url.path == f"{VARIABLES}/local"
    assert request.url.params.get_list("var-name") == ["HLQ", "VOL"]
    assert variables == [
        Variable(name="HLQ", value="IBMUSER", description="High level"),
        Variable(name="VOL", value="VOL001"),
    ]


def test_list_variables_of_named_system(server, zosmf):
    server.respond(200, json={"system-variable-list": []})

    variables = zosmf.variables().list(SystemId.named("PLEX1", "SY1")).build()

    assert server.last_request.url.path == f"{VARIABLES}/PLEX1.SY1"
    assert variables == []


def test_list_variables_unexpected_body_raises(server, zosmf):
    server.respond(200, json={"variables": []})

    with pytest.raises(DeserializationError):
        zosmf.variables().list().build()


def test_list_symbols(server, zosmf):
    server.respond(
        200,
        json={"system-symbol-list": [{"name": "SYSNAME", "value": "SY1"}]},
    )

    symbols = zosmf.variables().symbols().name("SYSNAME").build()

    request = server.last_request
    assert request.url.path == f"{VARIABLES}/local"
    assert request.url.params["source"] == "symbol"
    assert request.url.params["var-name"] == "SYSNAME"
    assert symbols[0].value == "SY1"


def test_create_variables(server, zosmf):
    server.respond(204)

    result = (
        zosmf.variables()
        .create(
            "PLEX1",
            "SY1",
            [Variable(name="HLQ", value="IBMUSER"), Variable(name="X", value="1")],
        )
        .build()
    )

    request = server.last_request
    assert request.method == "POST"
    assert request.url.path == f"{VARIABLES}/PLEX1.SY1"
    assert json.loads(request.content) == {
        "system-variable-list": [
            {"name": "HLQ", "value": "IBMUSER", "description": ""},
            {"name": "X", "value": "1", "description": ""},
        ]
    }
    assert result is None


def test_delete_variables(server, zosmf):
    server.respond(204)

    zosmf.variables().delete("PLEX1", "SY1", ["HLQ", "X"]).build()

    request = server.last_request
    assert request.method == "DELETE"
    assert json.loads(request.content) == ["HLQ", "X"]


def test_import_variables(server, zosmf):
    server.respond(204)

    zosmf.variables().import_file("PLEX1", "SY1", "/u/ibmuser/vars.csv").build()

    request = server.last_request
    assert request.url.path == f"{VARIABLES}/PLEX1.SY1/actions/import"
    assert json.loads(request.content) == {
        "variables-import-file": "/u/ibmuser/vars.csv"
    }


def test_export_variables_with_overwrite(server, zosmf):
    server.respond(204)

    (
        zosmf.variables()
        .export_file("PLEX1", "SY1", "/u/ibmuser/vars.csv")
        .overwrite()
        .build()
    )

    request = server.last_request
    assert request.url.path == f"{VARIABLES}/PLEX1.SY1/actions/export"
    assert json.loads(request.content) == {
        "variables-export-file": "/u/ibmuser/vars.csv",
        "overwrite": True,
    }
