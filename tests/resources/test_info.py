"""Tests for the z/OSMF information request."""

import pytest

from zosmf_client import DeserializationError

INFO = {
    "zos_version": "04.27.00",
    "zosmf_port": "443",
    "zosmf_version": "27",
    "zosmf_hostname": "zosmf.example.com",
    "plugins": [
        {
            "pluginVersion": "HSMA250",
            "pluginDefaultName": "z/OS Operator Consoles",
            "pluginStatus": "ACTIVE",
        },
        {"pluginVersion": "HSMA240", "pluginDefaultName": "Workflow"},
    ],
    "zosmf_saf_realm": "SAFRealm",
    "zosmf_full_version": "27.0",
    "api_version": "1",
}


def test_info_parses_server_details(server, zosmf):
    server.respond(200, json=INFO)

    info = zosmf.info().build()

    request = server.last_request
    assert request.method == "GET"
    assert request.url.path == "/zosmf/info"
    assert info.zos_version == "04.27.00"
    assert info.zosmf_hostname == "zosmf.example.com"
    assert [plugin.default_name for plugin in info.plugins] == [
        "z/OS Operator Consoles",
        "Workflow",
    ]
    assert info.plugins[1].status is None


def test_info_does_not_need_transaction_id(server, zosmf):
    """The info service sends no X-IBM-Txid header."""
    server.respond(200, json=INFO)
    assert zosmf.info().build().api_version == "1"


def test_info_missing_field_raises(server, zosmf):
    body = {key: value for key, value in INFO.items() if key != "zosmf_port"}
    server.respond(200, json=body)

    with pytest.raises(DeserializationError, match="zosmf_port"):
        zosmf.info().build()
