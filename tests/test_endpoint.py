"""Tests for the immutable request builder."""

import json

import pytest

from zosmf_client.restapi.endpoint import (
    HEADER,
    Body,
    Endpoint,
    Flag,
    Header,
    Option,
    Path,
    Query,
)
from zosmf_client.restapi.types import model_parser, none_parser


class Sample(Endpoint[None]):
    method = "PUT"
    route = "/sample/{volume}{name}{member}"

    name = Path()
    volume = Path("-({})/")
    member = Path("({})")
    owner = Query("owner")
    names = Query("var-name")
    max_items = Header("X-IBM-Max-Items")
    verbose = Flag("verbose")
    lstat = Flag("X-IBM-Lstat", location=HEADER)
    mode = Body("mode")
    note = Option()


class Extended(Sample):
    prefix = Query("prefix")


@pytest.fixture
def sample(zosmf):
    return Sample(zosmf.session, none_parser, name="IBMUSER.DATA")


# ---------------------------------------------------------------------------
# Immutability
# ---------------------------------------------------------------------------


def test_setter_returns_new_builder(sample):
    """Setting a value leaves the original builder untouched."""
    changed = sample.owner("IBMUSER")

    assert changed is not sample
    assert changed.get("owner") == "IBMUSER"
    assert sample.get("owner") is None


def test_branches_from_shared_builder_do_not_interfere(sample):
    base = sample.owner("IBMUSER")
    first = base.max_items(10)
    second = base.verbose()

    assert first.get("verbose") is None
    assert second.get("max_items") is None
    assert dict(first.get_request().url.params) == {"owner": "IBMUSER"}
    assert "verbose" in second.get_request().url.params


def test_last_value_wins(sample):
    request = sample.owner("A").owner("B").get_request()
    assert request.url.params.get_list("owner") == ["B"]


def test_none_unsets_parameter(sample):
    request = sample.owner("IBMUSER").owner(None).get_request()
    assert "owner" not in request.url.params


def test_replace_rejects_unknown_parameter(sample):
    with pytest.raises(TypeError, match="no parameter bogus"):
        sample.replace(bogus=1)


def test_constructor_rejects_unknown_parameter(zosmf):
    with pytest.raises(TypeError):
        Sample(zosmf.session, none_parser, unknown="x")


def test_with_parser_keeps_values(sample):
    changed = sample.owner("IBMUSER").with_parser(model_parser(dict))
    assert changed.get("owner") == "IBMUSER"
    assert changed._parser is not sample._parser


def test_subclass_inherits_parameters():
    parameters = Extended.parameters()
    assert "owner" in parameters
    assert "prefix" in parameters
    assert "prefix" not in Sample.parameters()


def test_repr_lists_values(sample):
    assert repr(sample.owner("X")) == "Sample(name='IBMUSER.DATA', owner='X')"


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def test_unset_parameters_are_absent(sample):
    request = sample.get_request()

    assert request.method == "PUT"
    assert request.url.path == "/sample/IBMUSER.DATA"
    assert request.url.query == b""
    assert "X-IBM-Max-Items" not in request.headers
    assert "X-IBM-Lstat" not in request.headers
    assert request.content == b""


def test_list_values_repeat_the_key(sample):
    request = sample.names(["A", "B"]).get_request()
    assert request.url.params.get_list("var-name") == ["A", "B"]


def test_bool_and_int_values_render_lowercase_and_plain(sample):
    request = sample.owner(True).max_items(0).get_request()
    assert request.url.params["owner"] == "true"
    assert request.headers["X-IBM-Max-Items"] == "0"


def test_flag_sends_key_only_when_enabled(sample):
    enabled = sample.verbose().lstat().get_request()
    disabled = sample.verbose().verbose(False).get_request()

    assert enabled.url.params["verbose"] == "true"
    assert enabled.headers["X-IBM-Lstat"] == "true"
    assert "verbose" not in disabled.url.params


def test_path_templates_apply_only_when_set(sample):
    request = sample.volume("VOL001").member("MEM1").get_request()
    assert request.url.raw_path == b"/sample/-(VOL001)/IBMUSER.DATA(MEM1)"


def test_path_values_are_percent_encoded(zosmf):
    request = Sample(zosmf.session, none_parser, name="A B#C$@").get_request()
    assert request.url.raw_path == b"/sample/A%20B%23C$@"


def test_body_parameters_form_json_object(sample):
    request = sample.mode("rwxr-xr-x").get_request()

    assert request.headers["Content-Type"] == "application/json"
    assert json.loads(request.content) == {"mode": "rwxr-xr-x"}


def test_option_is_stored_but_not_sent(sample):
    request = sample.note("remember me").get_request()

    assert sample.note("remember me").get("note") == "remember me"
    assert request.url.query == b""
    assert request.content == b""


def test_request_carries_session_cookie_and_csrf_header(sample):
    request = sample.get_request()
    assert request.headers["Cookie"] == "LtpaToken2=ltpa-session-token"
    assert request.headers["X-CSRF-ZOSMF-HEADER"] == "true"


def test_get_request_does_not_send(server, sample):
    sample.owner("IBMUSER").get_request()
    assert server.requests == []
