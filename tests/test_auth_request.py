# Tests for auth/request.py and auth/scopes.py
# Created: 2026-10-12

import urllib.parse

import pytest

from nbngcli.auth.request import (
    AuthorizationRequest,
    CallbackParams,
    ClientCredential,
    build_authorization_url,
    parse_redirect,
)
from nbngcli.auth.scopes import AUTHORIZATION_TIMEOUT, MANUAL_REDIRECT_URI, SCOPES

CREDENTIAL = ClientCredential(client_id="test-client-id", client_secret="shh")


def _query(url: str) -> dict[str, list[str]]:
    return urllib.parse.parse_qs(urllib.parse.urlsplit(url).query)


# ---------------------------------------------------------------------------
# Scope configuration
# ---------------------------------------------------------------------------


class TestScopes:
    def test_fixed_scope_order(self):
        assert SCOPES == (
            "https://mail.google.com/",
            "https://www.googleapis.com/auth/calendar",
            "https://www.googleapis.com/auth/drive",
        )

    def test_timeout_is_two_minutes(self):
        assert AUTHORIZATION_TIMEOUT == 120


# ---------------------------------------------------------------------------
# AuthorizationRequest
# ---------------------------------------------------------------------------


class TestAuthorizationRequest:
    def test_loopback_redirect_uri(self):
        request = AuthorizationRequest.for_loopback(CREDENTIAL, 54321)
        assert request.redirect_uri == "http://localhost:54321"
        assert request.client_id == "test-client-id"
        assert request.scopes == SCOPES

    def test_manual_redirect_uri(self):
        request = AuthorizationRequest.for_manual(CREDENTIAL)
        assert request.redirect_uri == MANUAL_REDIRECT_URI

    def test_immutable(self):
        request = AuthorizationRequest.for_manual(CREDENTIAL)
        with pytest.raises(AttributeError):
            request.redirect_uri = "http://elsewhere"

    def test_each_mode_builds_a_new_value(self):
        a = AuthorizationRequest.for_loopback(CREDENTIAL, 1111)
        b = AuthorizationRequest.for_loopback(CREDENTIAL, 2222)
        assert a is not b
        assert a.scopes == b.scopes

    def test_credential_repr_hides_secret(self):
        assert "shh" not in repr(CREDENTIAL)


# ---------------------------------------------------------------------------
# build_authorization_url
# ---------------------------------------------------------------------------


class TestBuildAuthorizationUrl:
    def test_query_parameters(self):
        url = build_authorization_url(AuthorizationRequest.for_loopback(CREDENTIAL, 8765))
        assert url.startswith("https://accounts.google.com/o/oauth2/v2/auth?")

        query = _query(url)
        assert query["client_id"] == ["test-client-id"]
        assert query["redirect_uri"] == ["http://localhost:8765"]
        assert query["response_type"] == ["code"]
        assert query["scope"] == [" ".join(SCOPES)]
        assert query["access_type"] == ["offline"]
        assert query["prompt"] == ["consent"]

    def test_parameter_order(self):
        url = build_authorization_url(AuthorizationRequest.for_manual(CREDENTIAL))
        keys = [pair.split("=", 1)[0] for pair in urllib.parse.urlsplit(url).query.split("&")]
        assert keys == [
            "client_id",
            "redirect_uri",
            "response_type",
            "scope",
            "access_type",
            "prompt",
        ]

    def test_percent_encoding(self):
        url = build_authorization_url(AuthorizationRequest.for_manual(CREDENTIAL))
        raw_query = urllib.parse.urlsplit(url).query
        assert "redirect_uri=http%3A%2F%2Flocalhost%3A1" in raw_query
        assert "scope=https%3A%2F%2Fmail.google.com%2F%20https%3A%2F%2Fwww.googleapis.com" in (
            raw_query
        )
        assert "+" not in raw_query

    def test_custom_auth_url(self):
        url = build_authorization_url(
            AuthorizationRequest.for_manual(CREDENTIAL), auth_url="https://idp.test/auth"
        )
        assert url.startswith("https://idp.test/auth?client_id=")


# ---------------------------------------------------------------------------
# parse_redirect
# ---------------------------------------------------------------------------


class TestParseRedirect:
    def test_full_url_with_code(self):
        params = parse_redirect("http://localhost:1/?code=4/0Abc-xyz&scope=https://mail.google.com/")
        assert params == CallbackParams(code="4/0Abc-xyz")
        assert params.is_terminal

    def test_request_target(self):
        assert parse_redirect("/?code=abc").code == "abc"

    def test_error(self):
        params = parse_redirect("http://localhost:1/?error=access_denied")
        assert params.error == "access_denied"
        assert params.code is None
        assert params.is_terminal

    def test_surrounding_whitespace(self):
        assert parse_redirect("  http://localhost:1/?code=abc \n").code == "abc"

    def test_no_code(self):
        params = parse_redirect("http://localhost:1/?scope=email")
        assert params == CallbackParams()
        assert not params.is_terminal

    def test_empty_input(self):
        assert parse_redirect("") == CallbackParams()

    def test_blank_code_is_kept(self):
        params = parse_redirect("/?code=")
        assert params.code == ""
        assert params.is_terminal
