# Tests for auth/tokens.py - code-for-token exchange.
# Created: 2026-10-12

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from nbngcli.auth.errors import ExchangeFailure
from nbngcli.auth.request import ClientCredential
from nbngcli.auth.tokens import GoogleTokenExchanger, TokenGrant

CREDENTIAL = ClientCredential(client_id="cid", client_secret="secret")
TOKEN_URL = "https://oauth2.googleapis.com/token"


def _mock_client(json_data=None, raise_for_status=None, post_error=None):
    mock_client = AsyncMock()
    mock_resp = MagicMock()
    mock_resp.json.return_value = json_data
    mock_resp.raise_for_status = MagicMock(side_effect=raise_for_status)
    if post_error is not None:
        mock_client.post = AsyncMock(side_effect=post_error)
    else:
        mock_client.post = AsyncMock(return_value=mock_resp)
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)
    return mock_client


class TestTokenGrant:
    def test_defaults(self):
        grant = TokenGrant(access_token="a")
        assert grant.refresh_token is None
        assert grant.token_type == "Bearer"
        assert grant.scopes == []


class TestGoogleTokenExchanger:
    async def test_successful_exchange(self):
        mock_client = _mock_client(
            {
                "access_token": "ya29.access",
                "refresh_token": "1//refresh",
                "expires_in": 3599,
                "token_type": "Bearer",
                "scope": "https://mail.google.com/ https://www.googleapis.com/auth/drive",
            }
        )
        with patch("httpx.AsyncClient", return_value=mock_client):
            grant = await GoogleTokenExchanger().exchange(
                "4/code", "http://localhost:5555", CREDENTIAL
            )

        assert grant.access_token == "ya29.access"
        assert grant.refresh_token == "1//refresh"
        assert grant.expires_at is not None
        assert grant.scopes == [
            "https://mail.google.com/",
            "https://www.googleapis.com/auth/drive",
        ]

        args, kwargs = mock_client.post.call_args
        assert args[0] == TOKEN_URL
        assert kwargs["data"] == {
            "code": "4/code",
            "client_id": "cid",
            "client_secret": "secret",
            "redirect_uri": "http://localhost:5555",
            "grant_type": "authorization_code",
        }

    async def test_refresh_token_withheld(self):
        mock_client = _mock_client({"access_token": "ya29.access", "expires_in": 3600})
        with patch("httpx.AsyncClient", return_value=mock_client):
            grant = await GoogleTokenExchanger().exchange("code", "http://localhost:1", CREDENTIAL)
        assert grant.refresh_token is None

    async def test_http_error_status(self):
        request = httpx.Request("POST", TOKEN_URL)
        response = httpx.Response(
            400,
            json={"error": "invalid_grant", "error_description": "Bad Request"},
            request=request,
        )
        error = httpx.HTTPStatusError("400 Bad Request", request=request, response=response)
        mock_client = _mock_client(raise_for_status=error)

        with patch("httpx.AsyncClient", return_value=mock_client):
            with pytest.raises(ExchangeFailure, match="invalid_grant: Bad Request"):
                await GoogleTokenExchanger().exchange("code", "http://localhost:1", CREDENTIAL)

    async def test_network_error(self):
        mock_client = _mock_client(post_error=httpx.ConnectError("connection refused"))

        with patch("httpx.AsyncClient", return_value=mock_client):
            with pytest.raises(ExchangeFailure, match="connection refused"):
                await GoogleTokenExchanger().exchange("code", "http://localhost:1", CREDENTIAL)

    async def test_missing_access_token(self):
        mock_client = _mock_client({"error": "weird"})

        with patch("httpx.AsyncClient", return_value=mock_client):
            with pytest.raises(ExchangeFailure, match="access token"):
                await GoogleTokenExchanger().exchange("code", "http://localhost:1", CREDENTIAL)

    async def test_invalid_json(self):
        mock_client = _mock_client()
        mock_client.post.return_value.json.side_effect = ValueError("Expecting value")

        with patch("httpx.AsyncClient", return_value=mock_client):
            with pytest.raises(ExchangeFailure, match="invalid response body"):
                await GoogleTokenExchanger().exchange("code", "http://localhost:1", CREDENTIAL)

    async def test_custom_token_url(self):
        mock_client = _mock_client({"access_token": "a", "refresh_token": "r"})
        with patch("httpx.AsyncClient", return_value=mock_client) as client_cls:
            await GoogleTokenExchanger("https://idp.test/token", timeout=3).exchange(
                "code", "http://localhost:1", CREDENTIAL
            )
        client_cls.assert_called_once_with(timeout=3)
        assert mock_client.post.call_args.args[0] == "https://idp.test/token"
