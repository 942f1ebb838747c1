"""Tests for YobitRestClient with a mocked aiohttp session."""

import asyncio
import hashlib
import hmac
import json
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from src.adapters.yobit.rest import FORM_CONTENT_TYPE, YobitRestClient
from src.auth.nonce import FileNonceStore
from src.interfaces.exceptions import (
    InvalidArgumentError,
    MalformedResponseError,
    NonceExhaustedError,
    RemoteRejectedError,
)


def make_response(status=200, body=None, text=None):
    """Async context manager yielding a fake aiohttp response."""
    response = MagicMock()
    response.status = status
    response.text = AsyncMock(return_value=text if text is not None else json.dumps(body))
    cm = MagicMock()
    cm.__aenter__ = AsyncMock(return_value=response)
    cm.__aexit__ = AsyncMock(return_value=False)
    return cm


@pytest.fixture
def nonce_store():
    store = MagicMock()
    store.next = AsyncMock(return_value=5)
    store.close = AsyncMock()
    return store


@pytest.fixture
def session():
    s = MagicMock()
    s.closed = False
    s.close = AsyncMock()
    return s


def make_client(session, nonce_store=None, credentials=None):
    client = YobitRestClient(
        public_url="https://yobit.net/api/3/",
        private_url="https://yobit.net/tapi",
        nonce_store=nonce_store,
        credentials=credentials,
    )
    client._ensure_session = AsyncMock(return_value=session)
    return client


class TestPublic:
    @pytest.mark.asyncio
    async def test_get_public(self, session):
        session.request = MagicMock(return_value=make_response(body={"pairs": {}}))
        client = make_client(session)

        assert await client.get_public("/info") == {"pairs": {}}
        session.request.assert_called_once_with(
            "GET", "https://yobit.net/api/3/info", params=None, data=None, headers=None
        )

    @pytest.mark.asyncio
    async def test_http_error(self, session):
        session.request = MagicMock(return_value=make_response(status=503, text="down"))
        client = make_client(session)

        with pytest.raises(RemoteRejectedError) as exc_info:
            await client.get_public("/info")
        assert exc_info.value.status == 503
        assert exc_info.value.raw_error == "down"

    @pytest.mark.asyncio
    async def test_error_payload(self, session):
        session.request = MagicMock(
            return_value=make_response(body={"success": 0, "error": "Invalid pair name: xx_yy"})
        )
        client = make_client(session)

        with pytest.raises(RemoteRejectedError) as exc_info:
            await client.get_public("/ticker/xx_yy")
        assert exc_info.value.status is None
        assert "Invalid pair name" in exc_info.value.raw_error
        assert exc_info.value.operation == "/ticker/xx_yy"

    @pytest.mark.asyncio
    async def test_invalid_json(self, session):
        session.request = MagicMock(return_value=make_response(text="<html>"))
        client = make_client(session)

        with pytest.raises(MalformedResponseError):
            await client.get_public("/info")

    @pytest.mark.asyncio
    async def test_client_error(self, session):
        session.request = MagicMock(side_effect=aiohttp.ClientError("reset"))
        client = make_client(session)

        with pytest.raises(ConnectionError):
            await client.get_public("/info")

    @pytest.mark.asyncio
    async def test_timeout(self, session):
        session.request = MagicMock(side_effect=asyncio.TimeoutError())
        client = make_client(session)

        with pytest.raises(ConnectionError, match="timeout"):
            await client.get_public("/info")


class TestPrivate:
    @pytest.mark.asyncio
    async def test_signed_post(self, session, nonce_store, credentials):
        session.request = MagicMock(
            return_value=make_response(body={"success": 1, "return": {"funds": {"ltc": 1}}})
        )
        client = make_client(session, nonce_store, credentials)

        result = await client.post_private("getInfo")

        assert result == {"funds": {"ltc": 1}}
        method, url = session.request.call_args.args
        kwargs = session.request.call_args.kwargs
        assert (method, url) == ("POST", "https://yobit.net/tapi")
        assert kwargs["data"] == b"nonce=5&method=getInfo"
        assert kwargs["headers"]["Content-Type"] == FORM_CONTENT_TYPE
        assert kwargs["headers"]["Key"] == "test-public-key"
        assert kwargs["headers"]["Sign"] == hmac.new(
            b"test-private-key", b"nonce=5&method=getInfo", hashlib.sha512
        ).hexdigest()

    @pytest.mark.asyncio
    async def test_params_order_and_none_dropped(self, session, nonce_store, credentials):
        session.request = MagicMock(return_value=make_response(body={"success": 1, "return": {}}))
        client = make_client(session, nonce_store, credentials)

        await client.post_private("TradeHistory", {"pair": "ltc_btc", "since": None, "count": 10})
        assert session.request.call_args.kwargs["data"] == (
            b"nonce=5&method=TradeHistory&pair=ltc_btc&count=10"
        )

    @pytest.mark.asyncio
    async def test_missing_return_is_empty(self, session, nonce_store, credentials):
        session.request = MagicMock(return_value=make_response(body={"success": 1}))
        client = make_client(session, nonce_store, credentials)
        assert await client.post_private("CancelOrder", {"order_id": 1}) == {}

    @pytest.mark.asyncio
    async def test_rejected_private_call(self, session, nonce_store, credentials):
        session.request = MagicMock(
            return_value=make_response(body={"success": 0, "error": "invalid nonce"})
        )
        client = make_client(session, nonce_store, credentials)

        with pytest.raises(RemoteRejectedError) as exc_info:
            await client.post_private("getInfo")
        assert exc_info.value.operation == "getInfo"
        assert exc_info.value.raw_error == "invalid nonce"

    @pytest.mark.asyncio
    async def test_without_credentials(self, session, nonce_store):
        session.request = MagicMock()
        client = make_client(session, nonce_store, credentials=None)

        with pytest.raises(InvalidArgumentError):
            await client.post_private("getInfo")
        nonce_store.next.assert_not_awaited()
        session.request.assert_not_called()

    @pytest.mark.asyncio
    async def test_nonce_exhausted_sends_nothing(self, session, nonce_store, credentials):
        nonce_store.next.side_effect = NonceExhaustedError("exhausted")
        session.request = MagicMock()
        client = make_client(session, nonce_store, credentials)

        with pytest.raises(NonceExhaustedError):
            await client.post_private("getInfo")
        session.request.assert_not_called()

    @pytest.mark.asyncio
    async def test_concurrent_calls_send_in_nonce_order(self, session, credentials, tmp_path):
        sent = []

        def request(method, url, params=None, data=None, headers=None):
            sent.append(data)
            response = MagicMock()
            response.status = 200

            async def text():
                await asyncio.sleep(0)
                return '{"success": 1, "return": {}}'

            response.text = text
            cm = MagicMock()
            cm.__aenter__ = AsyncMock(return_value=response)
            cm.__aexit__ = AsyncMock(return_value=False)
            return cm

        session.request = MagicMock(side_effect=request)
        client = make_client(session, FileNonceStore(tmp_path, "test-public-key"), credentials)

        await asyncio.gather(*(client.post_private("getInfo") for _ in range(5)))

        nonces = [int(body.split(b"&")[0].split(b"=")[1]) for body in sent]
        assert nonces == [1, 2, 3, 4, 5]


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_close(self, session, nonce_store, credentials):
        client = make_client(session, nonce_store, credentials)
        client._session = session
        await client.close()
        session.close.assert_awaited_once()
        nonce_store.close.assert_awaited_once()

    def test_repr_hides_credentials(self, nonce_store, credentials):
        client = YobitRestClient(
            public_url="https://yobit.net/api/3",
            private_url="https://yobit.net/tapi",
            nonce_store=nonce_store,
            credentials=credentials,
        )
        assert "test-private-key" not in repr(client)
        assert "authenticated=True" in repr(client)
