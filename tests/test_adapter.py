"""Tests for YobitAdapter with a mocked REST client."""

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from pydantic import SecretStr

from src.adapters.yobit.adapter import YobitAdapter
from src.auth.nonce import FileNonceStore, RedisNonceStore
from src.config.models import AppConfig, CredentialsConfig, NonceBackend, NonceStorageConfig
from src.interfaces.exceptions import InvalidArgumentError, MalformedResponseError, NotSupportedError
from src.models.funding import WithdrawalRequest
from src.models.order import OrderRequest, OrderResult


def trade(tid, ts, trade_type="bid"):
    return {"type": trade_type, "price": 1, "amount": 1, "tid": tid, "timestamp": ts}


class TestMarketData:
    def test_name(self, adapter):
        assert adapter.exchange_name == "yobit"

    @pytest.mark.asyncio
    async def test_get_symbols(self, adapter, mock_rest, info_response):
        mock_rest.get_public.return_value = info_response
        assert await adapter.get_symbols() == ["ltc_btc", "nvc_btc"]
        mock_rest.get_public.assert_awaited_once_with("/info")

    @pytest.mark.asyncio
    async def test_get_markets(self, adapter, mock_rest, info_response):
        mock_rest.get_public.return_value = info_response
        markets = await adapter.get_markets()
        assert [m.is_active for m in markets] == [True, False]

    @pytest.mark.asyncio
    async def test_get_ticker(self, adapter, mock_rest, ticker_payload):
        mock_rest.get_public.return_value = {"ltc_btc": ticker_payload}
        ticker = await adapter.get_ticker("LTC-BTC")
        assert ticker.bid == Decimal("104.2")
        mock_rest.get_public.assert_awaited_once_with("/ticker/ltc_btc")

    @pytest.mark.asyncio
    async def test_get_ticker_empty_response(self, adapter, mock_rest):
        mock_rest.get_public.return_value = {}
        assert await adapter.get_ticker("ltc_btc") is None

    @pytest.mark.asyncio
    async def test_get_tickers_one_call_per_symbol(
        self, adapter, mock_rest, info_response, ticker_payload
    ):
        mock_rest.get_public.side_effect = [
            info_response,
            {"ltc_btc": ticker_payload},
            {},
        ]
        tickers = await adapter.get_tickers()
        assert [symbol for symbol, _ in tickers] == ["ltc_btc"]
        assert mock_rest.get_public.await_count == 3

    @pytest.mark.asyncio
    async def test_get_order_book_limit(self, adapter, mock_rest):
        mock_rest.get_public.return_value = {"ltc_btc": {"asks": [[2, 1]], "bids": [[1, 1]]}}
        book = await adapter.get_order_book("ltc_btc", max_count=5)
        assert book.best_ask == Decimal("2")
        mock_rest.get_public.assert_awaited_once_with("/depth/ltc_btc", params={"limit": 5})

    @pytest.mark.asyncio
    async def test_get_recent_trades_limit(self, adapter, mock_rest):
        mock_rest.get_public.return_value = {"ltc_btc": [trade(1, 1418654531, "ask")]}
        trades = await adapter.get_recent_trades("ltc_btc")
        assert trades[0].is_buy is True
        mock_rest.get_public.assert_awaited_once_with("/trades/ltc_btc", params={"limit": 10})

    @pytest.mark.asyncio
    async def test_historical_trades_filters_start_date(self, adapter, mock_rest):
        mock_rest.get_public.return_value = {
            "ltc_btc": [trade(3, 1418654600), trade(2, 1418654500), trade(1, 1418654400)]
        }
        received = []
        start = datetime.fromtimestamp(1418654500, tz=timezone.utc)
        end = datetime.fromtimestamp(1418654550, tz=timezone.utc)

        await adapter.get_historical_trades(received.append, "ltc_btc", start_date=start, end_date=end)

        assert len(received) == 1
        # end_date is accepted but not applied
        assert [t.id for t in received[0]] == [3, 2]
        mock_rest.get_public.assert_awaited_once_with("/trades/ltc_btc", params={"limit": 2000})

    @pytest.mark.asyncio
    async def test_historical_trades_naive_start_date_is_utc(self, adapter, mock_rest):
        mock_rest.get_public.return_value = {
            "ltc_btc": [trade(2, 1418654500), trade(1, 1418654400)]
        }
        received = []
        start = datetime(2014, 12, 15, 14, 41, 40)

        await adapter.get_historical_trades(received.append, "ltc_btc", start_date=start)

        assert [t.id for t in received[0]] == [2]

    @pytest.mark.asyncio
    async def test_historical_trades_async_callback(self, adapter, mock_rest):
        mock_rest.get_public.return_value = {"ltc_btc": [trade(1, 1418654400)]}
        callback = AsyncMock()
        await adapter.get_historical_trades(callback, "ltc_btc")
        callback.assert_awaited_once()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "call",
        [
            lambda a: a.get_candles("ltc_btc", 60),
            lambda a: a.get_currencies(),
            lambda a: a.get_deposit_history("BTC"),
        ],
    )
    async def test_not_supported(self, adapter, mock_rest, call):
        with pytest.raises(NotSupportedError):
            await call(adapter)
        mock_rest.get_public.assert_not_called()
        mock_rest.post_private.assert_not_called()


class TestAccount:
    @pytest.mark.asyncio
    async def test_balances(self, adapter, mock_rest):
        mock_rest.post_private.return_value = {
            "funds": {"ltc": 22, "btc": 0, "nvc": 423.998},
            "funds_incl_orders": {"ltc": 32, "btc": 1},
        }
        assert await adapter.get_balances() == {"ltc": Decimal("22"), "nvc": Decimal("423.998")}
        mock_rest.post_private.assert_awaited_once_with("getInfo")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("call", [lambda a: a.get_balances(), lambda a: a.get_tradable_balances()])
    async def test_balances_missing_funds_raises(self, adapter, mock_rest, call):
        mock_rest.post_private.return_value = {"rights": {"info": 1}}
        with pytest.raises(MalformedResponseError):
            await call(adapter)

    @pytest.mark.asyncio
    async def test_balances_empty_result_raises(self, adapter, mock_rest):
        mock_rest.post_private.return_value = {}
        with pytest.raises(MalformedResponseError):
            await adapter.get_balances()

    @pytest.mark.asyncio
    async def test_tradable_balances(self, adapter, mock_rest):
        mock_rest.post_private.return_value = {
            "funds": {"ltc": 22},
            "funds_incl_orders": {"ltc": 32, "btc": 1},
        }
        assert await adapter.get_tradable_balances() == {"ltc": Decimal("32"), "btc": Decimal("1")}

    @pytest.mark.asyncio
    async def test_place_order(self, adapter, mock_rest):
        mock_rest.post_private.return_value = {
            "order_id": 12345,
            "received": 0.1,
            "remains": 0,
            "funds": {"ltc": 1},
        }
        order = await adapter.place_order(
            OrderRequest(
                symbol="LTC_BTC",
                amount=Decimal("0.1"),
                price=Decimal("0.02"),
                is_buy=False,
                extra_parameters={"note": "x"},
            )
        )
        assert order.order_id == "12345"
        assert order.amount == Decimal("0.1")
        assert order.result == OrderResult.FILLED
        assert order.is_buy is False

        method, params = mock_rest.post_private.await_args.args
        assert method == "Trade"
        assert list(params) == ["pair", "type", "rate", "amount", "note"]
        assert params["pair"] == "ltc_btc"
        assert params["type"] == "sell"

    @pytest.mark.asyncio
    async def test_place_order_pending(self, adapter, mock_rest):
        mock_rest.post_private.return_value = {"order_id": 1, "received": 0, "remains": 2}
        order = await adapter.place_order(
            OrderRequest(symbol="ltc_btc", amount=Decimal("2"), price=Decimal("1"))
        )
        assert order.amount == Decimal("2")
        assert order.result == OrderResult.PENDING

    @pytest.mark.asyncio
    async def test_cancel_order(self, adapter, mock_rest):
        mock_rest.post_private.return_value = {"order_id": 100025362}
        assert await adapter.cancel_order("100025362") is None
        mock_rest.post_private.assert_awaited_once_with("CancelOrder", {"order_id": "100025362"})

    @pytest.mark.asyncio
    async def test_order_details(self, adapter, mock_rest):
        mock_rest.post_private.return_value = {
            "100025362": {
                "pair": "ltc_btc",
                "type": "buy",
                "start_amount": 5,
                "amount": 3,
                "rate": 1,
                "timestamp_created": 1418654530,
                "status": 0,
            }
        }
        order = await adapter.get_order_details("100025362")
        assert order.result == OrderResult.PARTIALLY_FILLED
        assert order.amount_filled == Decimal("2")
        mock_rest.post_private.assert_awaited_once_with("OrderInfo", {"order_id": "100025362"})

    @pytest.mark.asyncio
    async def test_open_orders_listed_once(self, adapter, mock_rest):
        raw = {
            "pair": "ltc_btc",
            "type": "sell",
            "start_amount": 1,
            "amount": 1,
            "rate": 1,
            "timestamp_created": 1418654530,
            "status": 0,
        }
        mock_rest.post_private.return_value = {"1": raw, "2": raw}
        orders = await adapter.get_open_orders("ltc_btc")
        assert [o.order_id for o in orders] == ["1", "2"]
        mock_rest.post_private.assert_awaited_once_with("ActiveOrders", {"pair": "ltc_btc"})

    @pytest.mark.asyncio
    async def test_open_orders_empty_return(self, adapter, mock_rest):
        mock_rest.post_private.return_value = {}
        assert await adapter.get_open_orders("ltc_btc") == []

    @pytest.mark.asyncio
    async def test_completed_orders_since(self, adapter, mock_rest):
        mock_rest.post_private.return_value = {
            "24523": {
                "pair": "ltc_btc",
                "type": "sell",
                "amount": 11.4,
                "rate": 0.145,
                "order_id": 100025362,
                "is_your_order": 1,
                "timestamp": 1418654530,
            }
        }
        after = datetime.fromtimestamp(1418654000, tz=timezone.utc)
        orders = await adapter.get_completed_orders("ltc_btc", after_date=after)

        assert orders[0].result == OrderResult.FILLED
        mock_rest.post_private.assert_awaited_once_with(
            "TradeHistory", {"pair": "ltc_btc", "since": 1418654000}
        )

    @pytest.mark.asyncio
    async def test_completed_orders_naive_since_is_utc(self, adapter, mock_rest):
        mock_rest.post_private.return_value = {}
        await adapter.get_completed_orders("ltc_btc", after_date=datetime(2014, 12, 15, 14, 33, 20))
        mock_rest.post_private.assert_awaited_once_with(
            "TradeHistory", {"pair": "ltc_btc", "since": 1418654000}
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("symbol", [None, ""])
    async def test_order_lists_require_symbol(self, adapter, mock_rest, symbol):
        with pytest.raises(InvalidArgumentError):
            await adapter.get_completed_orders(symbol)
        with pytest.raises(InvalidArgumentError):
            await adapter.get_open_orders(symbol)
        mock_rest.post_private.assert_not_called()


class TestFunding:
    @pytest.mark.asyncio
    async def test_deposit_address(self, adapter, mock_rest):
        mock_rest.post_private.return_value = {"address": "1abc", "processed_amount": 0}
        details = await adapter.get_deposit_address("BTC", force_regenerate=True)
        assert details.address == "1abc"
        assert details.symbol == "BTC"
        mock_rest.post_private.assert_awaited_once_with(
            "GetDepositAddress", {"coinName": "BTC", "need_new": 1}
        )

    @pytest.mark.asyncio
    async def test_withdraw_reports_success(self, adapter, mock_rest):
        mock_rest.post_private.return_value = {}
        response = await adapter.withdraw(
            WithdrawalRequest(symbol="BTC", amount=Decimal("0.5"), address="1abc")
        )
        assert response.success is True
        mock_rest.post_private.assert_awaited_once_with(
            "WithdrawCoinsToAddress",
            {"coinName": "BTC", "amount": Decimal("0.5"), "address": "1abc"},
        )


class TestFromConfig:
    def test_without_credentials(self):
        adapter = YobitAdapter.from_config(AppConfig())
        assert adapter._rest.has_credentials is False

    def test_file_backend(self, tmp_path):
        config = AppConfig(
            nonce=NonceStorageConfig(directory=tmp_path),
            credentials=CredentialsConfig(public_key=SecretStr("pub"), private_key=SecretStr("priv")),
        )
        adapter = YobitAdapter.from_config(config)
        assert adapter._rest.has_credentials is True
        assert isinstance(adapter._rest._nonce_store, FileNonceStore)

    def test_redis_backend(self):
        config = AppConfig(
            nonce=NonceStorageConfig(backend=NonceBackend.REDIS),
            credentials=CredentialsConfig(public_key=SecretStr("pub"), private_key=SecretStr("priv")),
        )
        adapter = YobitAdapter.from_config(config)
        assert isinstance(adapter._rest._nonce_store, RedisNonceStore)

    @pytest.mark.asyncio
    async def test_close(self, adapter, mock_rest):
        await adapter.close()
        mock_rest.close.assert_awaited_once()


def test_repr(mock_rest):
    assert repr(YobitAdapter(mock_rest)) == "YobitAdapter(exchange=yobit)"


