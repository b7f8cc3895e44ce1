"""
Tests for free-text input
ibc/<hash>, pool/<id>, bare pool IDs and ignored text
"""

import httpx
import pytest
from unittest.mock import AsyncMock, patch

from conftest import make_message_update
from handlers.text_input import receive_text
from handlers.menu import NO_CHAIN_TEXT
from states import PendingInput

USER_ID = 123456

INCENTIVES = {
    "data": [
        {
            "start_time": "2023-05-01T17:00:00Z",
            "num_epochs_paid_over": 14,
            "filled_epochs": 3,
            "coins": [{"denom": "uosmo", "amount": "1000000"}]
        }
    ]
}


class TestPoolQuery:

    @pytest.mark.asyncio
    @patch('handlers.text_input.api')
    async def test_pool_query_fetches_incentives(self, mock_api, storage, registry, mock_context):
        storage.select_chain(USER_ID, "osmosis")
        pending_during_fetch = []

        async def fetch(pool_id):
            pending_during_fetch.append(storage.get(USER_ID).pending_input)
            return INCENTIVES

        mock_api.get_pool_incentives = AsyncMock(side_effect=fetch)
        update = make_message_update("pool/7")

        await receive_text(update, mock_context)

        mock_api.get_pool_incentives.assert_called_once_with("7")
        assert pending_during_fetch == [PendingInput.AWAITING_POOL_ID]
        assert storage.get(USER_ID).pending_input == PendingInput.NONE
        reply = update.message.reply_text.call_args.args[0]
        assert "Duration: 14 days" in reply
        assert "Coin: uosmo, Amount: 1000000" in reply

    @pytest.mark.asyncio
    @patch('handlers.text_input.api')
    async def test_bare_id_after_prompt(self, mock_api, storage, registry, mock_context):
        storage.select_chain(USER_ID, "osmosis")
        storage.await_pool_id(USER_ID)
        mock_api.get_pool_incentives = AsyncMock(return_value=INCENTIVES)

        await receive_text(make_message_update(" 42 "), mock_context)

        mock_api.get_pool_incentives.assert_called_once_with("42")
        assert storage.get(USER_ID).pending_input == PendingInput.NONE

    @pytest.mark.asyncio
    @patch('handlers.text_input.api')
    async def test_pool_query_without_chain(self, mock_api, storage, registry, mock_context):
        mock_api.get_pool_incentives = AsyncMock(return_value=INCENTIVES)

        await receive_text(make_message_update("pool/7"), mock_context)

        mock_api.get_pool_incentives.assert_called_once_with("7")
        assert storage.get(USER_ID) is None

    @pytest.mark.asyncio
    @patch('handlers.text_input.api')
    async def test_pool_fetch_error(self, mock_api, storage, registry, mock_context):
        storage.select_chain(USER_ID, "osmosis")
        mock_api.get_pool_incentives = AsyncMock(side_effect=httpx.ConnectError("refused"))
        update = make_message_update("pool/7")

        await receive_text(update, mock_context)

        update.message.reply_text.assert_called_once_with("Error fetching pool incentives data. Please try again.")
        assert storage.get(USER_ID).pending_input == PendingInput.NONE

    @pytest.mark.asyncio
    @patch('handlers.text_input.api')
    async def test_pool_malformed_response(self, mock_api, storage, registry, mock_context):
        mock_api.get_pool_incentives = AsyncMock(side_effect=ValueError("No valid JSON found in response"))
        update = make_message_update("pool/7")

        await receive_text(update, mock_context)

        update.message.reply_text.assert_called_once_with("Error processing pool incentives data. Please try again.")

    @pytest.mark.asyncio
    @patch('handlers.text_input.api')
    async def test_empty_pool_id(self, mock_api, storage, registry, mock_context):
        mock_api.get_pool_incentives = AsyncMock()
        update = make_message_update("pool/")

        await receive_text(update, mock_context)

        mock_api.get_pool_incentives.assert_not_called()
        update.message.reply_text.assert_called_once()

    @pytest.mark.asyncio
    @patch('handlers.text_input.api')
    async def test_non_numeric_pool_id_rejected(self, mock_api, storage, registry, mock_context):
        mock_api.get_pool_incentives = AsyncMock()
        update = make_message_update("pool/../x")

        await receive_text(update, mock_context)

        mock_api.get_pool_incentives.assert_not_called()
        update.message.reply_text.assert_called_once_with("Enter a numeric pool id, e.g. pool/1")

    @pytest.mark.asyncio
    @patch('handlers.text_input.api')
    async def test_edited_message_answered(self, mock_api, storage, registry, mock_context):
        storage.select_chain(USER_ID, "osmosis")
        mock_api.get_pool_incentives = AsyncMock(return_value=INCENTIVES)
        update = make_message_update("pool/7", edited=True)

        await receive_text(update, mock_context)

        mock_api.get_pool_incentives.assert_called_once_with("7")
        assert "Duration: 14 days" in update.edited_message.reply_text.call_args.args[0]


class TestIbcQuery:

    @pytest.mark.asyncio
    @patch('handlers.text_input.api')
    async def test_ibc_query_uses_rest_address(self, mock_api, storage, registry, mock_context):
        storage.select_chain(USER_ID, "osmosis")
        mock_api.get_denom_trace = AsyncMock(return_value={"path": "transfer/channel-0", "base_denom": "uatom"})
        update = make_message_update("ibc/ABC123")

        await receive_text(update, mock_context)

        mock_api.get_denom_trace.assert_called_once_with("https://lcd.osmosis.zone/", "ABC123")
        assert '"base_denom": "uatom"' in update.message.reply_text.call_args.args[0]

    @pytest.mark.asyncio
    @patch('handlers.text_input.api')
    async def test_ibc_query_without_chain(self, mock_api, storage, registry, mock_context):
        mock_api.get_denom_trace = AsyncMock()
        update = make_message_update("ibc/ABC123")

        await receive_text(update, mock_context)

        update.message.reply_text.assert_called_once_with(NO_CHAIN_TEXT)
        mock_api.get_denom_trace.assert_not_called()

    @pytest.mark.asyncio
    @patch('handlers.text_input.api')
    async def test_ibc_query_without_rest_address(self, mock_api, storage, registry, mock_context):
        storage.select_chain(USER_ID, "juno")
        mock_api.get_denom_trace = AsyncMock()
        update = make_message_update("ibc/ABC123")

        await receive_text(update, mock_context)

        update.message.reply_text.assert_called_once_with("Error: REST address not found for the selected chain.")
        mock_api.get_denom_trace.assert_not_called()

    @pytest.mark.asyncio
    @patch('handlers.text_input.api')
    async def test_ibc_query_service_error(self, mock_api, storage, registry, mock_context):
        storage.select_chain(USER_ID, "osmosis")
        request = httpx.Request("GET", "https://lcd.osmosis.zone/ibc/apps/transfer/v1/denom_traces/ABC")
        mock_api.get_denom_trace = AsyncMock(side_effect=httpx.HTTPStatusError(
            "not found", request=request, response=httpx.Response(404, request=request)
        ))
        update = make_message_update("ibc/ABC")

        await receive_text(update, mock_context)

        update.message.reply_text.assert_called_once_with("Error fetching IBC denom trace. Please try again.")

    @pytest.mark.asyncio
    @patch('handlers.text_input.api')
    async def test_non_hex_hash_rejected(self, mock_api, storage, registry, mock_context):
        storage.select_chain(USER_ID, "osmosis")
        mock_api.get_denom_trace = AsyncMock()
        update = make_message_update("ibc/../../cosmos/bank")

        await receive_text(update, mock_context)

        mock_api.get_denom_trace.assert_not_called()
        update.message.reply_text.assert_called_once_with("Invalid IBC denom hash. Send it as ibc/<hex hash>.")


class TestOtherText:

    @pytest.mark.asyncio
    @patch('handlers.text_input.api')
    async def test_unrecognized_text_ignored(self, mock_api, storage, registry, mock_context):
        storage.select_chain(USER_ID, "osmosis")
        storage.await_pool_id(USER_ID)
        before = storage.get(USER_ID)
        update = make_message_update("foo/7")

        await receive_text(update, mock_context)

        update.message.reply_text.assert_not_called()
        update.effective_chat.send_message.assert_not_called()
        assert storage.get(USER_ID) == before

    @pytest.mark.asyncio
    async def test_start_text_shows_chain_list(self, storage, registry, mock_context):
        storage.select_chain(USER_ID, "osmosis")
        update = make_message_update("/start")

        await receive_text(update, mock_context)

        assert update.message.reply_text.call_args.args[0] == "Select a chain:"
        assert storage.get(USER_ID).selected_chain is None

    @pytest.mark.asyncio
    async def test_edited_start_shows_chain_list(self, storage, registry, mock_context):
        update = make_message_update("/start", edited=True)

        await receive_text(update, mock_context)

        assert update.edited_message.reply_text.call_args.args[0] == "Select a chain:"
