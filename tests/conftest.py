"""Shared fixtures for handler and registry tests"""

import json
import os
from unittest.mock import AsyncMock, Mock

import pytest

# config.settings is built at import time
os.environ.setdefault("TELEGRAM_BOT_TOKEN", "123456:test-token")

from config import settings
from models.session import SessionStorage
from registry.catalog import ChainCatalog


class FakeClock:
    """Manually advanced monotonic clock"""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def write_chain(root, name, chain=None, assetlist=None):
    """Create a chain directory with chain.json and assetlist.json"""
    chain_dir = root / name
    chain_dir.mkdir(parents=True)
    if chain is not None:
        (chain_dir / "chain.json").write_text(json.dumps(chain), encoding="utf-8")
    if assetlist is not None:
        (chain_dir / "assetlist.json").write_text(json.dumps(assetlist), encoding="utf-8")
    return chain_dir


OSMOSIS_CHAIN = {
    "chain_name": "osmosis",
    "chain_id": "osmosis-1",
    "bech32_prefix": "osmo",
    "slip44": 118,
    "staking": {"staking_tokens": [{"denom": "uosmo"}]},
    "apis": {
        "rpc": [{"address": "https://rpc.osmosis.zone", "provider": "Osmosis Foundation"}],
        "rest": [{"address": "https://lcd.osmosis.zone/", "provider": "Osmosis Foundation"}],
        "grpc": [{"address": "grpc.osmosis.zone:9090", "provider": "Osmosis Foundation"}]
    },
    "peers": {
        "seeds": [{"id": "abc123", "address": "seed.osmosis.zone:26656", "provider": "Polkachu.com"}],
        "persistent_peers": []
    },
    "explorers": [
        {"kind": "ping.pub", "url": "https://ping.pub/osmosis"},
        {"kind": "mintscan", "url": "https://www.mintscan.io/osmosis"}
    ]
}

OSMOSIS_ASSETS = {
    "assets": [
        {"denom_units": [{"denom": "uosmo", "exponent": 0}, {"denom": "osmo", "exponent": 6}]}
    ]
}


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def storage(clock, monkeypatch):
    """Fresh session storage wired into every handler module"""
    storage = SessionStorage(clock=clock)
    for module in ("handlers.common", "handlers.menu", "handlers.text_input"):
        monkeypatch.setattr(f"{module}.session_storage", storage)
    return storage


@pytest.fixture
def registry(tmp_path, monkeypatch):
    """Registry directory with osmosis and juno, used by the handlers"""
    write_chain(tmp_path, "osmosis", OSMOSIS_CHAIN, OSMOSIS_ASSETS)
    write_chain(tmp_path, "juno", {"chain_name": "juno", "chain_id": "juno-1"}, {"assets": []})

    catalog = ChainCatalog(tmp_path)
    monkeypatch.setattr(settings, "registry_dir", tmp_path)
    monkeypatch.setattr("handlers.common.catalog", catalog)
    monkeypatch.setattr("handlers.menu.catalog", catalog)
    return tmp_path


@pytest.fixture
def mock_context():
    """Mock telegram Context object"""
    context = Mock()
    context.bot.edit_message_text = AsyncMock()
    return context


def make_message_update(text, user_id=123456, chat_id=123456, edited=False):
    """Mock Update carrying a text message, or an edit of one"""
    update = Mock()
    update.effective_user.id = user_id
    update.effective_chat.id = chat_id
    update.effective_chat.send_message = AsyncMock()
    message = Mock()
    message.text = text
    message.reply_text = AsyncMock()
    if edited:
        update.message = None
        update.edited_message = message
    else:
        update.message = message
        update.edited_message = None
    update.effective_message = message
    return update


def make_callback_update(data, user_id=123456, chat_id=123456, message_id=10):
    """Mock Update carrying a callback query from an inline button"""
    update = Mock()
    update.effective_user.id = user_id
    update.effective_chat.id = chat_id
    update.effective_chat.send_message = AsyncMock(
        return_value=Mock(chat_id=chat_id, message_id=message_id + 100)
    )
    query = update.callback_query
    query.data = data
    query.answer = AsyncMock()
    query.edit_message_text = AsyncMock()
    query.edit_message_reply_markup = AsyncMock()
    query.message.chat_id = chat_id
    query.message.message_id = message_id
    return update
