"""Free-text messages: ibc/<hash>, pool/<id> and /start"""

import asyncio
import logging
import re
import httpx
from telegram import Update
from telegram.ext import ContextTypes

from api_client import api
from config import settings
from models import session_storage
from registry.formatters import format_denom_trace, format_pool_incentives, rest_address
from states import PendingInput, Start, IbcQuery, PoolQuery, parse_text_command
from .common import start
from .menu import NO_CHAIN_TEXT

logger = logging.getLogger(__name__)

POOL_ID_PATTERN = re.compile(r"[0-9]+")
IBC_HASH_PATTERN = re.compile(r"[A-Fa-f0-9]+")


async def receive_text(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Dispatch a text message by its prefix"""
    telegram_id = update.effective_user.id
    text = update.effective_message.text.strip()

    session = session_storage.get(telegram_id)
    pending = session.pending_input if session else PendingInput.NONE
    command = parse_text_command(text, pending)

    if isinstance(command, Start):
        await start(update, context)
    elif isinstance(command, IbcQuery):
        await handle_ibc_query(update, command.ibc_hash)
    elif isinstance(command, PoolQuery):
        await handle_pool_query(update, command.pool_id)
    else:
        logger.info(f"Received text from user {telegram_id}: {text}")


async def handle_ibc_query(update: Update, ibc_hash: str):
    """Look up an IBC denom trace on the selected chain"""
    telegram_id = update.effective_user.id
    session = session_storage.get(telegram_id)

    if not session or not session.selected_chain:
        await update.effective_message.reply_text(NO_CHAIN_TEXT)
        return

    if not IBC_HASH_PATTERN.fullmatch(ibc_hash):
        await update.effective_message.reply_text("Invalid IBC denom hash. Send it as ibc/<hex hash>.")
        return

    session_storage.touch(telegram_id)

    address = await asyncio.to_thread(rest_address, settings.registry_dir, session.selected_chain)
    if not address:
        await update.effective_message.reply_text("Error: REST address not found for the selected chain.")
        return

    try:
        denom_trace = await api.get_denom_trace(address, ibc_hash)
    except (httpx.HTTPError, ValueError, KeyError) as e:
        logger.error(f"Error fetching IBC denom trace {ibc_hash} on {session.selected_chain}: {e}")
        await update.effective_message.reply_text("Error fetching IBC denom trace. Please try again.")
        return

    await update.effective_message.reply_text(format_denom_trace(denom_trace))


async def handle_pool_query(update: Update, pool_id: str):
    """Fetch and show incentives for a pool"""
    telegram_id = update.effective_user.id

    if not POOL_ID_PATTERN.fullmatch(pool_id):
        await update.effective_message.reply_text("Enter a numeric pool id, e.g. pool/1")
        return

    # Held while the fetch is in flight, cleared whatever the outcome
    session_storage.await_pool_id(telegram_id)
    try:
        data = await api.get_pool_incentives(pool_id)
        reply = format_pool_incentives(data)
    except httpx.HTTPError as e:
        logger.error(f"Error fetching pool incentives for pool {pool_id}: {e}")
        reply = "Error fetching pool incentives data. Please try again."
    except (ValueError, KeyError, TypeError) as e:
        logger.error(f"Error processing pool incentives for pool {pool_id}: {e}")
        reply = "Error processing pool incentives data. Please try again."
    finally:
        session_storage.clear_pending_input(telegram_id)

    await update.effective_message.reply_text(reply)
