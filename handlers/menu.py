"""Chain selection, paging and chain detail handlers"""

import asyncio
import logging
from typing import Callable, Optional
from telegram import InlineKeyboardMarkup, LinkPreviewOptions, Update
from telegram.error import BadRequest
from telegram.ext import ContextTypes

from config import settings
from models import MessageTarget, session_storage
from keyboards import build_chain_rows, count_pages, get_action_menu_keyboard
from registry.formatters import chain_info, chain_endpoints, chain_peer_nodes, chain_block_explorers
from .common import catalog

logger = logging.getLogger(__name__)

ACTION_MENU_TEXT = "Select an action:"
NO_CHAIN_TEXT = "No chain selected. Please select a chain first."
NO_PREVIEW = LinkPreviewOptions(is_disabled=True)


def is_message_gone(error: BadRequest) -> bool:
    return "message to edit not found" in error.message.lower()


def is_not_modified(error: BadRequest) -> bool:
    return "message is not modified" in error.message.lower()


async def _send_tracked(update: Update, text: str, parse_mode: Optional[str] = None):
    """Send a new menu message and make it the one to edit from now on"""
    sent = await update.effective_chat.send_message(
        text,
        parse_mode=parse_mode,
        reply_markup=get_action_menu_keyboard(),
        link_preview_options=NO_PREVIEW
    )
    session_storage.track_message(
        update.effective_user.id,
        MessageTarget(sent.chat_id, sent.message_id),
        text
    )


async def _show_in_tracked_message(
    update: Update,
    context: ContextTypes.DEFAULT_TYPE,
    text: str,
    parse_mode: Optional[str] = None
):
    """Edit the tracked message to show text, or send a new one if there is none"""
    telegram_id = update.effective_user.id
    session = session_storage.get(telegram_id)

    if session and session.target:
        target = session.target
        try:
            await context.bot.edit_message_text(
                text=text,
                chat_id=target.chat_id,
                message_id=target.message_id,
                parse_mode=parse_mode,
                reply_markup=get_action_menu_keyboard(),
                link_preview_options=NO_PREVIEW
            )
            session_storage.track_message(telegram_id, target, text)
            return
        except BadRequest as e:
            if is_not_modified(e):
                logger.info(f"Message {target.message_id} already shows this content")
                session_storage.track_message(telegram_id, target, text)
                return
            if not is_message_gone(e):
                raise
            logger.warning(f"Tracked message {target.message_id} is gone, sending a new one")

    await _send_tracked(update, text, parse_mode)


async def _selected_chain(update: Update) -> Optional[str]:
    """Chain in focus for the user, or a notice when there is none"""
    session = session_storage.get(update.effective_user.id)
    if session and session.selected_chain:
        return session.selected_chain

    await update.effective_chat.send_message(NO_CHAIN_TEXT)
    return None


async def select_chain_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle a chain button press"""
    query = update.callback_query
    await query.answer()

    telegram_id = update.effective_user.id
    chain = query.data.split(":", 1)[1]
    target = MessageTarget(query.message.chat_id, query.message.message_id)

    session_storage.select_chain(telegram_id, chain, target)
    logger.info(f"User {telegram_id} selected {chain}")

    try:
        await query.edit_message_text(ACTION_MENU_TEXT, reply_markup=get_action_menu_keyboard())
        session_storage.track_message(telegram_id, target, ACTION_MENU_TEXT)
    except BadRequest as e:
        if not is_message_gone(e):
            raise
        logger.warning(f"Menu message {target.message_id} is gone, sending a new one")
        await _send_tracked(update, ACTION_MENU_TEXT)


async def change_page_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle Previous/Next on the chain list"""
    query = update.callback_query
    await query.answer()

    telegram_id = update.effective_user.id
    page = int(query.data.split(":", 1)[1])

    chains = await asyncio.to_thread(catalog.list)
    if not chains:
        logger.warning("No chains available")
        await update.effective_chat.send_message("No chains available.")
        return

    if page < 0 or page >= count_pages(len(chains), settings.page_size):
        logger.info(f"Invalid page number {page} from user {telegram_id}")
        await update.effective_chat.send_message("Invalid page number.")
        return

    session = session_storage.get(telegram_id)
    highlighted = session.selected_chain if session else None
    rows = build_chain_rows(chains, page, settings.page_size, highlighted)
    if not rows:
        logger.error(f"No buttons generated for page {page}")
        await update.effective_chat.send_message("Unable to generate navigation buttons.")
        return

    try:
        await query.edit_message_reply_markup(reply_markup=InlineKeyboardMarkup(rows))
    except BadRequest as e:
        if not is_not_modified(e):
            raise
    session_storage.touch(telegram_id)


async def _show_chain_view(
    update: Update,
    context: ContextTypes.DEFAULT_TYPE,
    formatter: Callable[..., str],
    parse_mode: Optional[str] = None
):
    query = update.callback_query
    await query.answer()

    chain = await _selected_chain(update)
    if chain is None:
        return

    text = await asyncio.to_thread(formatter, settings.registry_dir, chain)
    await _show_in_tracked_message(update, context, text, parse_mode)


async def chain_info_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Show chain summary, skipping the edit when nothing changed"""
    query = update.callback_query
    telegram_id = update.effective_user.id

    session = session_storage.get(telegram_id)
    if not session or not session.selected_chain:
        await query.answer()
        await update.effective_chat.send_message(NO_CHAIN_TEXT)
        return

    text = await asyncio.to_thread(chain_info, settings.registry_dir, session.selected_chain)
    if session.target and text == session.displayed_text:
        await query.answer("The chain information is already up to date.")
        return

    await query.answer()
    await _show_in_tracked_message(update, context, text, parse_mode='Markdown')


async def peer_nodes_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await _show_chain_view(update, context, chain_peer_nodes, parse_mode='Markdown')


async def endpoints_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await _show_chain_view(update, context, chain_endpoints, parse_mode='Markdown')


async def block_explorers_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await _show_chain_view(update, context, chain_block_explorers)


async def ibc_id_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Ask for an IBC denom hash"""
    query = update.callback_query
    await query.answer()

    chain = await _selected_chain(update)
    if chain is None:
        return

    await update.effective_chat.send_message(
        f"Enter IBC denom for {chain} as ibc/<hash>:"
    )


async def pool_incentives_callback(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Ask for a pool ID"""
    query = update.callback_query
    await query.answer()

    chain = await _selected_chain(update)
    if chain is None:
        return

    session_storage.await_pool_id(update.effective_user.id)
    await update.effective_chat.send_message(
        f"Enter pool_id for {chain} (AMM pool-type only), e.g. pool/1 or just 1:"
    )
