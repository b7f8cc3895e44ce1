import asyncio
import logging
from telegram import Update
from telegram.ext import ContextTypes

from config import settings
from models import session_storage
from keyboards import get_chain_list_keyboard
from registry import ChainCatalog

logger = logging.getLogger(__name__)

catalog = ChainCatalog(settings.registry_dir)


async def start(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """/start and /reset - fresh session and the first page of chains"""
    telegram_id = update.effective_user.id

    session_storage.reset(telegram_id)

    chains = await asyncio.to_thread(catalog.list)
    logger.info(f"User {telegram_id} started, {len(chains)} chains available")

    await update.effective_message.reply_text(
        "Select a chain:",
        reply_markup=get_chain_list_keyboard(chains, 0, settings.page_size)
    )


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Help command"""
    help_text = (
        "🤖 *Chain Registry Bot*\n\n"
        "*Available commands:*\n"
        "/start - Show the chain list\n"
        "/reset - Forget the selected chain and start over\n"
        "/help - Show this message\n\n"
        "*How to use:*\n"
        "1. Pick a chain from the list\n"
        "2. Choose what to show: info, peers, endpoints, explorers\n"
        "3. For IBC denoms send `ibc/<hash>`\n"
        "4. For pool incentives send `pool/<id>`"
    )

    await update.effective_message.reply_text(help_text, parse_mode='Markdown')


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE):
    """Log errors raised by handlers so the bot keeps serving"""
    logger.error(f"Error while handling update {update}: {context.error}", exc_info=context.error)
