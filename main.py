"""
Telegram bot for browsing the Cosmos chain registry
Pick a chain -> pick what to show
"""

import logging
from telegram import Update
from telegram.ext import (
    Application,
    CommandHandler,
    MessageHandler,
    CallbackQueryHandler,
    ContextTypes,
    filters
)

from config import settings
from handlers import (
    start,
    help_command,
    error_handler,
    select_chain_callback,
    change_page_callback,
    chain_info_callback,
    peer_nodes_callback,
    endpoints_callback,
    block_explorers_callback,
    ibc_id_callback,
    pool_incentives_callback,
    receive_text
)
from models import session_storage
from registry import RegistrySync
from api_client import api

# Logging setup
logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=logging.INFO
)
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)

registry_sync = RegistrySync(settings.registry_repo_url, settings.registry_dir, settings.stale_hours)


async def update_registry(context: ContextTypes.DEFAULT_TYPE):
    """Background job to clone or pull the chain registry"""
    await registry_sync.clone_or_update()


async def sweep_idle_sessions(context: ContextTypes.DEFAULT_TYPE):
    """Background job to drop sessions of users who went quiet"""
    removed = session_storage.sweep_idle(settings.session_idle_timeout)
    if removed:
        logger.info(f"Removed {removed} idle sessions")


async def sweep_stale_sessions(context: ContextTypes.DEFAULT_TYPE):
    """Background job to drop sessions created before the last registry refresh window"""
    removed = session_storage.sweep_stale(settings.stale_seconds)
    if removed:
        logger.info(f"Removed {removed} stale sessions")


async def close_api_client(application: Application) -> None:
    await api.close()


def register_handlers(application: Application) -> None:
    """Register all bot handlers"""
    application.add_handler(CommandHandler(["start", "reset"], start))
    application.add_handler(CommandHandler("help", help_command))

    # Chain list and action menu buttons
    application.add_handler(CallbackQueryHandler(select_chain_callback, pattern=r"^select_chain:(.+)$"))
    application.add_handler(CallbackQueryHandler(change_page_callback, pattern=r"^page:(-?\d+)$"))
    application.add_handler(CallbackQueryHandler(chain_info_callback, pattern="^chain_info$"))
    application.add_handler(CallbackQueryHandler(peer_nodes_callback, pattern="^peer_nodes$"))
    application.add_handler(CallbackQueryHandler(endpoints_callback, pattern="^endpoints$"))
    application.add_handler(CallbackQueryHandler(block_explorers_callback, pattern="^block_explorers$"))
    application.add_handler(CallbackQueryHandler(ibc_id_callback, pattern="^ibc_id$"))
    application.add_handler(CallbackQueryHandler(pool_incentives_callback, pattern="^pool_incentives$"))

    # ibc/<hash>, pool/<id> and anything else typed by the user
    application.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, receive_text))

    application.add_error_handler(error_handler)


def register_jobs(application: Application) -> None:
    """Schedule registry sync and session expiry"""
    application.job_queue.run_repeating(
        update_registry,
        interval=settings.stale_seconds,
        first=0
    )
    application.job_queue.run_repeating(
        sweep_idle_sessions,
        interval=settings.session_sweep_interval,
        first=settings.session_sweep_interval
    )
    application.job_queue.run_repeating(
        sweep_stale_sessions,
        interval=settings.stale_seconds,
        first=settings.stale_seconds
    )


def main():
    """Start the bot"""
    application = (
        Application.builder()
        .token(settings.telegram_bot_token)
        .concurrent_updates(True)
        .post_shutdown(close_api_client)
        .build()
    )

    register_handlers(application)
    register_jobs(application)

    logger.info("Starting bot...")
    application.run_polling(allowed_updates=Update.ALL_TYPES)


if __name__ == "__main__":
    main()
