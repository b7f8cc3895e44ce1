"""Inline keyboards for the bot"""

import math
from typing import Optional, Sequence

from telegram import InlineKeyboardButton, InlineKeyboardMarkup

CHAINS_PER_ROW = 3
SELECTED_MARKER = "🔴 "

ACTIONS = [
    ("Chain Info", "chain_info"),
    ("Peer Nodes", "peer_nodes"),
    ("Endpoints", "endpoints"),
    ("Block Explorers", "block_explorers"),
    ("IBC-ID", "ibc_id"),
    ("Pool Incentives [non-sc]", "pool_incentives"),
]


def count_pages(total: int, page_size: int) -> int:
    return math.ceil(total / page_size)


def build_chain_rows(
    chains: Sequence[str],
    page: int,
    page_size: int,
    highlighted: Optional[str] = None
) -> list[list[InlineKeyboardButton]]:
    """
    Buttons for one page of the chain list

    Args:
        chains: Full ordered chain list
        page: Zero-based page index, not range checked
        page_size: Chains per page
        highlighted: Chain to mark as selected

    Returns:
        Rows of up to three chain buttons, then a navigation row if any
    """
    total_pages = count_pages(len(chains), page_size)
    start = page * page_size
    # Negative starts would wrap around in a slice
    chunk = chains[start:start + page_size] if start >= 0 else []

    buttons = [
        InlineKeyboardButton(
            f"{SELECTED_MARKER}{chain}" if chain == highlighted else chain,
            callback_data=f"select_chain:{chain}"
        )
        for chain in chunk
    ]
    rows = [buttons[i:i + CHAINS_PER_ROW] for i in range(0, len(buttons), CHAINS_PER_ROW)]

    navigation = []
    if page > 0:
        navigation.append(InlineKeyboardButton("← Previous", callback_data=f"page:{page - 1}"))
    if page < total_pages - 1:
        navigation.append(InlineKeyboardButton("Next →", callback_data=f"page:{page + 1}"))
    if navigation:
        rows.append(navigation)

    return rows


def get_chain_list_keyboard(
    chains: Sequence[str],
    page: int,
    page_size: int,
    highlighted: Optional[str] = None
) -> InlineKeyboardMarkup:
    """Get keyboard with one page of chains"""
    return InlineKeyboardMarkup(build_chain_rows(chains, page, page_size, highlighted))


def get_action_menu_keyboard() -> InlineKeyboardMarkup:
    """Get keyboard with the six chain actions, two per row"""
    buttons = [InlineKeyboardButton(label, callback_data=data) for label, data in ACTIONS]
    keyboard = [buttons[i:i + 2] for i in range(0, len(buttons), 2)]
    return InlineKeyboardMarkup(keyboard)
