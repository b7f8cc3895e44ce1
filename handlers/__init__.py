"""Handlers module exports"""

from .common import start, help_command, error_handler
from .menu import (
    select_chain_callback,
    change_page_callback,
    chain_info_callback,
    peer_nodes_callback,
    endpoints_callback,
    block_explorers_callback,
    ibc_id_callback,
    pool_incentives_callback
)
from .text_input import receive_text

__all__ = [
    'start',
    'help_command',
    'error_handler',
    'select_chain_callback',
    'change_page_callback',
    'chain_info_callback',
    'peer_nodes_callback',
    'endpoints_callback',
    'block_explorers_callback',
    'ibc_id_callback',
    'pool_incentives_callback',
    'receive_text'
]
