"""States module exports"""

from .conversation import (
    PendingInput,
    Start,
    IbcQuery,
    PoolQuery,
    Unrecognized,
    TextCommand,
    parse_text_command
)

__all__ = [
    'PendingInput',
    'Start',
    'IbcQuery',
    'PoolQuery',
    'Unrecognized',
    'TextCommand',
    'parse_text_command'
]
