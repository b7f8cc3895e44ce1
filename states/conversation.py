"""Pending-input states and parsing of free-text messages"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Union


class PendingInput(IntEnum):
    """What the next free-text message from a user is expected to be"""
    NONE = 0
    AWAITING_POOL_ID = 1


IBC_PREFIX = "ibc/"
POOL_PREFIX = "pool/"


@dataclass(frozen=True)
class Start:
    pass


@dataclass(frozen=True)
class IbcQuery:
    ibc_hash: str


@dataclass(frozen=True)
class PoolQuery:
    pool_id: str


@dataclass(frozen=True)
class Unrecognized:
    text: str


TextCommand = Union[Start, IbcQuery, PoolQuery, Unrecognized]


def parse_text_command(text: str, pending: PendingInput = PendingInput.NONE) -> TextCommand:
    """
    Turn a raw message into a command by literal prefix

    Args:
        text: Message text as received
        pending: Pending input of the sender's session

    Returns:
        One of Start, IbcQuery, PoolQuery, Unrecognized
    """
    text = text.strip()

    if text == "/start":
        return Start()
    if text.startswith(IBC_PREFIX):
        return IbcQuery(text[len(IBC_PREFIX):])
    if text.startswith(POOL_PREFIX):
        return PoolQuery(text[len(POOL_PREFIX):])
    # A bare id is accepted once the user was asked for one
    if pending == PendingInput.AWAITING_POOL_ID and text.isdigit():
        return PoolQuery(text)
    return Unrecognized(text)
