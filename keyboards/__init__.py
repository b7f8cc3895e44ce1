"""Keyboards module exports"""

from .inline import build_chain_rows, count_pages, get_chain_list_keyboard, get_action_menu_keyboard

__all__ = ['build_chain_rows', 'count_pages', 'get_chain_list_keyboard', 'get_action_menu_keyboard']
