"""Models module exports"""

from .session import MessageTarget, UserSession, SessionStorage, session_storage

__all__ = ['MessageTarget', 'UserSession', 'SessionStorage', 'session_storage']
