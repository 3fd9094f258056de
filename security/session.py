"""
security/session.py
--------------------
In-memory session store binding a chat identity (Telegram user id) to the
authenticated User principal. Sessions do not survive a restart.
"""

import threading
from typing import Optional

from models.user import User
from utils.logger import get_logger

logger = get_logger(__name__)


class SessionStore:
    """Maps chat ids to logged-in principals."""

    def __init__(self):
        self._principals: dict[int, User] = {}
        self._lock = threading.Lock()

    def login(self, chat_user_id: int, user: User) -> None:
        """Bind ``user`` as the principal of ``chat_user_id``, replacing any previous one."""
        with self._lock:
            self._principals[chat_user_id] = user
        logger.info(f"Chat user {chat_user_id} logged in as user #{user.user_id}")

    def get(self, chat_user_id: int) -> Optional[User]:
        """Return the principal bound to ``chat_user_id``, or None."""
        with self._lock:
            return self._principals.get(chat_user_id)

    def refresh(self, user: User) -> None:
        """Replace the stored principal in every session of ``user`` (after a profile edit)."""
        with self._lock:
            for chat_user_id, principal in self._principals.items():
                if principal.user_id == user.user_id:
                    self._principals[chat_user_id] = user

    def logout(self, chat_user_id: int) -> bool:
        """Drop the session. Returns True if one existed."""
        with self._lock:
            user = self._principals.pop(chat_user_id, None)
        if user is not None:
            logger.info(f"Chat user {chat_user_id} logged out (user #{user.user_id})")
        return user is not None

    def logout_user(self, user_id: int) -> int:
        """Drop every session bound to ``user_id``. Returns how many were removed."""
        with self._lock:
            stale = [cid for cid, p in self._principals.items() if p.user_id == user_id]
            for cid in stale:
                del self._principals[cid]
        return len(stale)


sessions = SessionStore()
