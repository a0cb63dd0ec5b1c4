from __future__ import annotations

from typing import List

from ..dao import messages_dao
from ..dao.db import RecordNotFoundError
from ..domain.dates import InvalidInputError
from ..domain.models import Message
from . import events
from .auth import AuthContext, PermissionDenied

TABLE = "messages"
MAX_LENGTH = 2000


class MessageNotFoundError(RecordNotFoundError):
    """Raised when a message id is unknown."""


def _require_user(auth: AuthContext) -> str:
    if not auth.user_id:
        raise PermissionDenied("Sign in to use messages")
    return auth.user_id


def list_messages(auth: AuthContext, limit: int = 100) -> List[Message]:
    _require_user(auth)
    return messages_dao.list_messages(limit=max(1, min(limit, 500)))


def post_message(auth: AuthContext, content: str) -> str:
    sender = _require_user(auth)
    text = (content or "").strip()
    if not text:
        raise InvalidInputError("Message is empty")
    if len(text) > MAX_LENGTH:
        raise InvalidInputError(f"Message longer than {MAX_LENGTH} characters")
    message_id = messages_dao.create_message(sender, text)
    events.notify(TABLE, events.INSERT, message_id, sender_id=sender)
    return message_id


def mark_read(auth: AuthContext, message_id: str) -> None:
    user_id = _require_user(auth)
    if not messages_dao.message_exists(message_id):
        raise MessageNotFoundError(f"Message {message_id} not found")
    messages_dao.mark_read(message_id, user_id)
