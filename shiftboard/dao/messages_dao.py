from __future__ import annotations

import uuid
from typing import List

from ..domain.models import Message
from . import db


def list_messages(limit: int = 100) -> List[Message]:
    rows = db.query_all(
        "SELECT id, sender_id, content, created_at FROM messages ORDER BY created_at DESC, rowid DESC LIMIT ?",
        (limit,),
    )
    ids = [row["id"] for row in rows]
    if not ids:
        return []
    placeholders = ", ".join("?" for _ in ids)
    reads = db.query_all(
        f"SELECT message_id, user_id FROM message_reads WHERE message_id IN ({placeholders}) ORDER BY user_id",
        ids,
    )
    read_by: dict[str, list[str]] = {}
    for row in reads:
        read_by.setdefault(row["message_id"], []).append(row["user_id"])
    return [
        Message(
            id=row["id"],
            sender_id=row["sender_id"],
            content=row["content"],
            created_at=row["created_at"],
            read_by=read_by.get(row["id"], []),
        )
        for row in rows
    ]


def create_message(sender_id: str, content: str) -> str:
    message_id = uuid.uuid4().hex
    db.execute("INSERT INTO messages(id, sender_id, content) VALUES (?, ?, ?)", (message_id, sender_id, content))
    # The sender has read their own message.
    mark_read(message_id, sender_id)
    return message_id


def mark_read(message_id: str, user_id: str) -> int:
    return db.execute(
        "INSERT OR IGNORE INTO message_reads(message_id, user_id) VALUES (?, ?)",
        (message_id, user_id),
    )


def message_exists(message_id: str) -> bool:
    return db.query_one("SELECT 1 FROM messages WHERE id = ?", (message_id,)) is not None
