from __future__ import annotations

from flask import Blueprint, jsonify

from ...services import messages_service
from ..common import current_auth, int_arg, json_payload

bp = Blueprint("messages", __name__)


@bp.route("/api/messages", methods=["GET"])
def list_messages():
    messages = messages_service.list_messages(current_auth(), limit=int_arg("limit", 100))
    return jsonify({"messages": [message.to_dict() for message in messages]})


@bp.route("/api/messages", methods=["POST"])
def post_message():
    message_id = messages_service.post_message(current_auth(), json_payload().get("content") or "")
    return jsonify({"id": message_id}), 201


@bp.route("/api/messages/<message_id>/read", methods=["POST"])
def mark_read(message_id: str):
    messages_service.mark_read(current_auth(), message_id)
    return jsonify({"ok": True})
