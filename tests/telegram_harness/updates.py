from __future__ import annotations

import time
from typing import Any


def _user(user_id: int, language_code: str = "en") -> dict[str, Any]:
    return {
        "id": user_id,
        "is_bot": False,
        "first_name": f"Learner {user_id}",
        "username": f"learner{user_id}",
        "language_code": language_code,
    }


def raw_message_update(
    *,
    update_id: int,
    user_id: int,
    chat_id: int,
    text: str,
    message_id: int,
) -> dict[str, Any]:
    """Private-chat text message; commands get a bot_command entity like real clients send."""
    message: dict[str, Any] = {
        "message_id": message_id,
        "date": int(time.time()),
        "chat": {"id": chat_id, "type": "private"},
        "from": _user(user_id),
        "text": text,
    }
    if text.startswith("/"):
        command = text.split()[0]
        message["entities"] = [{"type": "bot_command", "offset": 0, "length": len(command)}]
    return {"update_id": update_id, "message": message}


def raw_callback_update(
    *,
    update_id: int,
    from_user_id: int,
    chat_id: int,
    message_dict: dict[str, Any],
    data: str,
) -> dict[str, Any]:
    return {
        "update_id": update_id,
        "callback_query": {
            "id": f"cb{update_id}",
            "from": _user(from_user_id),
            "message": message_dict,
            "chat_instance": str(chat_id),
            "data": data,
        },
    }
