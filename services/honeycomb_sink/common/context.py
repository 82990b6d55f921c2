import contextvars
from typing import Optional

_message_id = contextvars.ContextVar("message_id", default=None)

def set_message_id(message_id: Optional[str]) -> contextvars.Token:
    return _message_id.set(message_id)

def reset_message_id(token: contextvars.Token) -> None:
    _message_id.reset(token)

def get_message_id() -> Optional[str]:
    return _message_id.get()
