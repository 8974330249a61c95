from typing import Dict

from fastapi import Request

FLASH_KEY = "flash"


def flash(request: Request, level: str, message: str) -> None:
    """Queue a one-shot message for the next page the client loads."""
    messages = dict(request.session.get(FLASH_KEY) or {})
    messages[level] = message
    request.session[FLASH_KEY] = messages


def pop_flash(request: Request) -> Dict[str, str]:
    return request.session.pop(FLASH_KEY, None) or {}
